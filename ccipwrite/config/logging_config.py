import logging
import logging.handlers
import os
import re
from datetime import datetime
from typing import Optional, Union

from . import env

_PRIVATE_KEY_PATTERN = re.compile(r'(?<![0-9a-fA-F])(0x)?[0-9a-fA-F]{64}(?![0-9a-fA-F])')


class SecretRedactionFilter(logging.Filter):
    """Masks private-key sized hex strings in log records"""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = _PRIVATE_KEY_PATTERN.sub('[REDACTED]', message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def setup_logging(
    log_dir: Optional[str] = None,
    log_level: Union[int, str, None] = None,
    session_id: Optional[str] = None
) -> None:
    """Configure logging for the ccipwrite package

    Args:
        log_dir: Directory for rotating log files, console only when empty
        log_level: Logging level, defaults to CCIPWRITE_LOG_LEVEL
        session_id: Signing session id used to name the log files
    """
    log_dir = log_dir if log_dir is not None else env.LOG_DIR
    if log_level is None:
        log_level = env.LOG_LEVEL
    if isinstance(log_level, str):
        log_level = logging.getLevelName(log_level.upper())
        if not isinstance(log_level, int):
            log_level = logging.INFO

    handlers = []
    redaction = SecretRedactionFilter()

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    ))
    handlers.append(console_handler)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

        base_filename = datetime.now().strftime("%Y%m%d")
        if session_id:
            base_filename = f"{base_filename}_{session_id}"

        file_handler = logging.handlers.RotatingFileHandler(
            filename=os.path.join(log_dir, f"{base_filename}.log"),
            maxBytes=env.LOG_MAX_SIZE,
            backupCount=env.LOG_BACKUP_COUNT
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(pathname)s:%(lineno)d - %(message)s'
        ))
        handlers.append(file_handler)

        error_handler = logging.handlers.RotatingFileHandler(
            filename=os.path.join(log_dir, f"{base_filename}_error.log"),
            maxBytes=env.LOG_MAX_SIZE,
            backupCount=env.LOG_BACKUP_COUNT
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(pathname)s:%(lineno)d - %(message)s'
        ))
        handlers.append(error_handler)

    package_logger = logging.getLogger('ccipwrite')
    package_logger.setLevel(log_level)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        handler.addFilter(redaction)
        package_logger.addHandler(handler)
    package_logger.propagate = False

    package_logger.info(f"Logging initialized for session {session_id}")
    if log_dir:
        package_logger.info(f"Log directory: {os.path.abspath(log_dir)}")
    package_logger.info(f"Log level: {logging.getLevelName(log_level)}")


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the ccipwrite namespace

    Args:
        name: Logger name

    Returns:
        Configured logger
    """
    if name.startswith('ccipwrite'):
        return logging.getLogger(name)
    return logging.getLogger(f"ccipwrite.{name}")


class LoggerAdapter(logging.LoggerAdapter):
    """Adapter that prefixes log messages with context"""

    def process(self, msg, kwargs):
        context = {
            'component': self.extra.get('component'),
            'session': self.extra.get('session'),
            'origin': self.extra.get('origin')
        }

        context_str = ' '.join(f'[{k}={v}]' for k, v in context.items() if v)

        if context_str:
            msg = f"{context_str} {msg}"

        return msg, kwargs


def get_component_logger(
    component: str,
    session: Optional[str] = None,
    origin: Optional[str] = None
) -> LoggerAdapter:
    """Return a context-adapted logger for a component

    Args:
        component: Component name
        session: Signing session id
        origin: Name or account being written

    Returns:
        Logger adapter with context
    """
    logger = get_logger(component)

    extra = {
        'component': component,
        'session': session,
        'origin': origin
    }

    return LoggerAdapter(logger, extra)
