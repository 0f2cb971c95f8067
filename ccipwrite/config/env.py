"""
Environment configuration loader for ccipwrite
"""
import os
import json
from typing import List

from dotenv import load_dotenv

load_dotenv()


def get_env_str(key: str, default: str = "") -> str:
    """Get string environment variable with default"""
    return os.getenv(key, default)


def get_env_int(key: str, default: int = 0) -> int:
    """Get integer environment variable with default"""
    try:
        return int(os.getenv(key, str(default)))
    except ValueError:
        return default


def get_env_bool(key: str, default: bool = False) -> bool:
    """Get boolean environment variable with default"""
    return str(os.getenv(key, str(default))).lower() in ('true', '1', 'yes')


def get_env_list(key: str, default: List = None) -> List:
    """Get list environment variable (JSON array or comma separated)"""
    value = os.getenv(key)
    if not value:
        return default or []
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError:
        return [item.strip() for item in value.split(",") if item.strip()]
    return parsed if isinstance(parsed, list) else [parsed]


# Logging Configuration
LOG_LEVEL = get_env_str("CCIPWRITE_LOG_LEVEL", "INFO")
LOG_DIR = get_env_str("CCIPWRITE_LOG_DIR")
LOG_MAX_SIZE = get_env_int("CCIPWRITE_LOG_MAX_SIZE", 10485760)  # 10MB
LOG_BACKUP_COUNT = get_env_int("CCIPWRITE_LOG_BACKUP_COUNT", 5)

# Signing
SIGNING_WORKERS = get_env_int("CCIPWRITE_SIGNING_WORKERS", 1)

# Chain defaults
CHAIN_NAMESPACE = get_env_str("CCIPWRITE_CHAIN_NAMESPACE", "eip155")
CHAIN_ID = get_env_int("CCIPWRITE_CHAIN_ID", 1)
AUTHORIZED_OWNERS = get_env_list("CCIPWRITE_AUTHORIZED_OWNERS", [])

# Gateway
GATEWAY_URL = get_env_str("CCIPWRITE_GATEWAY_URL")

# Security Keys
OWNER_PRIVATE_KEY = get_env_str("CCIPWRITE_OWNER_PRIVATE_KEY")


def signing_workers() -> int:
    """Worker count for batch signing, never below one"""
    return max(1, get_env_int("CCIPWRITE_SIGNING_WORKERS", SIGNING_WORKERS))
