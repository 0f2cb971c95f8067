"""
Signing session: the derived private key for the lifetime of one session
"""

import threading
import uuid
from typing import Iterable, List, Optional, Union

from ..config.logging_config import get_component_logger
from ..core.exceptions import SessionClosed
from ..core.types import FieldRecord
from ..crypto.keygen import DerivedKeypair, derive_keypair
from .data_signer import DataSignature, sign_field, sign_fields
from .messages import Origin


class SigningSession:
    """
    Owns a DerivedKeypair and wipes it on close.

    sign_field may be called from several threads at once; close waits for
    no one and makes every later call raise SessionClosed.
    """

    def __init__(self, keypair: DerivedKeypair, session_id: Optional[str] = None):
        self._keypair = keypair
        self._lock = threading.Lock()
        self._closed = False
        self.session_id = session_id or uuid.uuid4().hex[:12]
        self.logger = get_component_logger("session", session=self.session_id)
        self.logger.info(f"Session opened for signer {keypair.address}")

    @classmethod
    def derive(
        cls,
        username: str,
        sig_keygen: Union[str, bytes, bytearray],
        password: Optional[str] = "",
        session_id: Optional[str] = None
    ) -> 'SigningSession':
        return cls(derive_keypair(username, sig_keygen, password), session_id=session_id)

    @property
    def address(self) -> str:
        return self._keypair.address

    @property
    def public_key(self) -> bytes:
        return self._keypair.public_key

    @property
    def closed(self) -> bool:
        return self._closed

    def _private_key(self) -> bytes:
        with self._lock:
            if self._closed:
                raise SessionClosed(f"Session {self.session_id} is closed")
            return self._keypair.private_key.copy()

    def sign_field(self, origin: Origin, record: FieldRecord) -> DataSignature:
        return sign_field(self._private_key(), origin, record)

    def sign_fields(
        self,
        origin: Origin,
        records: Iterable[FieldRecord],
        workers: Optional[int] = None
    ) -> List[DataSignature]:
        signatures = sign_fields(self._private_key(), origin, records, workers=workers)
        self.logger.info(f"Signed {len(signatures)} field(s)")
        return signatures

    def close(self):
        with self._lock:
            if self._closed:
                return
            self._keypair.wipe()
            self._closed = True
        self.logger.info("Session closed, key material wiped")

    def __enter__(self) -> 'SigningSession':
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
