"""
Per-field data signatures made with the derived session key
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterable, List, Optional, Union

from ..config.env import signing_workers
from ..core.exceptions import InvalidInput, SignatureMismatch
from ..core.types import FieldRecord
from ..crypto.hashing import hex0x
from ..crypto.keys import (
    sign_message,
    recover_signer,
    signer_address,
    public_key_from_private,
    to_bytes,
    KeyLike
)
from ..crypto.session import SecretBuffer
from .messages import format_field_request, Origin

logger = logging.getLogger(__name__)

PrivateKeyLike = Union[bytes, bytearray, SecretBuffer]


@dataclass(frozen=True)
class DataSignature:
    """Recoverable signature over one field record"""
    data_type: str
    signature: bytes
    timestamp: int
    signer: str

    @property
    def signature_hex(self) -> str:
        return hex0x(self.signature)


def _key_bytes(private_key: PrivateKeyLike) -> bytes:
    if isinstance(private_key, SecretBuffer):
        return private_key.copy()
    return bytes(private_key)


def sign_field(private_key: PrivateKeyLike, origin: Origin, record: FieldRecord) -> DataSignature:
    """Sign the data-update message of a single record"""
    key = _key_bytes(private_key)
    message = format_field_request(origin, record)
    signature = sign_message(message, key)
    signer = signer_address(public_key_from_private(key))
    logger.debug(f"Signed {record.data_type} at {record.timestamp} as {signer}")
    return DataSignature(
        data_type=record.data_type,
        signature=signature,
        timestamp=record.timestamp,
        signer=signer
    )


def sign_fields(
    private_key: PrivateKeyLike,
    origin: Origin,
    records: Iterable[FieldRecord],
    workers: Optional[int] = None
) -> List[DataSignature]:
    """
    Sign an ordered batch of records.

    Each signature is independent, so the batch may be spread over a thread
    pool; results keep the input order.
    """
    records = list(records)
    workers = workers or signing_workers()
    if workers <= 1 or len(records) <= 1:
        return [sign_field(private_key, origin, record) for record in records]

    with ThreadPoolExecutor(max_workers=workers) as executor:
        return list(executor.map(
            lambda record: sign_field(private_key, origin, record),
            records
        ))


def _signature_bytes(signature: Union[DataSignature, bytes, str]) -> bytes:
    if isinstance(signature, DataSignature):
        return signature.signature
    return to_bytes(signature, "data signature")


def recover_field_signer(
    origin: Origin,
    record: FieldRecord,
    signature: Union[DataSignature, bytes, str]
) -> str:
    """Address that signed record's data-update message"""
    message = format_field_request(origin, record)
    return recover_signer(message, _signature_bytes(signature))


def verify_field(
    origin: Origin,
    record: FieldRecord,
    signature: Union[DataSignature, bytes, str],
    expected_signer: KeyLike
) -> bool:
    try:
        require_field_signer(origin, record, signature, expected_signer)
        return True
    except (SignatureMismatch, InvalidInput) as e:
        logger.warning(f"Data signature for {record.data_type} rejected: {e}")
        return False


def require_field_signer(
    origin: Origin,
    record: FieldRecord,
    signature: Union[DataSignature, bytes, str],
    expected_signer: KeyLike
) -> str:
    """Recover the signer and insist it is expected_signer"""
    expected = signer_address(expected_signer)
    try:
        recovered = recover_field_signer(origin, record, signature)
    except InvalidInput as e:
        raise SignatureMismatch(f"Data signature is not recoverable: {e}") from e
    if recovered != expected:
        raise SignatureMismatch(
            f"Data signature recovers to {recovered}, expected {expected}"
        )
    return recovered
