"""
Payload envelope codec.

The envelope is abi.encode(address signer, bytes sigData, bytes approval,
bytes value), the layout resolving contracts decode before ecrecover.
"""

from dataclasses import dataclass
from typing import Tuple, Union

from eth_abi import encode as abi_encode, decode as abi_decode
from eth_abi.exceptions import DecodingError, EncodingError
from web3 import Web3

from ..core.exceptions import InvalidInput, MalformedPayload
from ..crypto.hashing import hex0x
from ..crypto.keys import SIGNATURE_LENGTH, signer_address, to_bytes, KeyLike

PAYLOAD_TYPES = ("address", "bytes", "bytes", "bytes")
HEAD_SIZE = 32 * len(PAYLOAD_TYPES)


@dataclass(frozen=True)
class Payload:
    signer: str
    data_signature: bytes
    approval_signature: bytes
    value: bytes

    def as_tuple(self) -> Tuple[str, bytes, bytes, bytes]:
        return self.signer, self.data_signature, self.approval_signature, self.value


def _signature(value: Union[bytes, str], name: str) -> bytes:
    raw = to_bytes(value, name)
    if len(raw) != SIGNATURE_LENGTH:
        raise InvalidInput(f"{name} must be {SIGNATURE_LENGTH} bytes, got {len(raw)}")
    return raw


def encode(
    signer: KeyLike,
    data_signature: Union[bytes, str],
    approval_signature: Union[bytes, str],
    value: Union[bytes, str]
) -> bytes:
    """Encode the (signer, dataSignature, approvalSignature, value) four-tuple"""
    if isinstance(value, str):
        value = value.encode("utf-8")
    try:
        return abi_encode(PAYLOAD_TYPES, [
            signer_address(signer),
            _signature(data_signature, "data signature"),
            _signature(approval_signature, "approval signature"),
            bytes(value)
        ])
    except EncodingError as e:
        raise InvalidInput(f"Payload cannot be encoded: {e}") from e


def encode_hex(
    signer: KeyLike,
    data_signature: Union[bytes, str],
    approval_signature: Union[bytes, str],
    value: Union[bytes, str]
) -> str:
    return hex0x(encode(signer, data_signature, approval_signature, value))


def decode(data: Union[bytes, str]) -> Payload:
    """Decode an envelope, rejecting anything that is not canonically encoded"""
    try:
        raw = to_bytes(data, "payload")
    except InvalidInput as e:
        raise MalformedPayload(str(e)) from e
    if len(raw) < HEAD_SIZE or len(raw) % 32:
        raise MalformedPayload(f"Payload of {len(raw)} bytes is truncated or misaligned")

    try:
        signer, data_signature, approval_signature, value = abi_decode(PAYLOAD_TYPES, raw)
    except (DecodingError, ValueError, OverflowError) as e:
        raise MalformedPayload(f"Payload cannot be decoded: {e}") from e

    for name, signature in (("data signature", data_signature), ("approval signature", approval_signature)):
        if len(signature) != SIGNATURE_LENGTH:
            raise MalformedPayload(f"{name} must be {SIGNATURE_LENGTH} bytes, got {len(signature)}")

    if abi_encode(PAYLOAD_TYPES, [signer, data_signature, approval_signature, value]) != raw:
        raise MalformedPayload("Payload is not canonically encoded")

    return Payload(
        signer=Web3.to_checksum_address(signer),
        data_signature=bytes(data_signature),
        approval_signature=bytes(approval_signature),
        value=bytes(value)
    )
