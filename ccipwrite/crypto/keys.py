"""
ccipwrite Keys Module
Handles secp256k1 key normalisation and EIP-191 message signing
"""

from typing import Union

from eth_account import Account
from eth_account.messages import encode_defunct
from eth_keys import keys
from eth_keys.constants import SECPK1_N
from eth_keys.exceptions import BadSignature, ValidationError
from web3 import Web3

from ..core.exceptions import InvalidInput

SIGNATURE_LENGTH = 65

KeyLike = Union[str, bytes, bytearray, keys.PublicKey]


def to_bytes(value: Union[str, bytes, bytearray, memoryview], name: str = "value") -> bytes:
    """Accept raw bytes or a hex string with or without 0x"""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        text = value[2:] if value[:2].lower() == "0x" else value
        try:
            return bytes.fromhex(text)
        except ValueError as e:
            raise InvalidInput(f"{name} is not valid hex") from e
    raise InvalidInput(f"{name} must be bytes or hex, got {type(value).__name__}")


def private_key_bytes(value: Union[str, bytes, bytearray]) -> bytes:
    """Validate a 32-byte secp256k1 private key"""
    raw = to_bytes(value, "private key")
    if len(raw) != 32:
        raise InvalidInput("Private key must be 32 bytes")
    scalar = int.from_bytes(raw, "big")
    if not 1 <= scalar < SECPK1_N:
        raise InvalidInput("Private key is outside the secp256k1 scalar range")
    return raw


def public_key_from_private(private_key: Union[bytes, bytearray]) -> bytes:
    """Uncompressed 64-byte public key (x || y)"""
    return keys.PrivateKey(private_key_bytes(private_key)).public_key.to_bytes()


def signer_address(key: KeyLike) -> str:
    """
    Checksummed address for an address or a public key.

    Public keys may be 64 raw bytes, 65 bytes with the 0x04 prefix or
    33 compressed bytes.
    """
    if isinstance(key, keys.PublicKey):
        return key.to_checksum_address()
    if isinstance(key, str) and Web3.is_address(key):
        return Web3.to_checksum_address(key)
    raw = to_bytes(key, "signer key")
    try:
        if len(raw) == 20:
            return Web3.to_checksum_address("0x" + raw.hex())
        if len(raw) == 65 and raw[0] == 4:
            raw = raw[1:]
        if len(raw) == 64:
            return keys.PublicKey(raw).to_checksum_address()
        if len(raw) == 33:
            return keys.PublicKey.from_compressed_bytes(raw).to_checksum_address()
    except (ValidationError, ValueError) as e:
        raise InvalidInput(f"Invalid public key: {e}") from e
    raise InvalidInput(f"Cannot derive an address from {len(raw)} key bytes")


def address_bytes(address: str) -> bytes:
    """The 20 raw bytes of an address"""
    if not isinstance(address, str) or not Web3.is_address(address):
        raise InvalidInput(f"Invalid address: {address!r}")
    return bytes.fromhex(Web3.to_checksum_address(address)[2:])


def sign_message(message: str, private_key: Union[bytes, bytearray]) -> bytes:
    """EIP-191 personal-sign a text message, returning r || s || v"""
    signed = Account.sign_message(
        encode_defunct(text=message),
        private_key=private_key_bytes(private_key)
    )
    return bytes(signed.signature)


def recover_signer(message: str, signature: Union[str, bytes]) -> str:
    """Recover the checksummed address that signed an EIP-191 text message"""
    raw = to_bytes(signature, "signature")
    if len(raw) != SIGNATURE_LENGTH:
        raise InvalidInput(f"Signature must be {SIGNATURE_LENGTH} bytes, got {len(raw)}")
    try:
        return Account.recover_message(encode_defunct(text=message), signature=raw)
    except (BadSignature, ValidationError, ValueError) as e:
        raise InvalidInput(f"Signature cannot be recovered: {e}") from e


def verify_signature(message: str, signature: Union[str, bytes], signer: KeyLike) -> bool:
    """Check that a signature over message recovers to signer"""
    try:
        return recover_signer(message, signature) == signer_address(signer)
    except InvalidInput:
        return False
