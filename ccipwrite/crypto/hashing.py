"""
Hash primitives: SHA-256, HMAC-SHA256, HKDF (RFC 5869), PBKDF2 (RFC 2898)
and Ethereum Keccak-256.

Every function is pure. Byte-for-byte agreement with other implementations
is required, so nothing here may add framing or normalisation of its own.
"""

import hashlib
import hmac

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from web3 import Web3

from ..core.exceptions import InvalidInput


def sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def hmac_sha256(key: bytes, data: bytes) -> bytes:
    return hmac.new(key, data, hashlib.sha256).digest()


def keccak256(data: bytes) -> bytes:
    """Ethereum Keccak-256 (pre-standard padding, not SHA3-256)"""
    return bytes(Web3.keccak(primitive=bytes(data)))


def hex0x(data: bytes) -> str:
    return "0x" + bytes(data).hex()


def hkdf(
    input_key_material: bytes,
    salt: bytes,
    info: bytes,
    length: int,
    algorithm: hashes.HashAlgorithm = None
) -> bytes:
    """
    HKDF extract-then-expand.

    An empty salt is treated as HashLen zero bytes, as RFC 5869 prescribes.
    """
    if length <= 0:
        raise InvalidInput("HKDF output length must be positive")
    try:
        kdf = HKDF(
            algorithm=algorithm or hashes.SHA256(),
            length=length,
            salt=bytes(salt) if salt else None,
            info=bytes(info) if info else None
        )
        return kdf.derive(bytes(input_key_material))
    except ValueError as e:
        raise InvalidInput(f"HKDF derivation rejected: {e}") from e


def pbkdf2(
    password: bytes,
    salt: bytes,
    iterations: int,
    length: int,
    algorithm: hashes.HashAlgorithm = None
) -> bytes:
    """PBKDF2-HMAC key stretching"""
    if iterations < 1:
        raise InvalidInput("PBKDF2 needs at least one iteration")
    if length <= 0:
        raise InvalidInput("PBKDF2 output length must be positive")
    kdf = PBKDF2HMAC(
        algorithm=algorithm or hashes.SHA256(),
        length=length,
        salt=bytes(salt),
        iterations=iterations
    )
    return kdf.derive(bytes(password))
