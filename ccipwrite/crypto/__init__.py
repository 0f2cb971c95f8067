"""
ccipwrite Crypto Package
"""

from .hashing import sha256, hmac_sha256, hkdf, pbkdf2, keccak256, hex0x
from .keys import sign_message, recover_signer, verify_signature, signer_address
from .session import SecretBuffer
from .keygen import (
    DerivedKeypair,
    derive_keypair,
    compute_extradata,
    iterations_from_salt,
    hash_to_private_key
)

__all__ = [
    'sha256',
    'hmac_sha256',
    'hkdf',
    'pbkdf2',
    'keccak256',
    'hex0x',
    'sign_message',
    'recover_signer',
    'verify_signature',
    'signer_address',
    'SecretBuffer',
    'DerivedKeypair',
    'derive_keypair',
    'compute_extradata',
    'iterations_from_salt',
    'hash_to_private_key'
]
