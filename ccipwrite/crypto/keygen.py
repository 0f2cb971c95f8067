"""
Deterministic keypair derivation from a wallet signature.

The gateway never stores the derived private key, so the same
(username, sigKeygen, password) must always produce the same keypair:

    input_key = sha256(sigKeygen)
    salt      = sha256(username ":" 0x<sha256(password)> ":" 0x<sigKeygen>)
    hash_key  = HKDF-SHA256(input_key, salt, info=username, L=42)
    private   = hash_key mod (n - 1) + 1

The keygen request message additionally carries extradata, a keccak of a
PBKDF2 stretch of the password, which makes offline guessing against a
captured sigKeygen expensive.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Union

from eth_keys import keys
from eth_keys.constants import SECPK1_N
from eth_keys.exceptions import ValidationError

from ..core.exceptions import InvalidInput, DerivationFailure
from .hashing import sha256, keccak256, hkdf, pbkdf2, hex0x
from .keys import to_bytes, address_bytes
from .session import SecretBuffer

logger = logging.getLogger(__name__)

HKDF_KEY_LENGTH = 42
EXTRADATA_KEY_LENGTH = 32
ITERATION_NIBBLES = 5
MAX_ITERATIONS = 0xFFFFF  # 1048575
MIN_SEED_LENGTH = 40
MAX_SEED_LENGTH = 1024


@dataclass
class DerivedKeypair:
    """secp256k1 keypair owned by one signing session"""
    private_key: SecretBuffer
    public_key: bytes
    address: str

    def wipe(self) -> None:
        self.private_key.wipe()

    def __enter__(self) -> 'DerivedKeypair':
        return self

    def __exit__(self, exc_type, exc, tb):
        self.wipe()
        return False


def hash_to_private_key(seed: Union[bytes, bytearray, memoryview]) -> SecretBuffer:
    """
    Map seed bytes to a scalar in [1, n-1] (FIPS 186-4 B.4.1).

    The reduction is total, so there is no retry path: any seed of an
    accepted length yields exactly one valid key.
    """
    length = len(seed)
    if not MIN_SEED_LENGTH <= length <= MAX_SEED_LENGTH:
        raise DerivationFailure(
            f"Seed must be {MIN_SEED_LENGTH}-{MAX_SEED_LENGTH} bytes, got {length}"
        )
    scalar = int.from_bytes(bytes(seed), "big") % (SECPK1_N - 1) + 1
    return SecretBuffer(scalar.to_bytes(32, "big"))


def derive_keypair(
    username: str,
    sig_keygen: Union[str, bytes, bytearray],
    password: Optional[str] = ""
) -> DerivedKeypair:
    """Derive the session keypair; secrets are wiped on every exit path"""
    if not isinstance(username, str) or not username:
        raise InvalidInput("Username must not be empty")
    if password is None:
        password = ""

    signature = SecretBuffer(to_bytes(sig_keygen, "sigKeygen"))
    hash_key = None
    private_key = None
    try:
        if not signature:
            raise InvalidInput("sigKeygen must not be empty")

        input_key = sha256(signature.view())
        password_hash = hex0x(sha256(password.encode("utf-8")))
        salt = sha256(
            f"{username}:{password_hash}:{hex0x(signature.view())}".encode("utf-8")
        )
        hash_key = SecretBuffer(
            hkdf(input_key, salt, username.encode("utf-8"), HKDF_KEY_LENGTH)
        )
        private_key = hash_to_private_key(hash_key.view())

        try:
            public_key = keys.PrivateKey(private_key.copy()).public_key
        except ValidationError as e:
            raise DerivationFailure(f"Derived scalar rejected by secp256k1: {e}") from e

        keypair = DerivedKeypair(
            private_key=private_key,
            public_key=public_key.to_bytes(),
            address=public_key.to_checksum_address()
        )
        logger.debug(f"Derived signer {keypair.address}")
        private_key = None
        return keypair
    finally:
        signature.wipe()
        if hash_key is not None:
            hash_key.wipe()
        if private_key is not None:
            private_key.wipe()


def iterations_from_salt(salt: bytes) -> int:
    """PBKDF2 round count from the last five hex nibbles of salt (0..0xFFFFF)"""
    if not salt:
        raise InvalidInput("Salt must not be empty")
    return int(bytes(salt).hex()[-ITERATION_NIBBLES:], 16)


def compute_extradata(username: str, password: Optional[str], wallet_address: str) -> bytes:
    """keccak256(pbkdf2(password, keccak256(username), rounds) || wallet address)"""
    if not isinstance(username, str) or not username:
        raise InvalidInput("Username must not be empty")
    wallet = address_bytes(wallet_address)

    salt = keccak256(username.encode("utf-8"))
    # PBKDF2 needs at least one round
    rounds = max(1, iterations_from_salt(salt))
    with SecretBuffer(pbkdf2((password or "").encode("utf-8"), salt, rounds, EXTRADATA_KEY_LENGTH)) as stretched:
        return keccak256(bytes(stretched.view()) + wallet)
