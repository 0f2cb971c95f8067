"""
Shared data model: identities, protocol scopes and field records
"""

import time
from dataclasses import dataclass
from typing import Dict, Any, List, Optional, Union

from web3 import Web3

from .exceptions import InvalidInput

UINT64_MAX = 2 ** 64 - 1


def _checksum(address: str) -> str:
    if not isinstance(address, str) or not Web3.is_address(address):
        raise InvalidInput(f"Invalid address: {address!r}")
    return Web3.to_checksum_address(address)


def _chain_id(value) -> int:
    if isinstance(value, bool):
        raise InvalidInput(f"Invalid chain id: {value!r}")
    try:
        chain_id = int(value)
    except (TypeError, ValueError) as e:
        raise InvalidInput(f"Invalid chain id: {value!r}") from e
    if chain_id < 0:
        raise InvalidInput(f"Invalid chain id: {value!r}")
    return chain_id


def _split_caip(value: str) -> List[str]:
    parts = value.split(":") if isinstance(value, str) else []
    if len(parts) != 3 or not all(parts):
        raise InvalidInput(f"Expected namespace:chainId:address, got {value!r}")
    return parts


@dataclass(frozen=True)
class Identity:
    """CAIP-10 account identity (namespace:chainId:address)"""
    chain_namespace: str
    chain_id: int
    wallet_address: str

    def __post_init__(self):
        if not self.chain_namespace:
            raise InvalidInput("Chain namespace must not be empty")
        object.__setattr__(self, "chain_id", _chain_id(self.chain_id))
        object.__setattr__(self, "wallet_address", _checksum(self.wallet_address))

    @property
    def caip10(self) -> str:
        return f"{self.chain_namespace}:{self.chain_id}:{self.wallet_address}"

    def __str__(self) -> str:
        return self.caip10

    @classmethod
    def parse(cls, value: str) -> 'Identity':
        namespace, chain_id, address = _split_caip(value)
        try:
            return cls(namespace, chain_id, address)
        except ValueError as e:
            raise InvalidInput(f"Invalid CAIP-10 identity {value!r}: {e}") from e

    def to_dict(self) -> Dict[str, Any]:
        return {
            "namespace": self.chain_namespace,
            "chainId": self.chain_id,
            "address": self.wallet_address
        }


@dataclass(frozen=True)
class ProtocolScope:
    """Contract a derived key is scoped to"""
    chain_namespace: str
    chain_id: int
    contract_address: str

    def __post_init__(self):
        if not self.chain_namespace:
            raise InvalidInput("Chain namespace must not be empty")
        object.__setattr__(self, "chain_id", _chain_id(self.chain_id))
        object.__setattr__(self, "contract_address", _checksum(self.contract_address))

    @property
    def caip(self) -> str:
        return f"{self.chain_namespace}:{self.chain_id}:{self.contract_address}"

    def __str__(self) -> str:
        return self.caip

    @classmethod
    def parse(cls, value: str) -> 'ProtocolScope':
        namespace, chain_id, address = _split_caip(value)
        try:
            return cls(namespace, chain_id, address)
        except ValueError as e:
            raise InvalidInput(f"Invalid protocol scope {value!r}: {e}") from e


@dataclass(frozen=True)
class FieldRecord:
    """
    One logical field update.

    data_type is a '/'-delimited path such as 'text/avatar'. String values
    are stored UTF-8 encoded.
    """
    data_type: str
    value: bytes
    timestamp: int

    def __post_init__(self):
        if not isinstance(self.data_type, str) or not self.data_type:
            raise InvalidInput("Data type must be a non-empty path")
        if not all(self.data_type.split("/")):
            raise InvalidInput(f"Data type has an empty segment: {self.data_type!r}")

        value = self.value
        if isinstance(value, str):
            value = value.encode("utf-8")
        elif isinstance(value, (bytearray, memoryview)):
            value = bytes(value)
        elif not isinstance(value, bytes):
            raise InvalidInput(f"Unsupported value type: {type(value).__name__}")
        object.__setattr__(self, "value", value)

        if isinstance(self.timestamp, bool) or not isinstance(self.timestamp, int):
            raise InvalidInput("Timestamp must be an integer")
        if not 0 <= self.timestamp <= UINT64_MAX:
            raise InvalidInput(f"Timestamp out of uint64 range: {self.timestamp}")

    @property
    def segments(self) -> List[str]:
        return self.data_type.split("/")

    def text(self) -> Optional[str]:
        """Return the value as text when it is valid UTF-8"""
        try:
            return self.value.decode("utf-8")
        except UnicodeDecodeError:
            return None

    @classmethod
    def create(
        cls,
        data_type: str,
        value: Union[str, bytes],
        timestamp: Optional[int] = None
    ) -> 'FieldRecord':
        if timestamp is None:
            timestamp = int(time.time())
        return cls(data_type=data_type, value=value, timestamp=timestamp)
