"""
Write destinations.

A contract that defers a write names where it should go: another chain
(L2) or an off-chain gateway (database). Each kind is one variant of the
Destination union; routing happens outside this package.
"""

from dataclasses import dataclass
from typing import Any, ClassVar, Mapping, Optional, Union
from urllib.parse import urlparse

from web3 import Web3

from ..config import env
from ..core.exceptions import InvalidInput


@dataclass(frozen=True)
class L2Destination:
    chain_id: int
    contract: str

    kind: ClassVar[str] = "l2"

    def __post_init__(self):
        try:
            chain_id = int(self.chain_id)
        except (TypeError, ValueError) as e:
            raise InvalidInput(f"Invalid chain id: {self.chain_id!r}") from e
        if isinstance(self.chain_id, bool) or chain_id <= 0:
            raise InvalidInput(f"Invalid chain id: {self.chain_id!r}")
        if not isinstance(self.contract, str) or not Web3.is_address(self.contract):
            raise InvalidInput(f"Invalid contract address: {self.contract!r}")
        object.__setattr__(self, "chain_id", chain_id)
        object.__setattr__(self, "contract", Web3.to_checksum_address(self.contract))

    def to_dict(self):
        return {"chainId": self.chain_id, "contractAddress": self.contract}


@dataclass(frozen=True)
class DatabaseDestination:
    gateway_url: str

    kind: ClassVar[str] = "database"

    def __post_init__(self):
        parsed = urlparse(self.gateway_url or "")
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise InvalidInput(f"Invalid gateway url: {self.gateway_url!r}")

    def to_dict(self):
        return {"gatewayUrl": self.gateway_url}


Destination = Union[L2Destination, DatabaseDestination]


def parse_destination(data: Mapping[str, Any]) -> Destination:
    """Build the destination variant matching the keys of a dispatch descriptor"""
    if not isinstance(data, Mapping):
        raise InvalidInput("Destination descriptor must be a mapping")

    kind = data.get("kind")
    if kind not in (None, L2Destination.kind, DatabaseDestination.kind):
        raise InvalidInput(f"Unknown destination kind: {kind!r}")

    if kind == DatabaseDestination.kind or (kind is None and "gatewayUrl" in data):
        if "gatewayUrl" not in data:
            raise InvalidInput("Database destination needs gatewayUrl")
        return DatabaseDestination(gateway_url=data["gatewayUrl"])

    contract = data.get("contractAddress", data.get("contract"))
    if "chainId" in data and contract is not None:
        return L2Destination(chain_id=data["chainId"], contract=contract)

    raise InvalidInput(f"Unrecognised destination descriptor: {sorted(data)}")


def default_destination() -> Optional[DatabaseDestination]:
    """Gateway destination from CCIPWRITE_GATEWAY_URL, if configured"""
    if not env.GATEWAY_URL:
        return None
    return DatabaseDestination(gateway_url=env.GATEWAY_URL)
