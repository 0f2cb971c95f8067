"""
Gateway submission requests.

Field names and nesting are part of the gateway interface:

    contenthash   -> payload["contenthash"]             (flat field)
    address/60    -> payload["address"][i]["index"]==60 (indexed-array field)
    text/avatar   -> payload["text"]["avatar"]          (keyed-array field)
"""

import logging
from typing import Dict, Iterable, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from ..core.exceptions import InvalidInput, UnauthorizedSigner
from ..core.types import FieldRecord, Identity
from ..crypto.hashing import keccak256, hex0x
from ..signing.approval import ApprovalSignature
from ..signing.data_signer import DataSignature
from ..signing.messages import origin_text, Origin
from ..signing.session import SigningSession
from .codec import encode_hex

logger = logging.getLogger(__name__)

FLAT = "flat"
INDEXED = "indexed"
KEYED = "keyed"


class GatewayEntry(BaseModel):
    value: str = Field(description="Field value as text, or 0x hex for binary values")
    signature: str = Field(description="Data signature, 0x hex")
    timestamp: int = Field(description="Unix timestamp of the update")
    data: str = Field(description="Encoded payload envelope, 0x hex")


class IndexedGatewayEntry(GatewayEntry):
    index: int = Field(description="Position inside the indexed array")


PayloadTree = Dict[str, Union[GatewayEntry, Dict[str, GatewayEntry], List[IndexedGatewayEntry]]]


class GatewayRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    node: str = Field(description="ENS namehash of the origin")
    preimage: str = Field(description="Origin the node hashes from")
    chain_id: int = Field(alias="chainId", description="Chain id of the deferring contract")
    approval: str = Field(description="Owner approval signature, 0x hex")
    payload: PayloadTree = Field(default_factory=dict)

    def to_json_dict(self) -> dict:
        return self.model_dump(by_alias=True)


def namehash(name: str) -> bytes:
    """ENS namehash; name is expected to be normalised already"""
    node = b"\x00" * 32
    if name:
        for label in reversed(name.split(".")):
            node = keccak256(node + keccak256(label.encode("utf-8")))
    return node


def classify_data_type(data_type: str) -> Tuple[str, str, Optional[Union[str, int]]]:
    """Return (kind, field, key) for a data type path"""
    head, _, rest = data_type.partition("/")
    if not rest:
        return FLAT, head, None
    if rest.isascii() and rest.isdigit():
        return INDEXED, head, int(rest)
    return KEYED, head, rest


def gateway_entry(record: FieldRecord, signature: DataSignature, data: str) -> GatewayEntry:
    text = record.text()
    return GatewayEntry(
        value=text if text is not None else hex0x(record.value),
        signature=signature.signature_hex,
        timestamp=record.timestamp,
        data=data
    )


def build_payload_tree(entries: Iterable[Tuple[FieldRecord, GatewayEntry]]) -> PayloadTree:
    tree: PayloadTree = {}
    kinds: Dict[str, str] = {}
    seen = set()

    for record, entry in entries:
        if record.data_type in seen:
            raise InvalidInput(f"Duplicate data type in request: {record.data_type}")
        seen.add(record.data_type)

        kind, field, key = classify_data_type(record.data_type)
        if kinds.setdefault(field, kind) != kind:
            raise InvalidInput(f"{field} is used as both {kinds[field]} and {kind} field")

        if kind == FLAT:
            tree[field] = entry
        elif kind == INDEXED:
            tree.setdefault(field, []).append(
                IndexedGatewayEntry(index=key, **entry.model_dump())
            )
        else:
            tree.setdefault(field, {})[key] = entry

    for field, kind in kinds.items():
        if kind == INDEXED:
            tree[field].sort(key=lambda item: item.index)
    return tree


def build_write_request(
    session: SigningSession,
    origin: Origin,
    identity: Identity,
    approval: ApprovalSignature,
    records: Iterable[FieldRecord],
    chain_id: Optional[int] = None,
    workers: Optional[int] = None
) -> GatewayRequest:
    """Sign every record and bundle the results for the gateway"""
    records = list(records)
    if not records:
        raise InvalidInput("Nothing to write")
    if approval.approved_signer != session.address:
        raise UnauthorizedSigner(
            f"Approval names {approval.approved_signer}, session signs as {session.address}"
        )

    signatures = session.sign_fields(origin, records, workers=workers)
    entries = []
    for record, signature in zip(records, signatures):
        data = encode_hex(session.address, signature.signature, approval.signature, record.value)
        entries.append((record, gateway_entry(record, signature, data)))

    name = origin_text(origin)
    request = GatewayRequest(
        node=hex0x(namehash(name)),
        preimage=name,
        chain_id=identity.chain_id if chain_id is None else chain_id,
        approval=approval.signature_hex,
        payload=build_payload_tree(entries)
    )
    logger.info(f"Prepared {len(entries)} field(s) for {name}")
    return request
