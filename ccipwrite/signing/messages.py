"""
Canonical signing messages.

Each message is a preamble line, a blank line, then "Key: value" lines in a
fixed order. Wallets display and sign these strings verbatim, so the layout
must stay byte-identical across implementations.
"""

from typing import Dict, List, Optional, Tuple, Union

from ..core.exceptions import InvalidInput, MalformedPayload
from ..core.types import Identity, ProtocolScope, FieldRecord
from ..crypto.hashing import keccak256, hex0x
from ..crypto.keygen import compute_extradata
from ..crypto.keys import to_bytes, signer_address, KeyLike

KEYGEN_PREAMBLE = "Requesting Signature To Generate Keypair(s)"
DATA_UPDATE_PREAMBLE = "Requesting Signature To Update Off-Chain Data"
APPROVAL_PREAMBLE = "Requesting Signature To Approve Data Signer"

KEYGEN_FIELDS = ("Origin", "Protocol", "Extradata")
DATA_UPDATE_FIELDS = ("Origin", "Data Type", "Data Value")
APPROVAL_FIELDS = ("Origin", "Approved Signer", "Approved By")

TEMPLATES = {
    KEYGEN_PREAMBLE: KEYGEN_FIELDS,
    DATA_UPDATE_PREAMBLE: DATA_UPDATE_FIELDS,
    APPROVAL_PREAMBLE: APPROVAL_FIELDS
}

Origin = Union[str, Identity]


def origin_text(origin: Origin) -> str:
    """Render an origin; identities become their CAIP-10 string"""
    if isinstance(origin, Identity):
        return origin.caip10
    if not isinstance(origin, str) or not origin.strip():
        raise InvalidInput("Origin must be a non-empty string or Identity")
    return origin


def _render(preamble: str, fields: List[Tuple[str, str]]) -> str:
    for key, value in fields:
        if "\n" in value or "\r" in value:
            raise InvalidInput(f"{key} must fit on a single line")
    body = "\n".join(f"{key}: {value}" for key, value in fields)
    return f"{preamble}\n\n{body}"


def format_keygen_request(
    origin: Origin,
    protocol: Union[ProtocolScope, str],
    extradata: Union[bytes, str]
) -> str:
    if isinstance(protocol, str):
        protocol = ProtocolScope.parse(protocol)
    extra = to_bytes(extradata, "extradata")
    if not extra:
        raise InvalidInput("Extradata must not be empty")
    return _render(KEYGEN_PREAMBLE, [
        ("Origin", origin_text(origin)),
        ("Protocol", protocol.caip),
        ("Extradata", hex0x(extra))
    ])


def build_keygen_request(
    origin: Origin,
    scope: ProtocolScope,
    identity: Identity,
    password: Optional[str] = ""
) -> str:
    """Keygen request for the wallet to sign, with extradata computed for identity"""
    extradata = compute_extradata(identity.caip10, password, identity.wallet_address)
    return format_keygen_request(origin, scope, extradata)


def data_value_digest(value: bytes, timestamp: int) -> bytes:
    """keccak256(value || uint64_be(timestamp)) binding a value to its timestamp"""
    return keccak256(bytes(value) + int(timestamp).to_bytes(8, "big"))


def format_data_update_request(origin: Origin, data_type: str, data_value: str) -> str:
    if not data_type:
        raise InvalidInput("Data type must not be empty")
    return _render(DATA_UPDATE_PREAMBLE, [
        ("Origin", origin_text(origin)),
        ("Data Type", data_type),
        ("Data Value", data_value)
    ])


def format_field_request(origin: Origin, record: FieldRecord) -> str:
    """Data-update message for one field record"""
    digest = data_value_digest(record.value, record.timestamp)
    return format_data_update_request(origin, record.data_type, hex0x(digest))


def format_approval_request(
    origin: Origin,
    approved_signer: KeyLike,
    approved_by: Union[Identity, str]
) -> str:
    if isinstance(approved_by, str):
        approved_by = Identity.parse(approved_by)
    return _render(APPROVAL_PREAMBLE, [
        ("Origin", origin_text(origin)),
        ("Approved Signer", signer_address(approved_signer)),
        ("Approved By", approved_by.caip10)
    ])


def parse_message(message: str) -> Tuple[str, Dict[str, str]]:
    """Split a signing message into its preamble and ordered fields"""
    if not isinstance(message, str) or "\n\n" not in message:
        raise MalformedPayload("Signing message has no preamble separator")
    preamble, body = message.split("\n\n", 1)
    expected = TEMPLATES.get(preamble)
    if expected is None:
        raise MalformedPayload(f"Unknown signing message preamble: {preamble!r}")

    fields: Dict[str, str] = {}
    for line in body.split("\n"):
        key, sep, value = line.partition(": ")
        if not sep or key in fields:
            raise MalformedPayload(f"Malformed message line: {line!r}")
        fields[key] = value

    if tuple(fields) != expected:
        raise MalformedPayload(
            f"Expected fields {', '.join(expected)}, got {', '.join(fields)}"
        )
    return preamble, fields
