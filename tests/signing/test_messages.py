import pytest

from ccipwrite.core.exceptions import InvalidInput, MalformedPayload
from ccipwrite.core.types import FieldRecord, Identity, ProtocolScope
from ccipwrite.crypto import keygen
from ccipwrite.crypto.keygen import compute_extradata
from ccipwrite.crypto.keys import public_key_from_private
from ccipwrite.signing.messages import (
    KEYGEN_PREAMBLE,
    DATA_UPDATE_PREAMBLE,
    APPROVAL_PREAMBLE,
    format_keygen_request,
    build_keygen_request,
    format_data_update_request,
    format_field_request,
    format_approval_request,
    data_value_digest,
    parse_message,
    origin_text
)

ADDRESS = "0x2c7536E3605D9C16a7a3D7b1898e529396a65c23"
KEY = bytes.fromhex("4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318")
CONTRACT = "0x" + "AB" * 20


def test_keygen_layout():
    scope = ProtocolScope("eip155", 1, CONTRACT)
    message = format_keygen_request("domain.eth", scope, b"\x01" * 32)
    assert message == (
        "Requesting Signature To Generate Keypair(s)\n"
        "\n"
        "Origin: domain.eth\n"
        f"Protocol: eip155:1:{scope.contract_address}\n"
        f"Extradata: 0x{'01' * 32}"
    )


def test_keygen_accepts_protocol_string():
    scope = ProtocolScope("eip155", 1, CONTRACT)
    assert format_keygen_request("domain.eth", scope.caip, "0x01") == \
        format_keygen_request("domain.eth", scope, b"\x01")


def test_keygen_needs_extradata():
    with pytest.raises(InvalidInput):
        format_keygen_request("domain.eth", ProtocolScope("eip155", 1, CONTRACT), b"")


def test_build_keygen_request_computes_extradata(monkeypatch):
    monkeypatch.setattr(keygen, "iterations_from_salt", lambda salt: 1)
    identity = Identity("eip155", 1, ADDRESS)
    scope = ProtocolScope("eip155", 1, CONTRACT)
    extradata = compute_extradata(identity.caip10, "pw", ADDRESS)
    message = build_keygen_request("domain.eth", scope, identity, "pw")
    assert message == format_keygen_request("domain.eth", scope, extradata)


def test_data_update_layout():
    message = format_data_update_request("domain.eth", "text/avatar", "0xabc")
    assert message == (
        f"{DATA_UPDATE_PREAMBLE}\n\n"
        "Origin: domain.eth\n"
        "Data Type: text/avatar\n"
        "Data Value: 0xabc"
    )


def test_field_request_binds_value_and_timestamp():
    record = FieldRecord("text/avatar", "https://domain.com/avatar", 1708329377)
    digest = data_value_digest(record.value, record.timestamp)
    assert digest == data_value_digest(
        b"https://domain.com/avatar", 1708329377
    )
    _, fields = parse_message(format_field_request("domain.eth", record))
    assert fields["Data Value"] == "0x" + digest.hex()

    later = FieldRecord("text/avatar", "https://domain.com/avatar", 1708329378)
    assert format_field_request("domain.eth", later) != format_field_request("domain.eth", record)


def test_approval_layout_normalises_signer():
    identity = Identity("eip155", 1, ADDRESS)
    from_address = format_approval_request("domain.eth", ADDRESS.lower(), identity)
    from_key = format_approval_request("domain.eth", public_key_from_private(KEY), identity.caip10)
    assert from_address == from_key == (
        f"{APPROVAL_PREAMBLE}\n\n"
        "Origin: domain.eth\n"
        f"Approved Signer: {ADDRESS}\n"
        f"Approved By: eip155:1:{ADDRESS}"
    )


def test_identity_origin_renders_caip10():
    identity = Identity("eip155", 1, ADDRESS.lower())
    assert origin_text(identity) == f"eip155:1:{ADDRESS}"
    with pytest.raises(InvalidInput):
        origin_text("  ")


def test_values_must_be_single_line():
    with pytest.raises(InvalidInput):
        format_data_update_request("domain.eth\nOrigin: evil.eth", "text/avatar", "0x00")


def test_parse_message_round_trip():
    message = format_data_update_request("domain.eth", "address/60", "0x01")
    preamble, fields = parse_message(message)
    assert preamble == DATA_UPDATE_PREAMBLE
    assert fields == {"Origin": "domain.eth", "Data Type": "address/60", "Data Value": "0x01"}


@pytest.mark.parametrize("message", [
    "no separator",
    "Unknown Preamble\n\nOrigin: a",
    f"{KEYGEN_PREAMBLE}\n\nOrigin: a\nProtocol: b",
    f"{KEYGEN_PREAMBLE}\n\nProtocol: b\nOrigin: a\nExtradata: 0x01",
    f"{KEYGEN_PREAMBLE}\n\nOrigin: a\nOrigin: a\nExtradata: 0x01",
    f"{APPROVAL_PREAMBLE}\n\nOrigin a\nApproved Signer: b\nApproved By: c",
])
def test_parse_message_rejects_deviations(message):
    with pytest.raises(MalformedPayload):
        parse_message(message)
