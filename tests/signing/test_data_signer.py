import pytest

from ccipwrite.core.exceptions import SignatureMismatch
from ccipwrite.core.types import FieldRecord, Identity
from ccipwrite.crypto.keys import public_key_from_private
from ccipwrite.crypto.session import SecretBuffer
from ccipwrite.signing.data_signer import (
    sign_field,
    sign_fields,
    recover_field_signer,
    verify_field,
    require_field_signer
)

ADDRESS = "0x2c7536E3605D9C16a7a3D7b1898e529396a65c23"


def test_avatar_signature_is_deterministic_and_recoverable(owner_key, avatar):
    first = sign_field(owner_key, "domain.eth", avatar)
    second = sign_field(SecretBuffer(owner_key), "domain.eth", avatar)
    assert first == second
    assert len(first.signature) == 65
    assert first.signer == ADDRESS
    assert first.data_type == "text/avatar"
    assert first.timestamp == 1708329377
    assert recover_field_signer("domain.eth", avatar, first) == ADDRESS
    assert verify_field("domain.eth", avatar, first.signature_hex, public_key_from_private(owner_key))


@pytest.mark.parametrize("origin,record", [
    ("domain.eth", FieldRecord("text/avatar", "https://domain.com/other", 1708329377)),
    ("domain.eth", FieldRecord("text/avatar", "https://domain.com/avatar", 1708329378)),
    ("domain.eth", FieldRecord("text/url", "https://domain.com/avatar", 1708329377)),
    ("other.eth", FieldRecord("text/avatar", "https://domain.com/avatar", 1708329377)),
])
def test_signature_does_not_transfer(owner_key, avatar, origin, record):
    signature = sign_field(owner_key, "domain.eth", avatar)
    assert not verify_field(origin, record, signature, ADDRESS)


def test_identity_origin(owner_key, avatar):
    identity = Identity("eip155", 1, ADDRESS)
    signature = sign_field(owner_key, identity, avatar)
    assert verify_field(identity.caip10, avatar, signature, ADDRESS)


def test_require_field_signer(owner_key, other_key, avatar):
    signature = sign_field(owner_key, "domain.eth", avatar)
    assert require_field_signer("domain.eth", avatar, signature, ADDRESS) == ADDRESS
    with pytest.raises(SignatureMismatch):
        require_field_signer("domain.eth", avatar, signature, public_key_from_private(other_key))
    with pytest.raises(SignatureMismatch):
        require_field_signer("domain.eth", avatar, b"\x01" * 64 + b"\x1b", ADDRESS)
    with pytest.raises(SignatureMismatch):
        require_field_signer("domain.eth", avatar, b"\x00" * 10, ADDRESS)


def test_batch_keeps_order_across_workers(owner_key):
    records = [
        FieldRecord(f"text/key{i}", f"value {i}", 1708329377 + i)
        for i in range(6)
    ]
    sequential = sign_fields(owner_key, "domain.eth", records, workers=1)
    parallel = sign_fields(owner_key, "domain.eth", records, workers=4)
    assert sequential == parallel
    assert [s.data_type for s in parallel] == [r.data_type for r in records]
    for record, signature in zip(records, parallel):
        assert verify_field("domain.eth", record, signature, ADDRESS)


def test_empty_batch(owner_key):
    assert sign_fields(owner_key, "domain.eth", [], workers=2) == []
