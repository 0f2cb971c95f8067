import pytest

from ccipwrite.core.exceptions import UnauthorizedSigner
from ccipwrite.core.types import Identity
from ccipwrite.crypto.keys import public_key_from_private
from ccipwrite.signing.approval import (
    ApprovalManager,
    sign_approval,
    require_approval,
    verify_approval
)

OWNER = "0x2c7536E3605D9C16a7a3D7b1898e529396a65c23"
SIGNER = "0x" + "33" * 20
NEW_SIGNER = "0x" + "44" * 20


def test_owner_approval_verifies(owner_key, identity):
    approval = sign_approval(owner_key, "domain.eth", identity, SIGNER)
    assert approval.approved_signer == SIGNER
    assert approval.approved_by == identity.caip10
    assert len(approval.signature) == 65
    assert verify_approval(approval, "domain.eth", identity, SIGNER, [OWNER])
    assert verify_approval(
        approval, "domain.eth", identity, SIGNER, [public_key_from_private(owner_key)]
    )
    assert require_approval(approval, "domain.eth", identity, SIGNER, [OWNER]) == OWNER


def test_raw_signature_is_checked_against_rebuilt_message(owner_key, identity):
    approval = sign_approval(owner_key, "domain.eth", identity, SIGNER)
    assert verify_approval(approval.signature, "domain.eth", identity, SIGNER, [OWNER])
    assert verify_approval(approval.signature_hex, "domain.eth", identity, SIGNER, [OWNER])
    assert not verify_approval(approval.signature, "domain.eth", identity, NEW_SIGNER, [OWNER])


def test_unauthorized_owner_rejected(other_key, identity):
    approval = sign_approval(other_key, "domain.eth", identity, SIGNER)
    assert not verify_approval(approval, "domain.eth", identity, SIGNER, [OWNER])
    with pytest.raises(UnauthorizedSigner):
        require_approval(approval, "domain.eth", identity, SIGNER, [OWNER])


def test_other_signer_rejected(owner_key, identity):
    approval = sign_approval(owner_key, "domain.eth", identity, SIGNER)
    assert not verify_approval(approval, "domain.eth", identity, NEW_SIGNER, [OWNER])


def test_other_origin_or_identity_rejected(owner_key, identity):
    approval = sign_approval(owner_key, "domain.eth", identity, SIGNER)
    assert not verify_approval(approval, "other.eth", identity, SIGNER, [OWNER])
    other = Identity("eip155", 10, OWNER)
    assert not verify_approval(approval, "domain.eth", other, SIGNER, [OWNER])


def test_no_owners_is_unauthorized(owner_key, identity):
    approval = sign_approval(owner_key, "domain.eth", identity, SIGNER)
    assert not verify_approval(approval, "domain.eth", identity, SIGNER, [])


def test_garbage_signature_rejected(identity):
    assert not verify_approval(b"\x01" * 64 + b"\x1b", "domain.eth", identity, SIGNER, [OWNER])
    assert not verify_approval(b"\x01" * 3, "domain.eth", identity, SIGNER, [OWNER])


class TestApprovalManager:

    @pytest.fixture
    def manager(self):
        manager = ApprovalManager()
        manager.set_owners("domain.eth", [OWNER])
        return manager

    def test_record_and_verify(self, manager, owner_key, identity):
        approval = sign_approval(owner_key, "domain.eth", identity, SIGNER)
        assert manager.record(approval) is None
        assert manager.current("domain.eth") == approval
        assert manager.owners("domain.eth") == {OWNER}
        assert manager.verify(approval, "domain.eth", identity, SIGNER)

    def test_new_approval_supersedes_old(self, manager, owner_key, identity):
        old = sign_approval(owner_key, "domain.eth", identity, SIGNER)
        new = sign_approval(owner_key, "domain.eth", identity, NEW_SIGNER)
        manager.record(old)
        assert manager.record(new) == old
        assert not manager.verify(old, "domain.eth", identity, SIGNER)
        assert not manager.verify(old.signature, "domain.eth", identity, SIGNER)
        assert manager.verify(new, "domain.eth", identity, NEW_SIGNER)

    def test_unauthorized_approval_not_recorded(self, manager, other_key, identity):
        approval = sign_approval(other_key, "domain.eth", identity, SIGNER)
        with pytest.raises(UnauthorizedSigner):
            manager.record(approval)
        assert manager.current("domain.eth") is None

    def test_revoke(self, manager, owner_key, identity):
        approval = sign_approval(owner_key, "domain.eth", identity, SIGNER)
        manager.record(approval)
        assert manager.revoke("domain.eth") == approval
        assert manager.current("domain.eth") is None
        assert manager.is_retired("domain.eth", approval.signature)
        assert not manager.verify(approval, "domain.eth", identity, SIGNER)
        assert not manager.verify(approval.signature_hex, "domain.eth", identity, SIGNER)
        assert manager.revoke("domain.eth") is None

    def test_retired_approval_cannot_be_recorded_again(self, manager, owner_key, identity):
        old = sign_approval(owner_key, "domain.eth", identity, SIGNER)
        manager.record(old)
        manager.record(sign_approval(owner_key, "domain.eth", identity, NEW_SIGNER))
        with pytest.raises(UnauthorizedSigner):
            manager.record(old)

        revoked = sign_approval(owner_key, "domain.eth", identity, NEW_SIGNER)
        manager.revoke("domain.eth")
        with pytest.raises(UnauthorizedSigner):
            manager.record(revoked)
        assert manager.current("domain.eth") is None

    def test_unrecorded_approval_rejected(self, manager, owner_key, identity):
        approval = sign_approval(owner_key, "domain.eth", identity, SIGNER)
        assert not manager.verify(approval, "domain.eth", identity, SIGNER)
        assert not manager.verify("0xzz", "domain.eth", identity, SIGNER)

    def test_unknown_origin_has_no_owners(self, manager, owner_key, identity):
        approval = sign_approval(owner_key, "other.eth", identity, SIGNER)
        assert not manager.verify(approval, "other.eth", identity, SIGNER)
