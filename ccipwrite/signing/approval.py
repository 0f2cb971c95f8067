"""
Signer approvals.

An approval is signed by the node owner (or a manager) and binds a derived
signer address to an origin. It replaces storing the signer on-chain: a
verifier recovers the approval's signer and checks it against the node's
authorized owners.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Set, Union

from ..core.exceptions import InvalidInput, MalformedPayload, UnauthorizedSigner
from ..core.types import Identity
from ..crypto.hashing import hex0x
from ..crypto.keys import (
    sign_message,
    recover_signer,
    signer_address,
    private_key_bytes,
    to_bytes,
    KeyLike
)
from ..crypto.session import SecretBuffer
from .messages import format_approval_request, parse_message, origin_text, Origin

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApprovalSignature:
    """Owner-signed approval of a data signer"""
    origin: str
    approved_signer: str
    approved_by: str
    signature: bytes
    message: str

    @property
    def signature_hex(self) -> str:
        return hex0x(self.signature)


def sign_approval(
    owner_private_key: Union[bytes, bytearray, str, SecretBuffer],
    origin: Origin,
    identity: Identity,
    signer: KeyLike
) -> ApprovalSignature:
    """Sign the approval message with the owner key (not the derived key)"""
    if isinstance(owner_private_key, SecretBuffer):
        owner_private_key = owner_private_key.copy()
    key = private_key_bytes(owner_private_key)
    message = format_approval_request(origin, signer, identity)
    approved_signer = signer_address(signer)
    logger.info(f"Approving signer {approved_signer} for {origin_text(origin)}")
    return ApprovalSignature(
        origin=origin_text(origin),
        approved_signer=approved_signer,
        approved_by=identity.caip10,
        signature=sign_message(message, key),
        message=message
    )


def require_approval(
    approval: Union[ApprovalSignature, bytes, str],
    origin: Origin,
    identity: Identity,
    expected_signer: KeyLike,
    authorized_owners: Iterable[KeyLike]
) -> str:
    """
    Check an approval and return the owner that signed it.

    Raises UnauthorizedSigner when the approval names another signer, another
    origin or identity, or was signed by a key outside authorized_owners.
    """
    expected = signer_address(expected_signer)
    owners = {signer_address(owner) for owner in authorized_owners}
    if not owners:
        raise UnauthorizedSigner("No authorized owners for this node")

    if isinstance(approval, ApprovalSignature):
        _, fields = parse_message(approval.message)
        if fields["Approved Signer"] != expected:
            raise UnauthorizedSigner(
                f"Approval names {fields['Approved Signer']}, expected {expected}"
            )
        if fields["Origin"] != origin_text(origin):
            raise UnauthorizedSigner(f"Approval is for origin {fields['Origin']}")
        if fields["Approved By"] != identity.caip10:
            raise UnauthorizedSigner(f"Approval is by {fields['Approved By']}")
        message = approval.message
        signature = approval.signature
    else:
        message = format_approval_request(origin, expected, identity)
        signature = to_bytes(approval, "approval signature")

    try:
        recovered = recover_signer(message, signature)
    except InvalidInput as e:
        raise UnauthorizedSigner(f"Approval signature is not recoverable: {e}") from e
    if recovered not in owners:
        raise UnauthorizedSigner(f"Approval signed by {recovered}, not an authorized owner")
    return recovered


def verify_approval(
    approval: Union[ApprovalSignature, bytes, str],
    origin: Origin,
    identity: Identity,
    expected_signer: KeyLike,
    authorized_owners: Iterable[KeyLike]
) -> bool:
    """Fail-closed approval check"""
    try:
        require_approval(approval, origin, identity, expected_signer, authorized_owners)
        return True
    except (UnauthorizedSigner, InvalidInput, MalformedPayload) as e:
        logger.warning(f"Approval rejected: {e}")
        return False


class ApprovalManager:
    """
    Tracks authorized owners and the current approval of each origin.

    Recording a new approval for an origin supersedes the previous one, and
    revoking drops the current one. Superseded and revoked approvals fail
    verification from then on and cannot be recorded again. An origin with
    no current approval verifies nothing.
    """

    def __init__(self):
        self._owners: Dict[str, Set[str]] = {}
        self._current: Dict[str, ApprovalSignature] = {}
        self._retired: Dict[str, Set[bytes]] = {}
        self._lock = threading.Lock()

    def set_owners(self, origin: Origin, owners: Iterable[KeyLike]):
        addresses = {signer_address(owner) for owner in owners}
        with self._lock:
            self._owners[origin_text(origin)] = addresses

    def owners(self, origin: Origin) -> Set[str]:
        with self._lock:
            return set(self._owners.get(origin_text(origin), set()))

    def current(self, origin: Origin) -> Optional[ApprovalSignature]:
        with self._lock:
            return self._current.get(origin_text(origin))

    def is_retired(self, origin: Origin, signature: bytes) -> bool:
        with self._lock:
            return bytes(signature) in self._retired.get(origin_text(origin), set())

    def record(self, approval: ApprovalSignature) -> Optional[ApprovalSignature]:
        """Store approval as current for its origin, returning the superseded one"""
        if self.is_retired(approval.origin, approval.signature):
            raise UnauthorizedSigner(
                f"Approval of {approval.approved_signer} for {approval.origin} was retired"
            )
        identity = Identity.parse(approval.approved_by)
        require_approval(
            approval,
            approval.origin,
            identity,
            approval.approved_signer,
            self.owners(approval.origin)
        )
        with self._lock:
            previous = self._current.get(approval.origin)
            self._current[approval.origin] = approval
            if previous is not None and previous.signature != approval.signature:
                self._retired.setdefault(approval.origin, set()).add(previous.signature)
        if previous is not None:
            logger.info(
                f"Signer {previous.approved_signer} superseded by "
                f"{approval.approved_signer} for {approval.origin}"
            )
        return previous

    def revoke(self, origin: Origin) -> Optional[ApprovalSignature]:
        """Drop the current approval; it never verifies again"""
        name = origin_text(origin)
        with self._lock:
            previous = self._current.pop(name, None)
            if previous is not None:
                self._retired.setdefault(name, set()).add(previous.signature)
        if previous is not None:
            logger.info(f"Approval of {previous.approved_signer} revoked for {name}")
        return previous

    def verify(
        self,
        approval: Union[ApprovalSignature, bytes, str],
        origin: Origin,
        identity: Identity,
        expected_signer: KeyLike
    ) -> bool:
        """verify_approval against recorded owners, accepting only the current approval"""
        name = origin_text(origin)
        try:
            signature = approval.signature if isinstance(approval, ApprovalSignature) \
                else to_bytes(approval, "approval signature")
        except InvalidInput as e:
            logger.warning(f"Approval rejected: {e}")
            return False

        current = self.current(name)
        if current is None or signature != current.signature:
            if self.is_retired(name, signature):
                logger.warning(f"Approval for {name} has been superseded or revoked")
            else:
                logger.warning(f"Approval for {name} is not the recorded one")
            return False
        return verify_approval(approval, name, identity, expected_signer, self.owners(name))
