"""
ccipwrite Signing Package
"""

from .messages import (
    format_keygen_request,
    format_data_update_request,
    format_field_request,
    format_approval_request,
    build_keygen_request,
    parse_message
)
from .data_signer import (
    DataSignature,
    sign_field,
    sign_fields,
    recover_field_signer,
    verify_field,
    require_field_signer
)
from .approval import (
    ApprovalSignature,
    ApprovalManager,
    sign_approval,
    verify_approval,
    require_approval
)
from .session import SigningSession

__all__ = [
    'format_keygen_request',
    'format_data_update_request',
    'format_field_request',
    'format_approval_request',
    'build_keygen_request',
    'parse_message',
    'DataSignature',
    'sign_field',
    'sign_fields',
    'recover_field_signer',
    'verify_field',
    'require_field_signer',
    'ApprovalSignature',
    'ApprovalManager',
    'sign_approval',
    'verify_approval',
    'require_approval',
    'SigningSession'
]
