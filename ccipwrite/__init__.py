"""
ccipwrite - signing core for off-chain data writes
"""

__version__ = "0.1.0"

from .core import (
    Identity,
    ProtocolScope,
    FieldRecord,
    CCIPWriteError,
    InvalidInput,
    DerivationFailure,
    UnauthorizedSigner,
    MalformedPayload,
    SignatureMismatch,
    SessionClosed
)
from .crypto import derive_keypair, compute_extradata, DerivedKeypair
from .signing import (
    SigningSession,
    ApprovalManager,
    sign_field,
    sign_fields,
    sign_approval,
    verify_approval
)
from .payload import Payload, encode, decode, parse_destination, build_write_request

__all__ = [
    'Identity',
    'ProtocolScope',
    'FieldRecord',
    'CCIPWriteError',
    'InvalidInput',
    'DerivationFailure',
    'UnauthorizedSigner',
    'MalformedPayload',
    'SignatureMismatch',
    'SessionClosed',
    'derive_keypair',
    'compute_extradata',
    'DerivedKeypair',
    'SigningSession',
    'ApprovalManager',
    'sign_field',
    'sign_fields',
    'sign_approval',
    'verify_approval',
    'Payload',
    'encode',
    'decode',
    'parse_destination',
    'build_write_request'
]
