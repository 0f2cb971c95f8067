"""
ccipwrite core data model
"""

from .exceptions import (
    CCIPWriteError,
    InvalidInput,
    DerivationFailure,
    UnauthorizedSigner,
    MalformedPayload,
    SignatureMismatch,
    SessionClosed
)
from .types import Identity, ProtocolScope, FieldRecord

__all__ = [
    'CCIPWriteError',
    'InvalidInput',
    'DerivationFailure',
    'UnauthorizedSigner',
    'MalformedPayload',
    'SignatureMismatch',
    'SessionClosed',
    'Identity',
    'ProtocolScope',
    'FieldRecord'
]
