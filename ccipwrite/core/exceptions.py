"""
Error taxonomy for the ccipwrite signing core
"""


class CCIPWriteError(Exception):
    """Base class for every error raised by ccipwrite"""
    pass


class InvalidInput(CCIPWriteError, ValueError):
    """Malformed or empty input supplied by the caller"""
    pass


class DerivationFailure(CCIPWriteError):
    """Seed material could not be mapped to a secp256k1 scalar"""
    pass


class UnauthorizedSigner(CCIPWriteError):
    """Approval does not match the claimed signer or owner"""
    pass


class MalformedPayload(CCIPWriteError, ValueError):
    """Payload envelope or signing message could not be decoded"""
    pass


class SignatureMismatch(CCIPWriteError):
    """Data signature does not recover to the claimed signer"""
    pass


class SessionClosed(CCIPWriteError):
    """Signing session was used after its key material was wiped"""
    pass
