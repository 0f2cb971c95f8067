import pytest

from ccipwrite.core.types import Identity, ProtocolScope, FieldRecord
from ccipwrite.crypto.keys import sign_message
from ccipwrite.signing.messages import build_keygen_request

# Well-known test account, never used outside tests
OWNER_KEY = bytes.fromhex("4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318")
OWNER_ADDRESS = "0x2c7536E3605D9C16a7a3D7b1898e529396a65c23"

OTHER_KEY = bytes.fromhex("11" * 32)

CONTRACT = "0x" + "ab" * 20
ORIGIN = "domain.eth"


@pytest.fixture
def owner_key():
    return OWNER_KEY


@pytest.fixture
def other_key():
    return OTHER_KEY


@pytest.fixture
def identity():
    return Identity("eip155", 1, OWNER_ADDRESS)


@pytest.fixture
def avatar():
    return FieldRecord(
        data_type="text/avatar",
        value="https://domain.com/avatar",
        timestamp=1708329377
    )


@pytest.fixture(scope="session")
def sig_keygen():
    """Keygen signature produced by the owner wallet"""
    identity = Identity("eip155", 1, OWNER_ADDRESS)
    scope = ProtocolScope("eip155", 1, CONTRACT)
    message = build_keygen_request(ORIGIN, scope, identity)
    return sign_message(message, OWNER_KEY)
