"""
Pytest configuration and shared fixtures for TGSBuilder tests.
"""

import pytest
from datetime import datetime, timezone

from tgsbuilder.core.crypto import KerberosCrypto
from tgsbuilder.core.sources import FixedClock, SeededRandomSource
from tgsbuilder.core.types import EncryptionType, NameType
from tgsbuilder.kerberos.tgs_request import TGSRequestBuilder
from tgsbuilder.kerberos.types import (
    AuthorizationData,
    AuthorizationDataEntry,
    EncryptedData,
    EncryptionKey,
    PrincipalName,
    Ticket,
)


# =============================================================================
# REALM AND PRINCIPAL FIXTURES
# =============================================================================


@pytest.fixture
def test_realm() -> str:
    """Test Kerberos realm."""
    return "EXAMPLE.COM"


@pytest.fixture
def client_name() -> PrincipalName:
    """Test user principal name."""
    return PrincipalName.from_string("alice")


@pytest.fixture
def krbtgt_name(test_realm: str) -> PrincipalName:
    """TGS principal name (krbtgt)."""
    return PrincipalName(
        name_type=NameType.NT_SRV_INST,
        components=("krbtgt", test_realm),
    )


# =============================================================================
# CRYPTOGRAPHIC FIXTURES
# =============================================================================


@pytest.fixture
def session_key() -> EncryptionKey:
    """RC4-HMAC TGT session key."""
    return EncryptionKey(keytype=EncryptionType.RC4_HMAC, keyvalue=bytes(range(16)))


@pytest.fixture
def aes_session_key() -> EncryptionKey:
    """AES256 TGT session key."""
    return EncryptionKey(
        keytype=EncryptionType.AES256_CTS_HMAC_SHA1_96,
        keyvalue=bytes(range(32, 64)),
    )


@pytest.fixture
def subkey() -> EncryptionKey:
    """Explicit RC4-HMAC request subkey, distinct from the session key."""
    return EncryptionKey(keytype=EncryptionType.RC4_HMAC, keyvalue=b"\xa5" * 16)


@pytest.fixture
def crypto() -> KerberosCrypto:
    """Crypto collaborator with reproducible confounders."""
    return KerberosCrypto(random=SeededRandomSource(7))


# =============================================================================
# TIME-RELATED FIXTURES
# =============================================================================


@pytest.fixture
def fixed_time() -> datetime:
    """Instant the fixed clock reports."""
    return datetime(2024, 3, 1, 12, 30, 45, 123456, tzinfo=timezone.utc)


@pytest.fixture
def fixed_clock(fixed_time: datetime) -> FixedClock:
    """Clock pinned to fixed_time."""
    return FixedClock(fixed_time)


# =============================================================================
# TICKET FIXTURES
# =============================================================================


@pytest.fixture
def tgt(test_realm: str, krbtgt_name: PrincipalName) -> Ticket:
    """Opaque TGT as returned by the KDC."""
    return Ticket(
        realm=test_realm,
        sname=krbtgt_name,
        enc_part=EncryptedData(
            etype=EncryptionType.AES256_CTS_HMAC_SHA1_96,
            kvno=2,
            cipher=b"\x13\x37" * 40,
        ),
    )


@pytest.fixture
def evidence_ticket(test_realm: str) -> Ticket:
    """Service ticket used as S4U2Proxy evidence."""
    return Ticket(
        realm=test_realm,
        sname=PrincipalName(
            name_type=NameType.NT_SRV_INST,
            components=("http", "web.example.com"),
        ),
        enc_part=EncryptedData(etype=EncryptionType.RC4_HMAC, cipher=b"\x00" * 48),
    )


@pytest.fixture
def auth_data() -> AuthorizationData:
    """Plaintext authorization data."""
    return AuthorizationData(
        entries=(AuthorizationDataEntry(ad_type=128, ad_data=b"restriction-data"),)
    )


# =============================================================================
# BUILDER FIXTURES
# =============================================================================


@pytest.fixture
def builder(fixed_clock: FixedClock) -> TGSRequestBuilder:
    """Builder with a fixed clock and seeded randomness."""
    return TGSRequestBuilder(clock=fixed_clock, random=SeededRandomSource(1234))


# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "property: marks hypothesis property-based tests"
    )
