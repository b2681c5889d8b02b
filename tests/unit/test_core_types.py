"""
Unit tests for tgsbuilder.core.types and tgsbuilder.core.sources.

Tests protocol identifiers, flag sets and the injectable time and
randomness sources.
"""

import pytest
from datetime import datetime, timezone

from tgsbuilder.core.sources import (
    FixedClock,
    SeededRandomSource,
    SystemClock,
    SystemRandomSource,
)
from tgsbuilder.core.types import (
    KERBEROS_EPOCH,
    ChecksumType,
    EncryptionType,
    KDCOptions,
    MessageType,
    PacOptions,
    PreAuthType,
)


class TestEncryptionType:
    """Tests for EncryptionType enum."""

    def test_wire_values(self):
        """Test enctype numbers match RFC 3961 assignments."""
        assert EncryptionType.RC4_HMAC == 23
        assert EncryptionType.AES128_CTS_HMAC_SHA1_96 == 17
        assert EncryptionType.AES256_CTS_HMAC_SHA1_96 == 18

    def test_key_sizes(self):
        """Test key sizes are correct."""
        assert EncryptionType.AES256_CTS_HMAC_SHA1_96.key_size == 32
        assert EncryptionType.AES128_CTS_HMAC_SHA1_96.key_size == 16
        assert EncryptionType.RC4_HMAC.key_size == 16

    def test_deprecated_types(self):
        """Test DES types are marked deprecated."""
        assert EncryptionType.DES_CBC_MD5.is_deprecated
        assert EncryptionType.DES3_CBC_SHA1.is_deprecated
        assert not EncryptionType.RC4_HMAC.is_deprecated


class TestChecksumType:
    """Tests for ChecksumType enum."""

    def test_rsa_md5_is_unkeyed(self):
        """Test RSA-MD5 (the default authenticator checksum) needs no key."""
        assert ChecksumType.RSA_MD5 == 7
        assert not ChecksumType.RSA_MD5.is_keyed

    def test_hmac_types_are_keyed(self):
        """Test HMAC checksum types need a key."""
        assert ChecksumType.HMAC_MD5.is_keyed
        assert ChecksumType.HMAC_SHA1_96_AES256.is_keyed


class TestMessageIdentifiers:
    """Tests for message and pre-auth type numbers."""

    def test_message_types(self):
        """Test message types match RFC 4120 application tags."""
        assert MessageType.TGS_REQ == 12
        assert MessageType.AP_REQ == 14

    def test_pa_types(self):
        """Test PA-DATA type numbers."""
        assert PreAuthType.PA_TGS_REQ == 1
        assert PreAuthType.PA_PAC_REQUEST == 128
        assert PreAuthType.PA_FOR_USER == 129
        assert PreAuthType.PA_PAC_OPTIONS == 167

    def test_epoch_sentinel(self):
        """Test the KDC-chooses time sentinel is 1970-01-01Z."""
        assert KERBEROS_EPOCH == datetime(1970, 1, 1, tzinfo=timezone.utc)


class TestKDCOptions:
    """Tests for KDCOptions flag set."""

    def test_tgs_default_flags(self):
        """Test Forwardable|Proxiable|Renewable is 0x50800000."""
        assert KDCOptions.tgs_default().to_flags() == 0x50800000

    def test_empty_options(self):
        """Test no options set yields zero."""
        assert KDCOptions().to_flags() == 0

    def test_single_bits(self):
        """Test bit positions count from the most significant bit."""
        assert KDCOptions(forwardable=True).to_flags() == 0x40000000
        assert KDCOptions(canonicalize=True).to_flags() == 0x00010000
        assert KDCOptions(cname_in_addl_tkt=True).to_flags() == 0x00020000
        assert KDCOptions(validate=True).to_flags() == 0x00000001

    def test_from_flags(self):
        """Test flags parse back to named options."""
        options = KDCOptions.from_flags(0x50810000)
        assert options.forwardable
        assert options.proxiable
        assert options.renewable
        assert options.canonicalize
        assert not options.forwarded

    def test_from_flags_ignores_unnamed_bits(self):
        """Test reserved bit 0 is dropped."""
        assert KDCOptions.from_flags(0x80000000) == KDCOptions()

    def test_options_immutable(self):
        """Test KDCOptions is immutable."""
        options = KDCOptions()
        with pytest.raises(AttributeError):
            options.forwardable = True


class TestPacOptions:
    """Tests for PacOptions flag set."""

    def test_claims_bit(self):
        """Test claims is bit 0."""
        assert PacOptions(claims=True).to_flags() == 0x80000000

    def test_rbcd_bit(self):
        """Test resource-based constrained delegation is bit 3."""
        assert PacOptions(resource_based_constrained_delegation=True).to_flags() == 0x10000000

    def test_combined(self):
        """Test all four options together."""
        options = PacOptions(
            claims=True,
            branch_aware=True,
            forward_to_full_dc=True,
            resource_based_constrained_delegation=True,
        )
        assert options.to_flags() == 0xF0000000


class TestClocks:
    """Tests for clock sources."""

    def test_system_clock_is_utc(self):
        """Test SystemClock returns an aware UTC time."""
        now = SystemClock().now()
        assert now.tzinfo is not None
        assert now.utcoffset().total_seconds() == 0

    def test_fixed_clock(self, fixed_time: datetime):
        """Test FixedClock always returns its instant."""
        clock = FixedClock(fixed_time)
        assert clock.now() == fixed_time
        assert clock.now() == fixed_time

    def test_fixed_clock_rejects_naive(self):
        """Test FixedClock requires a timezone-aware instant."""
        with pytest.raises(ValueError):
            FixedClock(datetime(2024, 1, 1))


class TestRandomSources:
    """Tests for randomness sources."""

    def test_system_random_lengths(self):
        """Test SystemRandomSource returns the requested length."""
        source = SystemRandomSource()
        assert len(source.token_bytes(16)) == 16
        assert len(source.token_bytes(32)) == 32

    def test_system_random_range(self):
        """Test randbelow stays in range."""
        source = SystemRandomSource()
        for _ in range(100):
            assert 0 <= source.randbelow(10) < 10

    def test_seeded_random_reproducible(self):
        """Test same seed gives same sequence."""
        a = SeededRandomSource(42)
        b = SeededRandomSource(42)
        assert a.token_bytes(16) == b.token_bytes(16)
        assert a.randbelow(1000000) == b.randbelow(1000000)

    def test_seeded_random_differs_by_seed(self):
        """Test different seeds give different bytes."""
        assert SeededRandomSource(1).token_bytes(32) != SeededRandomSource(2).token_bytes(32)

    def test_seeded_random_advances(self):
        """Test successive draws differ."""
        source = SeededRandomSource(42)
        assert source.token_bytes(32) != source.token_bytes(32)
