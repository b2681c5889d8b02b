"""
TGSBuilder Core Types

Protocol identifiers and flag sets shared by the codec, the crypto
registry and the request builders.

Identifiers are IntEnums so they compare equal to the raw integers that
travel on the wire; every model field that carries one stores a plain int
so unregistered values survive a decode/encode cycle.

Design Principles:
- Immutable: flag sets use frozen attrs
- Numbered: values match RFC 3961 / RFC 4120 / MS-KILE assignments
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import IntEnum
from typing import Dict

import attrs


KERBEROS_VERSION = 5

# 1970-01-01T00:00:00Z, sent in from/till/rtime to let the KDC choose.
KERBEROS_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


# =============================================================================
# ENUMS
# =============================================================================


class EncryptionType(IntEnum):
    """
    Kerberos encryption types.

    Values match RFC 3961 / RFC 3962 / RFC 4757 assigned numbers.
    """

    AES256_CTS_HMAC_SHA1_96 = 18
    AES128_CTS_HMAC_SHA1_96 = 17
    RC4_HMAC = 23  # Legacy, still the AD default for many accounts
    DES3_CBC_SHA1 = 16  # Deprecated but may be encountered
    DES_CBC_MD5 = 3  # Deprecated, insecure

    @property
    def key_size(self) -> int:
        """Return key size in bytes for this encryption type."""
        sizes = {
            EncryptionType.AES256_CTS_HMAC_SHA1_96: 32,
            EncryptionType.AES128_CTS_HMAC_SHA1_96: 16,
            EncryptionType.RC4_HMAC: 16,
            EncryptionType.DES3_CBC_SHA1: 24,
            EncryptionType.DES_CBC_MD5: 8,
        }
        return sizes[self]

    @property
    def is_deprecated(self) -> bool:
        """Return True if this encryption type is deprecated/insecure."""
        return self in (EncryptionType.DES3_CBC_SHA1, EncryptionType.DES_CBC_MD5)


class ChecksumType(IntEnum):
    """Kerberos checksum types (RFC 3961 section 10, RFC 4757)."""

    CRC32 = 1
    RSA_MD4 = 2
    RSA_MD5 = 7
    HMAC_SHA1_96_AES128 = 15
    HMAC_SHA1_96_AES256 = 16
    HMAC_MD5 = -138

    @property
    def is_keyed(self) -> bool:
        """Return True if computing this checksum requires a key."""
        return self not in (
            ChecksumType.CRC32,
            ChecksumType.RSA_MD4,
            ChecksumType.RSA_MD5,
        )


class KeyUsage(IntEnum):
    """
    Key usage numbers from RFC 4120 section 7.5.1 (and MS-SFU for 17).

    Only the usages a TGS-REQ builder touches are listed.
    """

    AS_REP_ENC_PART = 3
    TGS_REQ_AUTH_DATA_SESSION_KEY = 4
    TGS_REQ_AUTH_DATA_SUBKEY = 5
    TGS_REQ_AUTHENTICATOR_CKSUM = 6
    TGS_REQ_AUTHENTICATOR = 7
    TGS_REP_ENC_PART_SESSION_KEY = 8
    TGS_REP_ENC_PART_SUBKEY = 9
    AP_REQ_AUTHENTICATOR = 11
    PA_FOR_USER_CKSUM = 17


class MessageType(IntEnum):
    """Kerberos message types (RFC 4120 section 5.10 application tags)."""

    AS_REQ = 10
    AS_REP = 11
    TGS_REQ = 12
    TGS_REP = 13
    AP_REQ = 14
    AP_REP = 15
    KRB_ERROR = 30


class PreAuthType(IntEnum):
    """Pre-authentication data types per RFC 4120 and MS-KILE/MS-SFU."""

    PA_TGS_REQ = 1
    PA_ENC_TIMESTAMP = 2
    PA_PW_SALT = 3
    PA_ETYPE_INFO = 11
    PA_PK_AS_REQ = 16
    PA_PK_AS_REP = 17
    PA_ETYPE_INFO2 = 19
    PA_PAC_REQUEST = 128
    PA_FOR_USER = 129
    PA_S4U_X509_USER = 130
    PA_PAC_OPTIONS = 167


class NameType(IntEnum):
    """Principal name types (RFC 4120 section 6.2)."""

    NT_UNKNOWN = 0
    NT_PRINCIPAL = 1
    NT_SRV_INST = 2
    NT_SRV_HST = 3
    NT_SRV_XHST = 4
    NT_UID = 5
    NT_X500_PRINCIPAL = 6
    NT_SMTP_NAME = 7
    NT_ENTERPRISE = 10


class AuthorizationDataType(IntEnum):
    """Authorization data element types (RFC 4120 section 7.5.4, MS-PAC)."""

    AD_IF_RELEVANT = 1
    AD_KDC_ISSUED = 4
    AD_AND_OR = 5
    AD_MANDATORY_FOR_KDC = 8
    AD_WIN2K_PAC = 128


# =============================================================================
# FLAG SETS
# =============================================================================


def _bit(position: int) -> int:
    """KerberosFlags number bits from the most significant end."""
    return 1 << (31 - position)


@attrs.define(frozen=True, slots=True)
class KDCOptions:
    """
    KDC options flags for AS-REQ and TGS-REQ (RFC 4120 section 5.4.1).

    The wire form is a 32-bit KerberosFlags bit string; to_flags() returns
    it as an int with bit 0 in the most significant position.
    """

    forwardable: bool = False
    forwarded: bool = False
    proxiable: bool = False
    proxy: bool = False
    allow_postdate: bool = False
    postdated: bool = False
    renewable: bool = False
    cname_in_addl_tkt: bool = False
    canonicalize: bool = False
    renewable_ok: bool = False
    enc_tkt_in_skey: bool = False
    renew: bool = False
    validate: bool = False

    _POSITIONS = {
        "forwardable": 1,
        "forwarded": 2,
        "proxiable": 3,
        "proxy": 4,
        "allow_postdate": 5,
        "postdated": 6,
        "renewable": 8,
        "cname_in_addl_tkt": 14,
        "canonicalize": 15,
        "renewable_ok": 27,
        "enc_tkt_in_skey": 28,
        "renew": 30,
        "validate": 31,
    }

    def to_flags(self) -> int:
        """Convert to bit flags."""
        flags = 0
        for name, position in self._POSITIONS.items():
            if getattr(self, name):
                flags |= _bit(position)
        return flags

    @classmethod
    def from_flags(cls, flags: int) -> KDCOptions:
        """Build from bit flags, ignoring bits with no named option."""
        values: Dict[str, bool] = {
            name: bool(flags & _bit(position))
            for name, position in cls._POSITIONS.items()
        }
        return cls(**values)

    @classmethod
    def tgs_default(cls) -> KDCOptions:
        """Forwardable, Proxiable, Renewable: 0x50800000."""
        return cls(forwardable=True, proxiable=True, renewable=True)


@attrs.define(frozen=True, slots=True)
class PacOptions:
    """
    PA-PAC-OPTIONS flags (MS-KILE section 2.2.10).
    """

    claims: bool = False
    branch_aware: bool = False
    forward_to_full_dc: bool = False
    resource_based_constrained_delegation: bool = False

    def to_flags(self) -> int:
        """Convert to bit flags."""
        flags = 0
        if self.claims:
            flags |= _bit(0)
        if self.branch_aware:
            flags |= _bit(1)
        if self.forward_to_full_dc:
            flags |= _bit(2)
        if self.resource_based_constrained_delegation:
            flags |= _bit(3)
        return flags
