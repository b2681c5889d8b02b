"""
TGSBuilder Kerberos Types

Kerberos V5 message structures involved in a TGS-REQ, per RFC 4120.

All entities are immutable value objects. Integer identifiers (enctypes,
checksum types, name types, message types) are stored as plain ints so an
unregistered value survives decoding and re-encoding unchanged; the
IntEnums in tgsbuilder.core.types compare equal to them.

Encoding to and from DER lives in tgsbuilder.kerberos.codec.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Tuple, Union

import attrs
from attrs import field, validators

from tgsbuilder.core.types import (
    KERBEROS_EPOCH,
    KERBEROS_VERSION,
    AuthorizationDataType,
    MessageType,
    NameType,
)


def _utc_seconds(value: datetime) -> datetime:
    """Normalize to UTC with whole-second precision (KerberosTime)."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).replace(microsecond=0)


def _optional_int(value: Optional[int]) -> Optional[int]:
    return None if value is None else int(value)


def _int_tuple(values) -> Tuple[int, ...]:
    return tuple(int(v) for v in values)


# =============================================================================
# NAMES
# =============================================================================


@attrs.define(frozen=True, slots=True)
class PrincipalName:
    """
    Kerberos principal name without its realm.

    Format: component/component (e.g., krbtgt/EXAMPLE.COM)
    """

    name_type: int = field(converter=int)
    components: Tuple[str, ...] = field(converter=tuple)

    @classmethod
    def from_string(
        cls, name: str, name_type: Optional[int] = None
    ) -> PrincipalName:
        """
        Parse a slash-separated principal name.

        Without an explicit name_type, single-component names are
        NT-PRINCIPAL and multi-component names are NT-SRV-INST.

        Examples:
            "alice" -> PrincipalName(1, ("alice",))
            "krbtgt/EXAMPLE.COM" -> PrincipalName(2, ("krbtgt", "EXAMPLE.COM"))
        """
        components = tuple(name.split("/"))
        if name_type is None:
            if len(components) > 1:
                name_type = NameType.NT_SRV_INST
            else:
                name_type = NameType.NT_PRINCIPAL
        return cls(name_type=name_type, components=components)

    def __str__(self) -> str:
        return "/".join(self.components)


PrincipalLike = Union[PrincipalName, str]


def to_principal_name(value: Optional[PrincipalLike]) -> Optional[PrincipalName]:
    """attrs converter: accept a PrincipalName, a plain string, or None."""
    if value is None or isinstance(value, PrincipalName):
        return value
    return PrincipalName.from_string(value)


# =============================================================================
# CRYPTOGRAPHIC TYPES
# =============================================================================


@attrs.define(frozen=True, slots=True)
class EncryptionKey:
    """
    Kerberos EncryptionKey (RFC 4120 section 5.2.9).

    Used both as a per-request subkey and as a ticket session key.
    Key length is checked by the crypto collaborator when the key is used.
    """

    keytype: int = field(converter=int)
    keyvalue: bytes = field(validator=validators.instance_of(bytes), repr=False)


@attrs.define(frozen=True, slots=True)
class Checksum:
    """Kerberos Checksum (RFC 4120 section 5.2.9)."""

    cksumtype: int = field(converter=int)
    checksum: bytes = field(validator=validators.instance_of(bytes))


@attrs.define(frozen=True, slots=True)
class EncryptedData:
    """
    Kerberos EncryptedData: ciphertext tagged with its enctype.
    """

    etype: int = field(converter=int)
    cipher: bytes = field(validator=validators.instance_of(bytes))
    kvno: Optional[int] = field(default=None, converter=_optional_int)


# =============================================================================
# AUTHORIZATION DATA
# =============================================================================


@attrs.define(frozen=True, slots=True)
class AuthorizationDataEntry:
    """One ad-type / ad-data element."""

    ad_type: int = field(converter=int)
    ad_data: bytes = field(validator=validators.instance_of(bytes))


@attrs.define(frozen=True, slots=True)
class AuthorizationData:
    """
    Plaintext authorization data (RFC 4120 section 5.2.6).

    Sent in a TGS-REQ only in encrypted form, under the request subkey.
    """

    entries: Tuple[AuthorizationDataEntry, ...] = field(converter=tuple)

    def if_relevant(self) -> AuthorizationData:
        """
        Wrap these entries in a single AD-IF-RELEVANT element.

        The wrapped ad-data is the DER encoding of this AuthorizationData.
        """
        from tgsbuilder.kerberos.codec import encode

        return AuthorizationData(
            entries=(
                AuthorizationDataEntry(
                    ad_type=AuthorizationDataType.AD_IF_RELEVANT,
                    ad_data=encode(self),
                ),
            )
        )


# =============================================================================
# TICKETS AND AUTHENTICATORS
# =============================================================================


@attrs.define(frozen=True, slots=True)
class Ticket:
    """
    Kerberos ticket as issued by a KDC.

    The enc-part is encrypted under a key the client does not hold, so the
    ticket is carried verbatim and never constructed by the builders.
    """

    realm: str
    sname: PrincipalName
    enc_part: EncryptedData
    tkt_vno: int = KERBEROS_VERSION


@attrs.define(frozen=True, slots=True)
class Authenticator:
    """
    Kerberos authenticator (RFC 4120 section 5.5.1).

    Proves knowledge of the session key and binds the request body via
    its checksum field.
    """

    # Required fields first (no defaults)
    crealm: str
    cname: PrincipalName = field(converter=to_principal_name)
    cusec: int = field(validator=[validators.instance_of(int), validators.ge(0), validators.lt(1000000)])
    ctime: datetime = field(converter=_utc_seconds)

    # Fields with defaults
    cksum: Optional[Checksum] = None
    subkey: Optional[EncryptionKey] = None
    seq_number: Optional[int] = field(default=None, converter=_optional_int)
    authenticator_vno: int = KERBEROS_VERSION


# =============================================================================
# KERBEROS MESSAGES
# =============================================================================


@attrs.define(frozen=True, slots=True)
class ApReq:
    """
    AP-REQ: Application Request (RFC 4120 section 5.5.1).

    In a TGS-REQ it travels inside PA-TGS-REQ and proves possession of
    the TGT session key.
    """

    # Required fields (no defaults)
    ticket: Ticket
    authenticator: EncryptedData  # Encrypted under the ticket session key

    # Fields with defaults
    pvno: int = KERBEROS_VERSION
    msg_type: int = field(default=int(MessageType.AP_REQ), converter=int)
    ap_options: int = 0


@attrs.define(frozen=True, slots=True)
class PreAuthData:
    """Pre-authentication data entry (PA-DATA)."""

    padata_type: int = field(converter=int)
    padata_value: bytes = field(validator=validators.instance_of(bytes))


@attrs.define(frozen=True, slots=True)
class KdcRequestBody:
    """
    KDC-REQ-BODY (RFC 4120 section 5.4.1).

    The exact DER encoding of this body is what the authenticator
    checksum covers.
    """

    # Required fields (no defaults)
    kdc_options: int
    realm: str
    nonce: int

    # Fields with defaults
    cname: Optional[PrincipalName] = field(default=None, converter=to_principal_name)
    sname: Optional[PrincipalName] = field(default=None, converter=to_principal_name)
    from_time: Optional[datetime] = field(
        default=KERBEROS_EPOCH,
        converter=attrs.converters.optional(_utc_seconds),
    )
    till: datetime = field(default=KERBEROS_EPOCH, converter=_utc_seconds)
    rtime: Optional[datetime] = field(
        default=KERBEROS_EPOCH,
        converter=attrs.converters.optional(_utc_seconds),
    )
    etypes: Tuple[int, ...] = field(factory=tuple, converter=_int_tuple)
    enc_authorization_data: Optional[EncryptedData] = None
    additional_tickets: Tuple[Ticket, ...] = field(factory=tuple, converter=tuple)


@attrs.define(frozen=True, slots=True)
class KdcRequest:
    """
    KRB_TGS_REQ (RFC 4120 section 5.4.1).

    Final artifact handed to the transport layer after encoding.
    """

    # Required fields (no defaults)
    req_body: KdcRequestBody

    # Fields with defaults
    padata: Tuple[PreAuthData, ...] = field(factory=tuple, converter=tuple)
    pvno: int = KERBEROS_VERSION
    msg_type: int = field(default=int(MessageType.TGS_REQ), converter=int)


# =============================================================================
# MICROSOFT PRE-AUTHENTICATION PAYLOADS
# =============================================================================


@attrs.define(frozen=True, slots=True)
class PacRequest:
    """KERB-PA-PAC-REQUEST: ask the KDC to include (or omit) the PAC."""

    include_pac: bool = True


@attrs.define(frozen=True, slots=True)
class PacOptionsRequest:
    """PA-PAC-OPTIONS payload carrying a 32-bit KerberosFlags value."""

    flags: int = 0


@attrs.define(frozen=True, slots=True)
class ForUserRequest:
    """
    PA-FOR-USER (MS-SFU 2.2.1): S4U2Self impersonation request.

    The checksum is HMAC-MD5 under the TGT session key over the name type,
    name components, realm and auth package.
    """

    user_name: PrincipalName = field(converter=to_principal_name)
    user_realm: str
    cksum: Checksum
    auth_package: str = "Kerberos"
