"""
TGSBuilder ASN.1 Schemas

pyasn1 definitions for the Kerberos V5 structures a TGS-REQ touches
(RFC 4120 section 5 with EXPLICIT TAGS) plus the MS-KILE / MS-SFU
pre-authentication payloads.

Only schemas live here. Translation between these and the attrs model is
done by tgsbuilder.kerberos.codec.
"""

from pyasn1.type import char, constraint, namedtype, tag, univ, useful


def _sequence_component(name, tag_value, type, **subkwargs):
    return namedtype.NamedType(
        name,
        type.subtype(
            explicitTag=tag.Tag(tag.tagClassContext, tag.tagFormatSimple, tag_value),
            **subkwargs
        ),
    )


def _sequence_optional_component(name, tag_value, type, **subkwargs):
    return namedtype.OptionalNamedType(
        name,
        type.subtype(
            explicitTag=tag.Tag(tag.tagClassContext, tag.tagFormatSimple, tag_value),
            **subkwargs
        ),
    )


def _application_tag(tag_value):
    return univ.Sequence.tagSet.tagExplicitly(
        tag.Tag(tag.tagClassApplication, tag.tagFormatConstructed, int(tag_value))
    )


# =============================================================================
# BASIC TYPES (RFC 4120 section 5.2)
# =============================================================================


class Int32(univ.Integer):
    subtypeSpec = univ.Integer.subtypeSpec + constraint.ValueRangeConstraint(
        -2147483648, 2147483647
    )


class UInt32(univ.Integer):
    subtypeSpec = univ.Integer.subtypeSpec + constraint.ValueRangeConstraint(0, 4294967295)


class Microseconds(univ.Integer):
    subtypeSpec = univ.Integer.subtypeSpec + constraint.ValueRangeConstraint(0, 999999)


class KerberosString(char.GeneralString):
    pass


class Realm(KerberosString):
    pass


class KerberosTime(useful.GeneralizedTime):
    pass


class KerberosFlags(univ.BitString):
    pass


class PrincipalName(univ.Sequence):
    componentType = namedtype.NamedTypes(
        _sequence_component("name-type", 0, Int32()),
        _sequence_component(
            "name-string", 1, univ.SequenceOf(componentType=KerberosString())
        ),
    )


class EncryptionKey(univ.Sequence):
    componentType = namedtype.NamedTypes(
        _sequence_component("keytype", 0, Int32()),
        _sequence_component("keyvalue", 1, univ.OctetString()),
    )


class Checksum(univ.Sequence):
    componentType = namedtype.NamedTypes(
        _sequence_component("cksumtype", 0, Int32()),
        _sequence_component("checksum", 1, univ.OctetString()),
    )


class EncryptedData(univ.Sequence):
    componentType = namedtype.NamedTypes(
        _sequence_component("etype", 0, Int32()),
        _sequence_optional_component("kvno", 1, UInt32()),
        _sequence_component("cipher", 2, univ.OctetString()),
    )


class AuthorizationDataElement(univ.Sequence):
    componentType = namedtype.NamedTypes(
        _sequence_component("ad-type", 0, Int32()),
        _sequence_component("ad-data", 1, univ.OctetString()),
    )


class AuthorizationData(univ.SequenceOf):
    componentType = AuthorizationDataElement()


class PA_DATA(univ.Sequence):
    componentType = namedtype.NamedTypes(
        _sequence_component("padata-type", 1, Int32()),
        _sequence_component("padata-value", 2, univ.OctetString()),
    )


# =============================================================================
# TICKETS AND AP EXCHANGE (RFC 4120 sections 5.3 and 5.5)
# =============================================================================


class Ticket(univ.Sequence):
    tagSet = _application_tag(1)
    componentType = namedtype.NamedTypes(
        _sequence_component("tkt-vno", 0, univ.Integer()),
        _sequence_component("realm", 1, Realm()),
        _sequence_component("sname", 2, PrincipalName()),
        _sequence_component("enc-part", 3, EncryptedData()),
    )


class Authenticator(univ.Sequence):
    tagSet = _application_tag(2)
    componentType = namedtype.NamedTypes(
        _sequence_component("authenticator-vno", 0, univ.Integer()),
        _sequence_component("crealm", 1, Realm()),
        _sequence_component("cname", 2, PrincipalName()),
        _sequence_optional_component("cksum", 3, Checksum()),
        _sequence_component("cusec", 4, Microseconds()),
        _sequence_component("ctime", 5, KerberosTime()),
        _sequence_optional_component("subkey", 6, EncryptionKey()),
        _sequence_optional_component("seq-number", 7, UInt32()),
        _sequence_optional_component("authorization-data", 8, AuthorizationData()),
    )


class AP_REQ(univ.Sequence):
    tagSet = _application_tag(14)
    componentType = namedtype.NamedTypes(
        _sequence_component("pvno", 0, univ.Integer()),
        _sequence_component("msg-type", 1, univ.Integer()),
        _sequence_component("ap-options", 2, KerberosFlags()),
        _sequence_component("ticket", 3, Ticket()),
        _sequence_component("authenticator", 4, EncryptedData()),
    )


# =============================================================================
# KDC REQUESTS (RFC 4120 section 5.4.1)
# =============================================================================


class KDC_REQ_BODY(univ.Sequence):
    componentType = namedtype.NamedTypes(
        _sequence_component("kdc-options", 0, KerberosFlags()),
        _sequence_optional_component("cname", 1, PrincipalName()),
        _sequence_component("realm", 2, Realm()),
        _sequence_optional_component("sname", 3, PrincipalName()),
        _sequence_optional_component("from", 4, KerberosTime()),
        _sequence_component("till", 5, KerberosTime()),
        _sequence_optional_component("rtime", 6, KerberosTime()),
        _sequence_component("nonce", 7, UInt32()),
        _sequence_component("etype", 8, univ.SequenceOf(componentType=Int32())),
        # addresses [9] is never sent by this builder
        _sequence_optional_component("enc-authorization-data", 10, EncryptedData()),
        _sequence_optional_component(
            "additional-tickets", 11, univ.SequenceOf(componentType=Ticket())
        ),
    )


class KDC_REQ(univ.Sequence):
    componentType = namedtype.NamedTypes(
        _sequence_component("pvno", 1, univ.Integer()),
        _sequence_component("msg-type", 2, univ.Integer()),
        _sequence_optional_component("padata", 3, univ.SequenceOf(componentType=PA_DATA())),
        _sequence_component("req-body", 4, KDC_REQ_BODY()),
    )


class TGS_REQ(KDC_REQ):
    tagSet = _application_tag(12)


# =============================================================================
# MICROSOFT PRE-AUTHENTICATION PAYLOADS
# =============================================================================


class KERB_PA_PAC_REQUEST(univ.Sequence):
    """MS-KILE 2.2.3"""

    componentType = namedtype.NamedTypes(
        _sequence_component("include-pac", 0, univ.Boolean()),
    )


class PA_FOR_USER_ENC(univ.Sequence):
    """MS-SFU 2.2.1"""

    componentType = namedtype.NamedTypes(
        _sequence_component("userName", 0, PrincipalName()),
        _sequence_component("userRealm", 1, Realm()),
        _sequence_component("cksum", 2, Checksum()),
        _sequence_component("auth-package", 3, KerberosString()),
    )


class PA_PAC_OPTIONS(univ.Sequence):
    """MS-KILE 2.2.10"""

    componentType = namedtype.NamedTypes(
        _sequence_component("flags", 0, KerberosFlags()),
    )
