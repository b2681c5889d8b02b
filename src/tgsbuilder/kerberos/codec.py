"""
TGSBuilder Kerberos Codec

DER encoding and decoding between the attrs message model
(tgsbuilder.kerberos.types) and the pyasn1 schemas
(tgsbuilder.kerberos.asn1).

Every supported entity has a fill function (model -> pyasn1 object) and a
read function (pyasn1 object -> model). Encoding is deterministic: the
same entity always yields the same bytes, which is what lets the
authenticator checksum be recomputed by the KDC.

Example:
    from tgsbuilder.kerberos.codec import decode, encode
    from tgsbuilder.kerberos.types import EncryptionKey

    der = encode(EncryptionKey(keytype=23, keyvalue=b"k" * 16))
    assert decode(der, EncryptionKey).keytype == 23
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, Optional, Tuple, Type, TypeVar

from pyasn1.codec.der import decoder as der_decoder
from pyasn1.codec.der import encoder as der_encoder
from pyasn1.error import PyAsn1Error

from tgsbuilder.core.exceptions import EncodingError
from tgsbuilder.kerberos import asn1
from tgsbuilder.kerberos.types import (
    ApReq,
    Authenticator,
    AuthorizationData,
    AuthorizationDataEntry,
    Checksum,
    EncryptedData,
    EncryptionKey,
    ForUserRequest,
    KdcRequest,
    KdcRequestBody,
    PacOptionsRequest,
    PacRequest,
    PreAuthData,
    PrincipalName,
    Ticket,
)

T = TypeVar("T")

KERBEROS_TIME_FORMAT = "%Y%m%d%H%M%SZ"


# =============================================================================
# PYASN1 HELPERS
# =============================================================================


def seq_set(seq: Any, name: str, fill: Callable[[Any, Any], None], value: Any) -> Any:
    """Instantiate the named component of seq and fill it from value."""
    component = seq.setComponentByName(name).getComponentByName(name)
    fill(component, value)
    seq.setComponentByName(name, component)
    return seq.getComponentByName(name)


def seq_set_iter(seq: Any, name: str, iterable: Iterable[Any]) -> None:
    """Set the named SEQUENCE OF component of seq from plain values."""
    component = seq.setComponentByName(name).getComponentByName(name)
    component.clear()
    for pos, value in enumerate(iterable):
        component.setComponentByPosition(pos, value)


def seq_append_each(
    seq: Any, name: str, fill: Callable[[Any, Any], None], values: Iterable[Any]
) -> None:
    """Set the named SEQUENCE OF component of seq, filling one element per value."""
    component = seq.setComponentByName(name).getComponentByName(name)
    component.clear()
    for pos, value in enumerate(values):
        element = component.setComponentByPosition(pos).getComponentByPosition(pos)
        fill(element, value)


def _optional(seq: Any, name: str) -> Optional[Any]:
    component = seq.getComponentByName(name, default=None, instantiate=False)
    if component is None or not component.isValue:
        return None
    return component


def flags_to_bits(flags: int) -> Tuple[int, ...]:
    """32-bit KerberosFlags value as a bit tuple, most significant first."""
    return tuple((int(flags) >> (31 - i)) & 1 for i in range(32))


def bits_to_flags(component: Any) -> int:
    bits = component.asBinary()[:32]
    return int(bits.ljust(32, "0"), 2)


def to_kerberos_time(value: datetime) -> str:
    return value.astimezone(timezone.utc).strftime(KERBEROS_TIME_FORMAT)


def from_kerberos_time(component: Any) -> datetime:
    return datetime.strptime(str(component), KERBEROS_TIME_FORMAT).replace(
        tzinfo=timezone.utc
    )


# =============================================================================
# FILL (MODEL -> ASN.1)
# =============================================================================


def _fill_principal_name(seq: Any, name: PrincipalName) -> None:
    seq["name-type"] = name.name_type
    seq_set_iter(seq, "name-string", name.components)


def _fill_encryption_key(seq: Any, key: EncryptionKey) -> None:
    seq["keytype"] = key.keytype
    seq["keyvalue"] = key.keyvalue


def _fill_checksum(seq: Any, cksum: Checksum) -> None:
    seq["cksumtype"] = cksum.cksumtype
    seq["checksum"] = cksum.checksum


def _fill_encrypted_data(seq: Any, data: EncryptedData) -> None:
    seq["etype"] = data.etype
    if data.kvno is not None:
        seq["kvno"] = data.kvno
    seq["cipher"] = data.cipher


def _fill_authorization_data_entry(seq: Any, entry: AuthorizationDataEntry) -> None:
    seq["ad-type"] = entry.ad_type
    seq["ad-data"] = entry.ad_data


def _fill_authorization_data(seq: Any, auth_data: AuthorizationData) -> None:
    seq.clear()
    for pos, entry in enumerate(auth_data.entries):
        element = seq.setComponentByPosition(pos).getComponentByPosition(pos)
        _fill_authorization_data_entry(element, entry)


def _fill_ticket(seq: Any, ticket: Ticket) -> None:
    seq["tkt-vno"] = ticket.tkt_vno
    seq["realm"] = ticket.realm
    seq_set(seq, "sname", _fill_principal_name, ticket.sname)
    seq_set(seq, "enc-part", _fill_encrypted_data, ticket.enc_part)


def _fill_authenticator(seq: Any, authenticator: Authenticator) -> None:
    seq["authenticator-vno"] = authenticator.authenticator_vno
    seq["crealm"] = authenticator.crealm
    seq_set(seq, "cname", _fill_principal_name, authenticator.cname)
    if authenticator.cksum is not None:
        seq_set(seq, "cksum", _fill_checksum, authenticator.cksum)
    seq["cusec"] = authenticator.cusec
    seq["ctime"] = to_kerberos_time(authenticator.ctime)
    if authenticator.subkey is not None:
        seq_set(seq, "subkey", _fill_encryption_key, authenticator.subkey)
    if authenticator.seq_number is not None:
        seq["seq-number"] = authenticator.seq_number


def _fill_ap_req(seq: Any, ap_req: ApReq) -> None:
    seq["pvno"] = ap_req.pvno
    seq["msg-type"] = ap_req.msg_type
    seq["ap-options"] = flags_to_bits(ap_req.ap_options)
    seq_set(seq, "ticket", _fill_ticket, ap_req.ticket)
    seq_set(seq, "authenticator", _fill_encrypted_data, ap_req.authenticator)


def _fill_pa_data(seq: Any, pa_data: PreAuthData) -> None:
    seq["padata-type"] = pa_data.padata_type
    seq["padata-value"] = pa_data.padata_value


def _fill_kdc_request_body(seq: Any, body: KdcRequestBody) -> None:
    seq["kdc-options"] = flags_to_bits(body.kdc_options)
    if body.cname is not None:
        seq_set(seq, "cname", _fill_principal_name, body.cname)
    seq["realm"] = body.realm
    if body.sname is not None:
        seq_set(seq, "sname", _fill_principal_name, body.sname)
    if body.from_time is not None:
        seq["from"] = to_kerberos_time(body.from_time)
    seq["till"] = to_kerberos_time(body.till)
    if body.rtime is not None:
        seq["rtime"] = to_kerberos_time(body.rtime)
    seq["nonce"] = body.nonce
    seq_set_iter(seq, "etype", body.etypes)
    if body.enc_authorization_data is not None:
        seq_set(seq, "enc-authorization-data", _fill_encrypted_data, body.enc_authorization_data)
    if body.additional_tickets:
        seq_append_each(seq, "additional-tickets", _fill_ticket, body.additional_tickets)


def _fill_kdc_request(seq: Any, request: KdcRequest) -> None:
    seq["pvno"] = request.pvno
    seq["msg-type"] = request.msg_type
    if request.padata:
        seq_append_each(seq, "padata", _fill_pa_data, request.padata)
    seq_set(seq, "req-body", _fill_kdc_request_body, request.req_body)


def _fill_pac_request(seq: Any, request: PacRequest) -> None:
    seq["include-pac"] = bool(request.include_pac)


def _fill_pac_options(seq: Any, request: PacOptionsRequest) -> None:
    seq["flags"] = flags_to_bits(request.flags)


def _fill_for_user(seq: Any, request: ForUserRequest) -> None:
    seq_set(seq, "userName", _fill_principal_name, request.user_name)
    seq["userRealm"] = request.user_realm
    seq_set(seq, "cksum", _fill_checksum, request.cksum)
    seq["auth-package"] = request.auth_package


# =============================================================================
# READ (ASN.1 -> MODEL)
# =============================================================================


def _read_principal_name(seq: Any) -> PrincipalName:
    return PrincipalName(
        name_type=int(seq["name-type"]),
        components=tuple(str(part) for part in seq["name-string"]),
    )


def _read_encryption_key(seq: Any) -> EncryptionKey:
    return EncryptionKey(keytype=int(seq["keytype"]), keyvalue=seq["keyvalue"].asOctets())


def _read_checksum(seq: Any) -> Checksum:
    return Checksum(cksumtype=int(seq["cksumtype"]), checksum=seq["checksum"].asOctets())


def _read_encrypted_data(seq: Any) -> EncryptedData:
    kvno = _optional(seq, "kvno")
    return EncryptedData(
        etype=int(seq["etype"]),
        cipher=seq["cipher"].asOctets(),
        kvno=None if kvno is None else int(kvno),
    )


def _read_authorization_data(seq: Any) -> AuthorizationData:
    return AuthorizationData(
        entries=tuple(
            AuthorizationDataEntry(ad_type=int(el["ad-type"]), ad_data=el["ad-data"].asOctets())
            for el in seq
        )
    )


def _read_ticket(seq: Any) -> Ticket:
    return Ticket(
        tkt_vno=int(seq["tkt-vno"]),
        realm=str(seq["realm"]),
        sname=_read_principal_name(seq["sname"]),
        enc_part=_read_encrypted_data(seq["enc-part"]),
    )


def _read_authenticator(seq: Any) -> Authenticator:
    cksum = _optional(seq, "cksum")
    subkey = _optional(seq, "subkey")
    seq_number = _optional(seq, "seq-number")
    return Authenticator(
        authenticator_vno=int(seq["authenticator-vno"]),
        crealm=str(seq["crealm"]),
        cname=_read_principal_name(seq["cname"]),
        cksum=None if cksum is None else _read_checksum(cksum),
        cusec=int(seq["cusec"]),
        ctime=from_kerberos_time(seq["ctime"]),
        subkey=None if subkey is None else _read_encryption_key(subkey),
        seq_number=None if seq_number is None else int(seq_number),
    )


def _read_ap_req(seq: Any) -> ApReq:
    return ApReq(
        pvno=int(seq["pvno"]),
        msg_type=int(seq["msg-type"]),
        ap_options=bits_to_flags(seq["ap-options"]),
        ticket=_read_ticket(seq["ticket"]),
        authenticator=_read_encrypted_data(seq["authenticator"]),
    )


def _read_pa_data(seq: Any) -> PreAuthData:
    return PreAuthData(
        padata_type=int(seq["padata-type"]),
        padata_value=seq["padata-value"].asOctets(),
    )


def _read_kdc_request_body(seq: Any) -> KdcRequestBody:
    cname = _optional(seq, "cname")
    sname = _optional(seq, "sname")
    from_time = _optional(seq, "from")
    rtime = _optional(seq, "rtime")
    enc_auth_data = _optional(seq, "enc-authorization-data")
    tickets = _optional(seq, "additional-tickets")
    return KdcRequestBody(
        kdc_options=bits_to_flags(seq["kdc-options"]),
        cname=None if cname is None else _read_principal_name(cname),
        realm=str(seq["realm"]),
        sname=None if sname is None else _read_principal_name(sname),
        from_time=None if from_time is None else from_kerberos_time(from_time),
        till=from_kerberos_time(seq["till"]),
        rtime=None if rtime is None else from_kerberos_time(rtime),
        nonce=int(seq["nonce"]),
        etypes=tuple(int(etype) for etype in seq["etype"]),
        enc_authorization_data=(
            None if enc_auth_data is None else _read_encrypted_data(enc_auth_data)
        ),
        additional_tickets=(
            () if tickets is None else tuple(_read_ticket(t) for t in tickets)
        ),
    )


def _read_kdc_request(seq: Any) -> KdcRequest:
    padata = _optional(seq, "padata")
    return KdcRequest(
        pvno=int(seq["pvno"]),
        msg_type=int(seq["msg-type"]),
        padata=() if padata is None else tuple(_read_pa_data(pa) for pa in padata),
        req_body=_read_kdc_request_body(seq["req-body"]),
    )


def _read_pac_request(seq: Any) -> PacRequest:
    return PacRequest(include_pac=bool(seq["include-pac"]))


def _read_pac_options(seq: Any) -> PacOptionsRequest:
    return PacOptionsRequest(flags=bits_to_flags(seq["flags"]))


def _read_for_user(seq: Any) -> ForUserRequest:
    return ForUserRequest(
        user_name=_read_principal_name(seq["userName"]),
        user_realm=str(seq["userRealm"]),
        cksum=_read_checksum(seq["cksum"]),
        auth_package=str(seq["auth-package"]),
    )


# =============================================================================
# REGISTRY
# =============================================================================


_CODECS: Dict[type, Tuple[type, Callable[[Any, Any], None], Callable[[Any], Any]]] = {
    PrincipalName: (asn1.PrincipalName, _fill_principal_name, _read_principal_name),
    EncryptionKey: (asn1.EncryptionKey, _fill_encryption_key, _read_encryption_key),
    Checksum: (asn1.Checksum, _fill_checksum, _read_checksum),
    EncryptedData: (asn1.EncryptedData, _fill_encrypted_data, _read_encrypted_data),
    AuthorizationData: (
        asn1.AuthorizationData,
        _fill_authorization_data,
        _read_authorization_data,
    ),
    Ticket: (asn1.Ticket, _fill_ticket, _read_ticket),
    Authenticator: (asn1.Authenticator, _fill_authenticator, _read_authenticator),
    ApReq: (asn1.AP_REQ, _fill_ap_req, _read_ap_req),
    PreAuthData: (asn1.PA_DATA, _fill_pa_data, _read_pa_data),
    KdcRequestBody: (asn1.KDC_REQ_BODY, _fill_kdc_request_body, _read_kdc_request_body),
    KdcRequest: (asn1.TGS_REQ, _fill_kdc_request, _read_kdc_request),
    PacRequest: (asn1.KERB_PA_PAC_REQUEST, _fill_pac_request, _read_pac_request),
    PacOptionsRequest: (asn1.PA_PAC_OPTIONS, _fill_pac_options, _read_pac_options),
    ForUserRequest: (asn1.PA_FOR_USER_ENC, _fill_for_user, _read_for_user),
}


def _codec_for(entity_type: type) -> Tuple[type, Callable[[Any, Any], None], Callable[[Any], Any]]:
    try:
        return _CODECS[entity_type]
    except KeyError:
        raise EncodingError(f"No ASN.1 mapping for {entity_type.__name__}") from None


def to_asn1(entity: Any) -> Any:
    """Build the filled pyasn1 object for entity."""
    schema, fill, _ = _codec_for(type(entity))
    try:
        component = schema()
        fill(component, entity)
    # Sequence item assignment reports constraint violations as KeyError
    except (PyAsn1Error, KeyError) as e:
        raise EncodingError(f"Failed to encode {type(entity).__name__}: {e}") from e
    return component


def encode(entity: Any) -> bytes:
    """
    DER-encode a model entity.

    Args:
        entity: Any entity from tgsbuilder.kerberos.types with an ASN.1 mapping

    Returns:
        DER bytes

    Raises:
        EncodingError: If the entity has no mapping or a field violates
            its ASN.1 constraints
    """
    component = to_asn1(entity)
    try:
        return der_encoder.encode(component)
    except PyAsn1Error as e:
        raise EncodingError(f"Failed to encode {type(entity).__name__}: {e}") from e


def decode(data: bytes, entity_type: Type[T]) -> T:
    """
    Decode DER bytes into a model entity.

    Args:
        data: DER bytes
        entity_type: Model class to produce

    Returns:
        Decoded entity

    Raises:
        EncodingError: On malformed input, trailing bytes or an unmapped type
    """
    schema, _, read = _codec_for(entity_type)
    try:
        component, rest = der_decoder.decode(data, asn1Spec=schema())
        if rest:
            raise EncodingError(
                f"{len(rest)} trailing bytes after {entity_type.__name__}"
            )
        return read(component)
    except (PyAsn1Error, ValueError) as e:
        raise EncodingError(f"Failed to decode {entity_type.__name__}: {e}") from e
