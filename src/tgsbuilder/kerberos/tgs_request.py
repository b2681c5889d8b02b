"""
TGSBuilder TGS Request Builder

Builds KRB_TGS_REQ messages (RFC 4120 section 3.3).

The request is assembled as a strict top-down pipeline:

    Subkey -> Enc Authorization Data -> Request Body -> Checksum
           -> Authenticator -> AP-REQ -> PA-TGS-REQ -> TGS-REQ

Every stage accepts a pre-built artifact in place of building it, so
callers can override any intermediate value. Defaults are resolved by
explicitly calling the lower stage; no stage calls back up the chain.

Bindings that must hold in the final request:
1. The checksum in the authenticator covers the exact DER bytes of the
   request body that is sent.
2. The authenticator is encrypted under the ticket session key (usage 7),
   never under the subkey.
3. Authorization data is encrypted under the subkey (usage 5), and the
   same subkey is carried in the authenticator unless the caller supplies
   distinct values.
4. PA-TGS-REQ is always the first PA-DATA entry.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Tuple

import attrs
import structlog
from attrs import field
from returns.result import Failure, Result, Success

from tgsbuilder.core.crypto import KerberosCrypto
from tgsbuilder.core.exceptions import MissingRequiredField, TGSBuilderError
from tgsbuilder.core.sources import (
    Clock,
    RandomSource,
    SeededRandomSource,
    SystemClock,
    SystemRandomSource,
)
from tgsbuilder.core.types import (
    KERBEROS_EPOCH,
    KERBEROS_VERSION,
    ChecksumType,
    EncryptionType,
    KDCOptions,
    KeyUsage,
    MessageType,
    NameType,
    PreAuthType,
)
from tgsbuilder.kerberos.codec import encode
from tgsbuilder.kerberos.types import (
    ApReq,
    Authenticator,
    AuthorizationData,
    Checksum,
    EncryptedData,
    EncryptionKey,
    KdcRequest,
    KdcRequestBody,
    PreAuthData,
    PrincipalName,
    Ticket,
    to_principal_name,
)

logger = structlog.get_logger()

# Nonces are six random decimal digits.
NONCE_UPPER_BOUND = 1000000


def _default(value: Any, fallback: Any) -> Any:
    return fallback if value is None else value


def _optional_flags(value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, KDCOptions):
        return value.to_flags()
    return int(value)


def _flags(value: Any) -> int:
    if isinstance(value, KDCOptions):
        return value.to_flags()
    return int(value)


def _optional_int_tuple(values: Any) -> Optional[Tuple[int, ...]]:
    if values is None:
        return None
    return tuple(int(v) for v in values)


def empty_client_name() -> PrincipalName:
    """Client name used in an authenticator when none is supplied."""
    return PrincipalName(name_type=NameType.NT_PRINCIPAL, components=())


# =============================================================================
# CONFIGURATION
# =============================================================================


@attrs.define(frozen=True, slots=True)
class TGSBuilderConfig:
    """
    TGS request builder configuration.

    Attributes:
        default_etype: Subkey enctype when none is supplied
        default_etypes: Acceptable enctypes advertised in the request body
        default_kdc_options: KDC options bitmask (Forwardable, Proxiable, Renewable)
        default_cksumtype: Authenticator checksum type (RSA-MD5, unkeyed)
        deterministic: Draw all randomness from a seeded generator
        seed: Seed for deterministic mode
    """

    default_etype: int = int(EncryptionType.RC4_HMAC)
    default_etypes: Tuple[int, ...] = field(
        default=(int(EncryptionType.RC4_HMAC),),
        converter=lambda values: tuple(int(v) for v in values),
    )
    default_kdc_options: int = field(
        default=KDCOptions.tgs_default().to_flags(), converter=_flags
    )
    default_cksumtype: int = int(ChecksumType.RSA_MD5)
    deterministic: bool = False
    seed: int = 0


# =============================================================================
# BUILDER OPTIONS
# =============================================================================


@attrs.define(frozen=True, slots=True)
class SubkeyOptions:
    """Inputs for build_subkey. None means use the default."""

    keytype: Optional[int] = None
    keyvalue: Optional[bytes] = field(default=None, repr=False)


@attrs.define(frozen=True, slots=True)
class RequestBodyOptions:
    """Inputs for build_tgs_request_body. None means use the default."""

    kdc_options: Optional[int] = field(default=None, converter=_optional_flags)
    cname: Optional[PrincipalName] = field(default=None, converter=to_principal_name)
    realm: Optional[str] = None
    sname: Optional[PrincipalName] = field(default=None, converter=to_principal_name)
    from_time: Optional[datetime] = None
    till: Optional[datetime] = None
    rtime: Optional[datetime] = None
    nonce: Optional[int] = None
    etypes: Optional[Tuple[int, ...]] = field(default=None, converter=_optional_int_tuple)
    enc_authorization_data: Optional[EncryptedData] = None
    additional_tickets: Tuple[Ticket, ...] = field(factory=tuple, converter=tuple)


@attrs.define(frozen=True, slots=True)
class ChecksumOptions:
    """
    Inputs for build_tgs_body_checksum.

    body_options is only consulted when body is not supplied. key is only
    used by keyed checksum types.
    """

    body: Optional[KdcRequestBody] = None
    body_options: Optional[RequestBodyOptions] = None
    cksumtype: Optional[int] = None
    key: Optional[EncryptionKey] = None


@attrs.define(frozen=True, slots=True)
class AuthenticatorOptions:
    """
    Inputs for build_authenticator.

    checksum_options and subkey_options are only consulted when checksum
    and subkey are not supplied.
    """

    cname: Optional[PrincipalName] = field(default=None, converter=to_principal_name)
    realm: Optional[str] = None
    ctime: Optional[datetime] = None
    cusec: Optional[int] = None
    checksum: Optional[Checksum] = None
    subkey: Optional[EncryptionKey] = None
    seq_number: Optional[int] = None
    checksum_options: Optional[ChecksumOptions] = None
    subkey_options: Optional[SubkeyOptions] = None


@attrs.define(frozen=True, slots=True)
class AuthDataOptions:
    """Inputs for build_enc_auth_data. auth_data is required."""

    auth_data: Optional[AuthorizationData] = None
    subkey: Optional[EncryptionKey] = None
    subkey_options: Optional[SubkeyOptions] = None


@attrs.define(frozen=True, slots=True)
class ApReqOptions:
    """
    Inputs for build_ap_req. ticket is required.

    session_key should be the session key of the ticket. Without one the
    authenticator is encrypted under a freshly generated key, which no
    KDC will accept.
    """

    ticket: Optional[Ticket] = None
    authenticator: Optional[Authenticator] = None
    session_key: Optional[EncryptionKey] = None
    pvno: int = KERBEROS_VERSION
    msg_type: int = int(MessageType.AP_REQ)
    ap_options: int = 0
    authenticator_options: Optional[AuthenticatorOptions] = None
    subkey_options: Optional[SubkeyOptions] = None


@attrs.define(frozen=True, slots=True)
class TGSRequestOptions:
    """
    Caller inputs for build_tgs_request.

    Attributes:
        ticket: TGT (or other ticket) presented to the KDC
        session_key: Session key of ticket
        cname: Client principal name
        realm: Realm used for both the request body and the authenticator
        sname: Requested service principal name
        subkey: Pre-built request subkey
        subkey_type: Subkey enctype when subkey is not supplied
        subkey_value: Subkey bytes when subkey is not supplied
        auth_data: Plaintext authorization data to encrypt under the subkey
        enc_auth_data: Pre-encrypted authorization data (wins over auth_data)
        kdc_options: KDC options bitmask or KDCOptions
        from_time: Requested start time
        till: Requested end time
        rtime: Requested renew-till time
        nonce: Request nonce
        etypes: Acceptable enctypes
        additional_tickets: Evidence tickets (S4U2Proxy, user-to-user)
        checksum: Pre-built authenticator checksum
        cksumtype: Checksum type when checksum is not supplied
        authenticator: Pre-built authenticator
        ctime: Authenticator timestamp
        cusec: Authenticator microseconds
        seq_number: Authenticator sequence number
        ap_req: Pre-built AP-REQ (carries its own ticket)
        ap_options: AP options bitmask
        pa_data: Extra PA-DATA entries, sent after PA-TGS-REQ in this order
    """

    ticket: Optional[Ticket] = None
    session_key: Optional[EncryptionKey] = None
    cname: Optional[PrincipalName] = field(default=None, converter=to_principal_name)
    realm: Optional[str] = None
    sname: Optional[PrincipalName] = field(default=None, converter=to_principal_name)
    subkey: Optional[EncryptionKey] = None
    subkey_type: Optional[int] = None
    subkey_value: Optional[bytes] = field(default=None, repr=False)
    auth_data: Optional[AuthorizationData] = None
    enc_auth_data: Optional[EncryptedData] = None
    kdc_options: Optional[int] = field(default=None, converter=_optional_flags)
    from_time: Optional[datetime] = None
    till: Optional[datetime] = None
    rtime: Optional[datetime] = None
    nonce: Optional[int] = None
    etypes: Optional[Tuple[int, ...]] = field(default=None, converter=_optional_int_tuple)
    additional_tickets: Tuple[Ticket, ...] = field(factory=tuple, converter=tuple)
    checksum: Optional[Checksum] = None
    cksumtype: Optional[int] = None
    authenticator: Optional[Authenticator] = None
    ctime: Optional[datetime] = None
    cusec: Optional[int] = None
    seq_number: Optional[int] = None
    ap_req: Optional[ApReq] = None
    ap_options: int = 0
    pa_data: Tuple[PreAuthData, ...] = field(factory=tuple, converter=tuple)


# =============================================================================
# TGS REQUEST BUILDER
# =============================================================================


@attrs.define
class TGSRequestBuilder:
    """
    Builds TGS-REQ messages and their sub-messages.

    The builder keeps no per-request state. Time comes from clock and
    randomness (subkeys, nonces, confounders) from random, so one builder
    can be shared between threads when its sources are thread-safe.

    Example:
        builder = TGSRequestBuilder()
        request = builder.build_tgs_request(
            TGSRequestOptions(
                ticket=tgt,
                session_key=session_key,
                cname="alice",
                realm="EXAMPLE.COM",
                sname="krbtgt/EXAMPLE.COM",
            )
        )
        wire = encode(request)
    """

    config: TGSBuilderConfig = attrs.Factory(TGSBuilderConfig)
    clock: Clock = attrs.Factory(SystemClock)
    random: Optional[RandomSource] = None
    crypto: Optional[KerberosCrypto] = None

    _logger: Any = attrs.Factory(lambda: structlog.get_logger())

    def __attrs_post_init__(self) -> None:
        if self.random is None:
            if self.config.deterministic:
                self.random = SeededRandomSource(self.config.seed)
                self._logger.warning(
                    "deterministic_mode_enabled",
                    seed=self.config.seed,
                )
            else:
                self.random = SystemRandomSource()
        if self.crypto is None:
            self.crypto = KerberosCrypto(random=self.random)

    # -------------------------------------------------------------------------
    # Stages
    # -------------------------------------------------------------------------

    def build_subkey(self, options: Optional[SubkeyOptions] = None) -> EncryptionKey:
        """
        Build the per-request subkey.

        Args:
            options: Explicit keytype and/or keyvalue

        Returns:
            EncryptionKey with fresh random bytes unless keyvalue is supplied

        Raises:
            UnsupportedAlgorithm: If keyvalue is absent and keytype is not registered
        """
        options = options or SubkeyOptions()
        keytype = options.keytype if options.keytype is not None else self.config.default_etype
        generated = options.keyvalue is None
        keyvalue = self.crypto.random_key(keytype) if generated else options.keyvalue

        self._logger.debug("built_subkey", keytype=int(keytype), generated=generated)

        return EncryptionKey(keytype=keytype, keyvalue=keyvalue)

    def build_tgs_request_body(
        self, options: Optional[RequestBodyOptions] = None
    ) -> KdcRequestBody:
        """
        Build the KDC-REQ-BODY.

        Defaults: Forwardable|Proxiable|Renewable options, epoch times (KDC
        chooses), a random six digit nonce, RC4-HMAC as the only enctype,
        an empty realm. Names are omitted when not supplied.
        """
        options = options or RequestBodyOptions()
        nonce = options.nonce
        if nonce is None:
            nonce = self.random.randbelow(NONCE_UPPER_BOUND)

        body = KdcRequestBody(
            kdc_options=_default(options.kdc_options, self.config.default_kdc_options),
            cname=options.cname,
            realm=_default(options.realm, ""),
            sname=options.sname,
            from_time=_default(options.from_time, KERBEROS_EPOCH),
            till=_default(options.till, KERBEROS_EPOCH),
            rtime=_default(options.rtime, KERBEROS_EPOCH),
            nonce=nonce,
            etypes=_default(options.etypes, self.config.default_etypes),
            enc_authorization_data=options.enc_authorization_data,
            additional_tickets=options.additional_tickets,
        )

        self._logger.debug(
            "built_tgs_request_body",
            realm=body.realm,
            sname=None if body.sname is None else str(body.sname),
            kdc_options=hex(body.kdc_options),
            etypes=list(body.etypes),
        )

        return body

    def build_tgs_body_checksum(
        self, options: Optional[ChecksumOptions] = None
    ) -> Checksum:
        """
        Checksum the DER encoding of a request body.

        Args:
            options: Body (or options to build one), checksum type and key

        Returns:
            Checksum for the authenticator cksum field

        Raises:
            EncodingError: If the body cannot be encoded
            UnsupportedAlgorithm: If the checksum type is not registered
            CryptoError: If a keyed checksum type is requested without a key
        """
        options = options or ChecksumOptions()
        body = options.body
        if body is None:
            body = self.build_tgs_request_body(options.body_options)
        cksumtype = _default(options.cksumtype, self.config.default_cksumtype)
        key = None if options.key is None else options.key.keyvalue

        value = self.crypto.checksum(
            cksumtype,
            encode(body),
            key=key,
            usage=KeyUsage.TGS_REQ_AUTHENTICATOR_CKSUM,
        )

        self._logger.debug("built_tgs_body_checksum", cksumtype=int(cksumtype))

        return Checksum(cksumtype=cksumtype, checksum=value)

    def build_authenticator(
        self, options: Optional[AuthenticatorOptions] = None
    ) -> Authenticator:
        """
        Build the client authenticator.

        ctime and cusec come from the clock unless supplied; a supplied
        ctime provides cusec from its microseconds. A supplied subkey is
        embedded unchanged. Without cname the client name is an empty
        NT-PRINCIPAL.
        """
        options = options or AuthenticatorOptions()
        cname = options.cname
        if cname is None:
            cname = empty_client_name()

        ctime = options.ctime if options.ctime is not None else self.clock.now()
        cusec = _default(options.cusec, ctime.microsecond)
        checksum = options.checksum
        if checksum is None:
            checksum = self.build_tgs_body_checksum(options.checksum_options)
        subkey = options.subkey
        if subkey is None:
            subkey = self.build_subkey(options.subkey_options)

        authenticator = Authenticator(
            crealm=_default(options.realm, ""),
            cname=cname,
            cksum=checksum,
            cusec=cusec,
            ctime=ctime,
            subkey=subkey,
            seq_number=options.seq_number,
        )

        self._logger.debug(
            "built_authenticator",
            cname=str(authenticator.cname),
            crealm=authenticator.crealm,
            cksumtype=checksum.cksumtype,
            subkey_type=subkey.keytype,
        )

        return authenticator

    def build_enc_auth_data(self, options: Optional[AuthDataOptions] = None) -> EncryptedData:
        """
        Encrypt authorization data under the request subkey (key usage 5).

        Raises:
            MissingRequiredField: If auth_data is absent
        """
        options = options or AuthDataOptions()
        if options.auth_data is None:
            raise MissingRequiredField("auth_data")

        subkey = options.subkey
        if subkey is None:
            subkey = self.build_subkey(options.subkey_options)

        cipher = self.crypto.encrypt(
            subkey.keytype,
            subkey.keyvalue,
            KeyUsage.TGS_REQ_AUTH_DATA_SUBKEY,
            encode(options.auth_data),
        )

        self._logger.debug(
            "built_enc_auth_data",
            etype=subkey.keytype,
            entries=len(options.auth_data.entries),
        )

        return EncryptedData(etype=subkey.keytype, cipher=cipher)

    def build_ap_req(self, options: Optional[ApReqOptions] = None) -> ApReq:
        """
        Encrypt the authenticator under the session key and wrap it with
        the ticket (key usage 7).

        Raises:
            MissingRequiredField: If ticket is absent
        """
        options = options or ApReqOptions()
        if options.ticket is None:
            raise MissingRequiredField("ticket")

        authenticator = options.authenticator
        if authenticator is None:
            authenticator = self.build_authenticator(options.authenticator_options)

        session_key = options.session_key
        if session_key is None:
            self._logger.warning(
                "ap_req_session_key_missing",
                reason="encrypting authenticator under a generated key",
            )
            session_key = self.build_subkey(options.subkey_options)

        cipher = self.crypto.encrypt(
            session_key.keytype,
            session_key.keyvalue,
            KeyUsage.TGS_REQ_AUTHENTICATOR,
            encode(authenticator),
        )

        self._logger.debug(
            "built_ap_req",
            etype=session_key.keytype,
            ticket_realm=options.ticket.realm,
            ticket_sname=str(options.ticket.sname),
        )

        return ApReq(
            pvno=options.pvno,
            msg_type=options.msg_type,
            ap_options=_flags(options.ap_options),
            ticket=options.ticket,
            authenticator=EncryptedData(etype=session_key.keytype, cipher=cipher),
        )

    # -------------------------------------------------------------------------
    # Assembly
    # -------------------------------------------------------------------------

    def build_tgs_request(self, options: TGSRequestOptions) -> KdcRequest:
        """
        Assemble a complete TGS-REQ.

        Args:
            options: Caller inputs; every intermediate artifact may be supplied

        Returns:
            KdcRequest ready for encoding and transport

        Raises:
            MissingRequiredField: If neither ticket nor ap_req is supplied
            EncodingError: If a structure cannot be encoded
            CryptoError: If encryption or checksumming fails
        """
        if options.ap_req is None and options.ticket is None:
            raise MissingRequiredField("ticket")

        # 1. Subkey
        subkey = options.subkey
        if subkey is None:
            subkey = self.build_subkey(
                SubkeyOptions(keytype=options.subkey_type, keyvalue=options.subkey_value)
            )

        # 2. Authorization data, encrypted under the subkey
        enc_auth_data = options.enc_auth_data
        if enc_auth_data is None and options.auth_data is not None:
            enc_auth_data = self.build_enc_auth_data(
                AuthDataOptions(auth_data=options.auth_data, subkey=subkey)
            )

        # 3. Body
        body = self.build_tgs_request_body(
            RequestBodyOptions(
                kdc_options=options.kdc_options,
                cname=options.cname,
                realm=options.realm,
                sname=options.sname,
                from_time=options.from_time,
                till=options.till,
                rtime=options.rtime,
                nonce=options.nonce,
                etypes=options.etypes,
                enc_authorization_data=enc_auth_data,
                additional_tickets=options.additional_tickets,
            )
        )

        # 4-6. Checksum, authenticator and AP-REQ; a supplied AP-REQ replaces all three
        ap_req = options.ap_req
        if ap_req is None:
            checksum = options.checksum
            if checksum is None:
                checksum = self.build_tgs_body_checksum(
                    ChecksumOptions(
                        body=body,
                        cksumtype=options.cksumtype,
                        key=options.session_key,
                    )
                )

            authenticator = options.authenticator
            if authenticator is None:
                authenticator = self.build_authenticator(
                    AuthenticatorOptions(
                        cname=options.cname,
                        realm=options.realm,
                        ctime=options.ctime,
                        cusec=options.cusec,
                        checksum=checksum,
                        subkey=subkey,
                        seq_number=options.seq_number,
                    )
                )

            ap_req = self.build_ap_req(
                ApReqOptions(
                    ticket=options.ticket,
                    authenticator=authenticator,
                    session_key=options.session_key,
                    ap_options=options.ap_options,
                )
            )

        # 7. PA-TGS-REQ first, then caller entries in order
        padata = (
            PreAuthData(padata_type=PreAuthType.PA_TGS_REQ, padata_value=encode(ap_req)),
        ) + options.pa_data

        # 8. Envelope
        request = KdcRequest(
            pvno=KERBEROS_VERSION,
            msg_type=MessageType.TGS_REQ,
            padata=padata,
            req_body=body,
        )

        self._logger.info(
            "built_tgs_request",
            realm=body.realm,
            cname=None if body.cname is None else str(body.cname),
            sname=None if body.sname is None else str(body.sname),
            nonce=body.nonce,
            padata_types=[pa.padata_type for pa in padata],
            has_enc_auth_data=enc_auth_data is not None,
            additional_tickets=len(body.additional_tickets),
        )

        return request

    def try_build_tgs_request(
        self, options: TGSRequestOptions
    ) -> Result[KdcRequest, TGSBuilderError]:
        """
        Assemble a TGS-REQ, returning errors as values.

        Returns:
            Success(KdcRequest) or Failure(TGSBuilderError)
        """
        try:
            return Success(self.build_tgs_request(options))
        except TGSBuilderError as e:
            self._logger.warning(
                "tgs_request_build_failed",
                error_type=type(e).__name__,
                error=e.message,
            )
            return Failure(e)


# =============================================================================
# MODULE-LEVEL API
# =============================================================================


_default_builder = TGSRequestBuilder()


def build_subkey(options: Optional[SubkeyOptions] = None) -> EncryptionKey:
    """Build a subkey with the default builder."""
    return _default_builder.build_subkey(options)


def build_tgs_request_body(options: Optional[RequestBodyOptions] = None) -> KdcRequestBody:
    """Build a request body with the default builder."""
    return _default_builder.build_tgs_request_body(options)


def build_tgs_body_checksum(options: Optional[ChecksumOptions] = None) -> Checksum:
    """Checksum a request body with the default builder."""
    return _default_builder.build_tgs_body_checksum(options)


def build_authenticator(options: Optional[AuthenticatorOptions] = None) -> Authenticator:
    """Build an authenticator with the default builder."""
    return _default_builder.build_authenticator(options)


def build_enc_auth_data(options: Optional[AuthDataOptions] = None) -> EncryptedData:
    """Encrypt authorization data with the default builder."""
    return _default_builder.build_enc_auth_data(options)


def build_ap_req(options: Optional[ApReqOptions] = None) -> ApReq:
    """Build an AP-REQ with the default builder."""
    return _default_builder.build_ap_req(options)


def build_tgs_request(options: TGSRequestOptions) -> KdcRequest:
    """Assemble a TGS-REQ with the default builder."""
    return _default_builder.build_tgs_request(options)


def try_build_tgs_request(options: TGSRequestOptions) -> Result[KdcRequest, TGSBuilderError]:
    """Assemble a TGS-REQ with the default builder, returning a Result."""
    return _default_builder.try_build_tgs_request(options)


# =============================================================================
# FACTORY FUNCTIONS
# =============================================================================


def create_tgs_builder(
    default_etype: int = EncryptionType.RC4_HMAC,
    etypes: Optional[Tuple[int, ...]] = None,
    kdc_options: Any = None,
    cksumtype: int = ChecksumType.RSA_MD5,
    deterministic: bool = False,
    seed: int = 0,
    clock: Optional[Clock] = None,
) -> TGSRequestBuilder:
    """
    Create a TGS request builder.

    Args:
        default_etype: Subkey enctype when none is supplied
        etypes: Advertised enctypes (defaults to default_etype alone)
        kdc_options: KDC options bitmask or KDCOptions (defaults to 0x50800000)
        cksumtype: Authenticator checksum type
        deterministic: Seeded randomness for reproducible output (tests only)
        seed: Seed for deterministic mode
        clock: Time source (defaults to the system clock)

    Returns:
        Configured TGSRequestBuilder

    Example:
        # AES256 subkeys, AES then RC4 advertised
        builder = create_tgs_builder(
            default_etype=EncryptionType.AES256_CTS_HMAC_SHA1_96,
            etypes=(EncryptionType.AES256_CTS_HMAC_SHA1_96, EncryptionType.RC4_HMAC),
        )

        # Reproducible requests for test vectors
        builder = create_tgs_builder(deterministic=True, seed=1234,
                                     clock=FixedClock(datetime(2024, 1, 1, tzinfo=timezone.utc)))
    """
    config = TGSBuilderConfig(
        default_etype=int(default_etype),
        default_etypes=etypes if etypes is not None else (int(default_etype),),
        default_kdc_options=(
            kdc_options if kdc_options is not None else KDCOptions.tgs_default()
        ),
        default_cksumtype=int(cksumtype),
        deterministic=deterministic,
        seed=seed,
    )

    logger.info(
        "created_tgs_builder",
        default_etype=config.default_etype,
        etypes=list(config.default_etypes),
        deterministic=deterministic,
    )

    return TGSRequestBuilder(config=config, clock=clock or SystemClock())
