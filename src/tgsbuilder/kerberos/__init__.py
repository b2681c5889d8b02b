"""
TGSBuilder Kerberos Module

Construction of Kerberos V5 TGS requests (RFC 4120 section 3.3).

Components:
- types: Message model (tickets, authenticators, AP-REQ, KDC-REQ)
- asn1: pyasn1 schemas
- codec: DER encoding and decoding of the message model
- tgs_request: TGS-REQ pipeline builders
- padata: PA-PAC-REQUEST, PA-FOR-USER and PA-PAC-OPTIONS helpers
"""

from tgsbuilder.kerberos.types import (
    PrincipalName,
    EncryptionKey,
    Checksum,
    EncryptedData,
    AuthorizationDataEntry,
    AuthorizationData,
    Ticket,
    Authenticator,
    ApReq,
    PreAuthData,
    KdcRequestBody,
    KdcRequest,
    PacRequest,
    PacOptionsRequest,
    ForUserRequest,
)
from tgsbuilder.kerberos.codec import encode, decode
from tgsbuilder.kerberos.tgs_request import (
    TGSBuilderConfig,
    TGSRequestBuilder,
    SubkeyOptions,
    RequestBodyOptions,
    ChecksumOptions,
    AuthenticatorOptions,
    AuthDataOptions,
    ApReqOptions,
    TGSRequestOptions,
    build_subkey,
    build_tgs_request_body,
    build_tgs_body_checksum,
    build_authenticator,
    build_enc_auth_data,
    build_ap_req,
    build_tgs_request,
    try_build_tgs_request,
    create_tgs_builder,
)
from tgsbuilder.kerberos.padata import (
    build_pa_pac_request,
    build_pa_for_user,
    build_pa_pac_options,
)

__all__ = [
    # Messages
    "PrincipalName",
    "EncryptionKey",
    "Checksum",
    "EncryptedData",
    "AuthorizationDataEntry",
    "AuthorizationData",
    "Ticket",
    "Authenticator",
    "ApReq",
    "PreAuthData",
    "KdcRequestBody",
    "KdcRequest",
    "PacRequest",
    "PacOptionsRequest",
    "ForUserRequest",
    # Codec
    "encode",
    "decode",
    # Builders
    "TGSBuilderConfig",
    "TGSRequestBuilder",
    "SubkeyOptions",
    "RequestBodyOptions",
    "ChecksumOptions",
    "AuthenticatorOptions",
    "AuthDataOptions",
    "ApReqOptions",
    "TGSRequestOptions",
    "build_subkey",
    "build_tgs_request_body",
    "build_tgs_body_checksum",
    "build_authenticator",
    "build_enc_auth_data",
    "build_ap_req",
    "build_tgs_request",
    "try_build_tgs_request",
    "create_tgs_builder",
    # Pre-authentication
    "build_pa_pac_request",
    "build_pa_for_user",
    "build_pa_pac_options",
]
