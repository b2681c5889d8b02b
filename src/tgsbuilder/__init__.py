"""
TGSBuilder - Kerberos TGS-REQ Construction

Builds Kerberos V5 Ticket-Granting-Service requests: the message a client
sends to a KDC to exchange a TGT for a service ticket.

The builder binds the sub-messages together: a checksum over the request
body goes into an authenticator, the authenticator is encrypted under the
ticket session key to form an AP-REQ, the AP-REQ travels as PA-TGS-REQ,
and optional authorization data is encrypted under a per-request subkey.
Every intermediate artifact can be supplied by the caller.

Supported Algorithms:
- RC4-HMAC (RFC 4757)
- AES128/AES256-CTS-HMAC-SHA1-96 (RFC 3962)

Example Usage:
    from tgsbuilder import TGSRequestOptions, create_tgs_builder, encode

    builder = create_tgs_builder()
    request = builder.build_tgs_request(
        TGSRequestOptions(
            ticket=tgt,
            session_key=session_key,
            cname="alice",
            realm="EXAMPLE.COM",
            sname="cifs/fileserver.example.com",
        )
    )
    wire = encode(request)  # DER [APPLICATION 12] TGS-REQ
"""

from tgsbuilder.core.types import EncryptionType, ChecksumType, KDCOptions, PacOptions
from tgsbuilder.core.exceptions import (
    TGSBuilderError,
    MissingRequiredField,
    EncodingError,
    CryptoError,
    UnsupportedAlgorithm,
)
from tgsbuilder.kerberos.types import (
    AuthorizationData,
    AuthorizationDataEntry,
    EncryptionKey,
    KdcRequest,
    PrincipalName,
    Ticket,
)
from tgsbuilder.kerberos.codec import encode, decode
from tgsbuilder.kerberos.tgs_request import (
    TGSBuilderConfig,
    TGSRequestBuilder,
    TGSRequestOptions,
    build_tgs_request,
    try_build_tgs_request,
    create_tgs_builder,
)

__version__ = "0.1.0"

__all__ = [
    # Main API
    "TGSBuilderConfig",
    "TGSRequestBuilder",
    "TGSRequestOptions",
    "build_tgs_request",
    "try_build_tgs_request",
    "create_tgs_builder",
    "encode",
    "decode",
    # Types
    "EncryptionType",
    "ChecksumType",
    "KDCOptions",
    "PacOptions",
    "AuthorizationData",
    "AuthorizationDataEntry",
    "EncryptionKey",
    "KdcRequest",
    "PrincipalName",
    "Ticket",
    # Exceptions
    "TGSBuilderError",
    "MissingRequiredField",
    "EncodingError",
    "CryptoError",
    "UnsupportedAlgorithm",
    # Metadata
    "__version__",
]
