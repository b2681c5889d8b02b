"""
TGSBuilder Pre-Authentication Helpers

Builders for PA-DATA entries callers commonly append after PA-TGS-REQ
(via TGSRequestOptions.pa_data):

- PA-PAC-REQUEST (128): ask for the PAC to be included or omitted
- PA-FOR-USER (129): S4U2Self, request a ticket on behalf of another user
- PA-PAC-OPTIONS (167): claims, branch-aware and RBCD flags

For S4U2Proxy, put the evidence ticket in
TGSRequestOptions.additional_tickets and set cname_in_addl_tkt in the
KDC options.
"""

from __future__ import annotations

import struct
from typing import Optional, Union

import structlog

from tgsbuilder.core.crypto import KerberosCrypto
from tgsbuilder.core.types import ChecksumType, KeyUsage, PacOptions, PreAuthType
from tgsbuilder.kerberos.codec import encode
from tgsbuilder.kerberos.types import (
    Checksum,
    EncryptionKey,
    ForUserRequest,
    PacOptionsRequest,
    PacRequest,
    PreAuthData,
    PrincipalLike,
    to_principal_name,
)

logger = structlog.get_logger()

S4U_AUTH_PACKAGE = "Kerberos"


def build_pa_pac_request(include_pac: bool = True) -> PreAuthData:
    """
    Build a PA-PAC-REQUEST entry.

    Args:
        include_pac: Whether the issued ticket should carry a PAC

    Returns:
        PreAuthData of type PA_PAC_REQUEST
    """
    return PreAuthData(
        padata_type=PreAuthType.PA_PAC_REQUEST,
        padata_value=encode(PacRequest(include_pac=include_pac)),
    )


def build_pa_pac_options(options: Union[PacOptions, int, None] = None) -> PreAuthData:
    """
    Build a PA-PAC-OPTIONS entry.

    Args:
        options: PacOptions or a raw 32-bit flags value (defaults to
            resource-based constrained delegation, as S4U2Proxy needs)

    Returns:
        PreAuthData of type PA_PAC_OPTIONS
    """
    if options is None:
        options = PacOptions(resource_based_constrained_delegation=True)
    flags = options.to_flags() if isinstance(options, PacOptions) else int(options)
    return PreAuthData(
        padata_type=PreAuthType.PA_PAC_OPTIONS,
        padata_value=encode(PacOptionsRequest(flags=flags)),
    )


def s4u_byte_array(user: PrincipalLike, realm: str, auth_package: str = S4U_AUTH_PACKAGE) -> bytes:
    """
    Bytes covered by the PA-FOR-USER checksum (MS-SFU 2.2.1).

    Little-endian name type, then every name component, the realm and the
    auth package, concatenated without separators.
    """
    name = to_principal_name(user)
    data = struct.pack("<I", name.name_type)
    data += "".join(name.components).encode("utf-8")
    data += realm.encode("utf-8")
    data += auth_package.encode("utf-8")
    return data


def build_pa_for_user(
    user: PrincipalLike,
    realm: str,
    session_key: EncryptionKey,
    crypto: Optional[KerberosCrypto] = None,
    auth_package: str = S4U_AUTH_PACKAGE,
) -> PreAuthData:
    """
    Build a PA-FOR-USER entry for S4U2Self.

    The checksum is KERB_CHECKSUM_HMAC_MD5 keyed with the TGT session key
    (key usage 17) regardless of the session key enctype.

    Args:
        user: User to impersonate (e.g., "administrator")
        realm: Realm of the impersonated user
        session_key: Session key of the TGT the request is sent with
        crypto: Crypto collaborator (default KerberosCrypto())
        auth_package: Authentication package name

    Returns:
        PreAuthData of type PA_FOR_USER
    """
    crypto = crypto or KerberosCrypto()
    name = to_principal_name(user)
    value = crypto.checksum(
        ChecksumType.HMAC_MD5,
        s4u_byte_array(name, realm, auth_package),
        key=session_key.keyvalue,
        usage=KeyUsage.PA_FOR_USER_CKSUM,
    )

    logger.debug("built_pa_for_user", user=str(name), realm=realm)

    return PreAuthData(
        padata_type=PreAuthType.PA_FOR_USER,
        padata_value=encode(
            ForUserRequest(
                user_name=name,
                user_realm=realm,
                cksum=Checksum(cksumtype=ChecksumType.HMAC_MD5, checksum=value),
                auth_package=auth_package,
            )
        ),
    )
