"""
TGSBuilder Exception Types

Custom exceptions for TGS-REQ construction errors.

Every error is raised while the request is still being built, before any
network interaction. A failed build never returns a partial request.
"""

from typing import Optional


class TGSBuilderError(Exception):
    """Base exception for all TGSBuilder errors."""

    def __init__(self, message: str, code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class MissingRequiredField(TGSBuilderError):
    """
    A builder was asked to produce an artifact without a field it
    cannot default.

    Raised when an AP-REQ is requested without a ticket, or when
    authorization data encryption is requested without authorization
    data.
    """

    def __init__(self, field_name: str, message: Optional[str] = None) -> None:
        if message is None:
            message = f"{field_name} is required"
        super().__init__(message)
        self.field_name = field_name


class EncodingError(TGSBuilderError):
    """
    ASN.1 encoding or decoding failed.

    Wraps the underlying pyasn1 error, which is kept as __cause__.
    """

    pass


class CryptoError(TGSBuilderError):
    """
    Cryptographic operation failed.

    This indicates an error in encryption, decryption, checksum
    computation or key validation.
    """

    pass


class UnsupportedAlgorithm(CryptoError):
    """
    No profile is registered for the requested encryption or checksum type.
    """

    def __init__(self, kind: str, identifier: int) -> None:
        super().__init__(f"Unsupported {kind}: {identifier}", code=identifier)
        self.kind = kind
        self.identifier = identifier


class IntegrityError(CryptoError):
    """
    Ciphertext failed its integrity check on decryption.

    Maps to KRB_AP_ERR_BAD_INTEGRITY from RFC 4120.
    """

    def __init__(self, message: str = "Integrity check failed") -> None:
        super().__init__(message, code=31)  # KRB_AP_ERR_BAD_INTEGRITY
