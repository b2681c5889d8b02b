"""
TGSBuilder Core Module

Provides foundational types and collaborators used by the Kerberos builders.

Components:
- types: Protocol identifiers (enctypes, checksum types, key usages) and flag sets
- sources: Injectable clock and randomness
- crypto: Kerberos encryption and checksum profiles
- exceptions: Custom exception types
"""

from tgsbuilder.core.types import (
    KERBEROS_EPOCH,
    KERBEROS_VERSION,
    AuthorizationDataType,
    ChecksumType,
    EncryptionType,
    KDCOptions,
    KeyUsage,
    MessageType,
    NameType,
    PacOptions,
    PreAuthType,
)
from tgsbuilder.core.sources import (
    Clock,
    FixedClock,
    RandomSource,
    SeededRandomSource,
    SystemClock,
    SystemRandomSource,
)
from tgsbuilder.core.crypto import KerberosCrypto
from tgsbuilder.core.exceptions import (
    TGSBuilderError,
    MissingRequiredField,
    EncodingError,
    CryptoError,
    UnsupportedAlgorithm,
    IntegrityError,
)

__all__ = [
    # Types
    "KERBEROS_EPOCH",
    "KERBEROS_VERSION",
    "AuthorizationDataType",
    "ChecksumType",
    "EncryptionType",
    "KDCOptions",
    "KeyUsage",
    "MessageType",
    "NameType",
    "PacOptions",
    "PreAuthType",
    # Sources
    "Clock",
    "FixedClock",
    "RandomSource",
    "SeededRandomSource",
    "SystemClock",
    "SystemRandomSource",
    # Crypto
    "KerberosCrypto",
    # Exceptions
    "TGSBuilderError",
    "MissingRequiredField",
    "EncodingError",
    "CryptoError",
    "UnsupportedAlgorithm",
    "IntegrityError",
]
