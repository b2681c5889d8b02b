"""
TGSBuilder Cryptographic Operations

Kerberos encryption and checksum profiles built on the cryptography
library and hashlib. NO custom primitives - only the RFC 3961 framing
(confounders, key derivation, ciphertext stealing) around standard ones.

Profiles:
- RC4-HMAC (etype 23) per RFC 4757
- AES128/AES256-CTS-HMAC-SHA1-96 (etypes 17/18) per RFC 3962
- RSA-MD5 (7), HMAC-MD5 (-138), HMAC-SHA1-96-AES128/256 (15/16) checksums

Profiles live in a registry keyed by the integer identifier so stronger
or newer algorithms can be registered without touching the builders.

Security:
- Integrity tags are compared in constant time
- Confounders and random keys come from an injectable RandomSource
"""

from __future__ import annotations

import hashlib
import hmac
import struct
from abc import ABC, abstractmethod
from math import gcd
from typing import Dict, Optional

import attrs
from cryptography.hazmat.decrepit.ciphers.algorithms import ARC4
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from tgsbuilder.core.exceptions import CryptoError, IntegrityError, UnsupportedAlgorithm
from tgsbuilder.core.sources import RandomSource, SystemRandomSource
from tgsbuilder.core.types import ChecksumType, EncryptionType, KeyUsage

AES_BLOCK_SIZE = 16


# =============================================================================
# HASH AND HMAC FUNCTIONS
# =============================================================================


def md5_hash(data: bytes) -> bytes:
    """
    Compute MD5 hash.

    Args:
        data: Data to hash

    Returns:
        16-byte MD5 hash
    """
    return hashlib.md5(data).digest()  # noqa: S324


def hmac_md5(key: bytes, data: bytes) -> bytes:
    """
    Compute HMAC-MD5.

    Used by the RC4-HMAC profile for key derivation and integrity.

    Args:
        key: HMAC key
        data: Data to authenticate

    Returns:
        16-byte HMAC-MD5 tag
    """
    return hmac.new(key, data, hashlib.md5).digest()


def hmac_sha1(key: bytes, data: bytes) -> bytes:
    """
    Compute HMAC-SHA1.

    Truncated to 96 bits by the AES profiles.

    Args:
        key: HMAC key
        data: Data to authenticate

    Returns:
        20-byte HMAC-SHA1 tag
    """
    return hmac.new(key, data, hashlib.sha1).digest()


def constant_time_compare(a: bytes, b: bytes) -> bool:
    """
    Compare two byte strings in constant time.

    Prevents timing attacks on integrity tag comparisons.
    """
    return hmac.compare_digest(a, b)


# =============================================================================
# CIPHER PRIMITIVES
# =============================================================================


def encrypt_rc4(key: bytes, plaintext: bytes) -> bytes:
    """
    Encrypt using RC4.

    WARNING: RC4 is deprecated and should only be used for compatibility.

    Args:
        key: Encryption key
        plaintext: Data to encrypt

    Returns:
        Ciphertext
    """
    cipher = Cipher(ARC4(key), mode=None)
    encryptor = cipher.encryptor()
    return encryptor.update(plaintext) + encryptor.finalize()


def decrypt_rc4(key: bytes, ciphertext: bytes) -> bytes:
    """Decrypt using RC4."""
    # RC4 is symmetric - encryption and decryption are the same
    return encrypt_rc4(key, ciphertext)


def _xor(a: bytes, b: bytes) -> bytes:
    return bytes(x ^ y for x, y in zip(a, b))


def encrypt_aes_cts(key: bytes, plaintext: bytes) -> bytes:
    """
    Encrypt using AES-CBC with ciphertext stealing and a zero IV.

    RFC 3962 section 5: the last two ciphertext blocks are swapped and the
    final block is truncated to the plaintext length.

    Args:
        key: AES key (16 or 32 bytes)
        plaintext: At least one block of data

    Returns:
        Ciphertext, same length as plaintext
    """
    if len(plaintext) < AES_BLOCK_SIZE:
        raise CryptoError("AES-CTS plaintext must be at least one block")

    padded = plaintext + b"\x00" * (-len(plaintext) % AES_BLOCK_SIZE)
    encryptor = Cipher(algorithms.AES(key), modes.CBC(b"\x00" * AES_BLOCK_SIZE)).encryptor()
    ciphertext = encryptor.update(padded) + encryptor.finalize()

    if len(plaintext) > AES_BLOCK_SIZE:
        last_len = len(plaintext) % AES_BLOCK_SIZE or AES_BLOCK_SIZE
        ciphertext = ciphertext[:-32] + ciphertext[-16:] + ciphertext[-32:-16][:last_len]
    return ciphertext


def decrypt_aes_cts(key: bytes, ciphertext: bytes) -> bytes:
    """
    Decrypt AES-CBC with ciphertext stealing and a zero IV.

    Args:
        key: AES key
        ciphertext: At least one block of data

    Returns:
        Plaintext, same length as ciphertext

    Raises:
        CryptoError: If ciphertext is shorter than one block
    """
    if len(ciphertext) < AES_BLOCK_SIZE:
        raise CryptoError("AES-CTS ciphertext must be at least one block")

    decryptor = Cipher(algorithms.AES(key), modes.ECB()).decryptor()
    if len(ciphertext) == AES_BLOCK_SIZE:
        return decryptor.update(ciphertext)

    blocks = [
        ciphertext[pos:pos + AES_BLOCK_SIZE]
        for pos in range(0, len(ciphertext), AES_BLOCK_SIZE)
    ]
    last_len = len(blocks[-1])

    # Plain CBC for everything before the final two blocks
    previous = b"\x00" * AES_BLOCK_SIZE
    plaintext = b""
    for block in blocks[:-2]:
        plaintext += _xor(decryptor.update(block), previous)
        previous = block

    # The tail of the penultimate block's decryption holds the bytes
    # stolen from the final block.
    penultimate = decryptor.update(blocks[-2])
    last_plain = _xor(penultimate[:last_len], blocks[-1])
    stolen = penultimate[last_len:]
    plaintext += _xor(decryptor.update(blocks[-1] + stolen), previous)
    return plaintext + last_plain


# =============================================================================
# KEY DERIVATION (RFC 3961 simplified profile)
# =============================================================================


def nfold(data: bytes, nbytes: int) -> bytes:
    """
    Stretch or fold data to nbytes using the RFC 3961 n-fold operation.

    Copies of data, each rotated right 13 bits further than the last, are
    concatenated up to lcm(len(data), nbytes) and summed in nbytes-sized
    slices with ones' complement addition.
    """
    in_bits = len(data) * 8
    in_mask = (1 << in_bits) - 1
    value = int.from_bytes(data, "big")

    def rotate_right(shift: int) -> bytes:
        shift %= in_bits
        rotated = ((value >> shift) | (value << (in_bits - shift))) & in_mask
        return rotated.to_bytes(len(data), "big")

    lcm = nbytes * len(data) // gcd(nbytes, len(data))
    stretched = b"".join(rotate_right(13 * i) for i in range(lcm // len(data)))

    out_bits = nbytes * 8
    out_mask = (1 << out_bits) - 1
    total = 0
    for pos in range(0, lcm, nbytes):
        total += int.from_bytes(stretched[pos:pos + nbytes], "big")
        while total > out_mask:
            total = (total & out_mask) + (total >> out_bits)
    return total.to_bytes(nbytes, "big")


def derive_aes_key(key: bytes, constant: bytes) -> bytes:
    """
    DK(key, constant) for the AES enctypes.

    random-to-key is the identity for AES, so the derived key is the
    first len(key) bytes of DR(key, constant).
    """
    block = nfold(constant, AES_BLOCK_SIZE)
    output = b""
    while len(output) < len(key):
        block = encrypt_aes_cts(key, block)
        output += block
    return output[:len(key)]


def _usage_constant(usage: int, suffix: int) -> bytes:
    return struct.pack(">IB", usage, suffix)


def _rc4_usage(usage: int) -> bytes:
    # RFC 4757 usage mapping; per the errata 9 is not mapped to 8.
    mapped = {3: 8, 23: 13}.get(usage, usage)
    return struct.pack("<I", mapped)


def _check_key(key: bytes, expected: int, name: str) -> None:
    if len(key) != expected:
        raise CryptoError(
            f"Key must be {expected} bytes for {name}, got {len(key)}"
        )


# =============================================================================
# ENCRYPTION PROFILES
# =============================================================================


class EncryptionProfile(ABC):
    """One Kerberos encryption type."""

    enctype: int
    key_size: int
    confounder_size: int

    @abstractmethod
    def encrypt(self, key: bytes, usage: int, plaintext: bytes, confounder: bytes) -> bytes:
        """Encrypt plaintext with an explicit confounder."""

    @abstractmethod
    def decrypt(self, key: bytes, usage: int, ciphertext: bytes) -> bytes:
        """Decrypt and verify integrity, returning the plaintext."""


@attrs.define(frozen=True)
class RC4HMACProfile(EncryptionProfile):
    """RC4-HMAC per RFC 4757."""

    enctype: int = int(EncryptionType.RC4_HMAC)
    key_size: int = 16
    confounder_size: int = 8

    def encrypt(self, key: bytes, usage: int, plaintext: bytes, confounder: bytes) -> bytes:
        _check_key(key, self.key_size, "RC4_HMAC")
        k1 = hmac_md5(key, _rc4_usage(usage))
        basic_plaintext = confounder + plaintext
        cksum = hmac_md5(k1, basic_plaintext)
        k3 = hmac_md5(k1, cksum)
        return cksum + encrypt_rc4(k3, basic_plaintext)

    def decrypt(self, key: bytes, usage: int, ciphertext: bytes) -> bytes:
        _check_key(key, self.key_size, "RC4_HMAC")
        if len(ciphertext) < 16 + self.confounder_size:
            raise CryptoError("RC4-HMAC ciphertext too short")
        cksum, body = ciphertext[:16], ciphertext[16:]
        k1 = hmac_md5(key, _rc4_usage(usage))
        k3 = hmac_md5(k1, cksum)
        basic_plaintext = decrypt_rc4(k3, body)
        if not constant_time_compare(hmac_md5(k1, basic_plaintext), cksum):
            raise IntegrityError()
        return basic_plaintext[self.confounder_size:]


@attrs.define(frozen=True)
class AESCTSProfile(EncryptionProfile):
    """AES-CTS-HMAC-SHA1-96 per RFC 3962."""

    enctype: int
    key_size: int
    confounder_size: int = AES_BLOCK_SIZE
    mac_size: int = 12

    def encrypt(self, key: bytes, usage: int, plaintext: bytes, confounder: bytes) -> bytes:
        _check_key(key, self.key_size, f"etype {self.enctype}")
        ki = derive_aes_key(key, _usage_constant(usage, 0x55))
        ke = derive_aes_key(key, _usage_constant(usage, 0xAA))
        basic_plaintext = confounder + plaintext
        mac = hmac_sha1(ki, basic_plaintext)[:self.mac_size]
        return encrypt_aes_cts(ke, basic_plaintext) + mac

    def decrypt(self, key: bytes, usage: int, ciphertext: bytes) -> bytes:
        _check_key(key, self.key_size, f"etype {self.enctype}")
        if len(ciphertext) < self.confounder_size + self.mac_size:
            raise CryptoError("AES-CTS ciphertext too short")
        ki = derive_aes_key(key, _usage_constant(usage, 0x55))
        ke = derive_aes_key(key, _usage_constant(usage, 0xAA))
        body, mac = ciphertext[:-self.mac_size], ciphertext[-self.mac_size:]
        basic_plaintext = decrypt_aes_cts(ke, body)
        expected = hmac_sha1(ki, basic_plaintext)[:self.mac_size]
        if not constant_time_compare(expected, mac):
            raise IntegrityError()
        return basic_plaintext[self.confounder_size:]


# =============================================================================
# CHECKSUM PROFILES
# =============================================================================


class ChecksumProfile(ABC):
    """One Kerberos checksum type."""

    cksumtype: int
    keyed: bool

    @abstractmethod
    def compute(self, data: bytes, key: Optional[bytes], usage: int) -> bytes:
        """Compute the checksum of data."""


@attrs.define(frozen=True)
class RSAMD5Checksum(ChecksumProfile):
    """Unkeyed RSA-MD5 (RFC 3961 section 6.1.3)."""

    cksumtype: int = int(ChecksumType.RSA_MD5)
    keyed: bool = False

    def compute(self, data: bytes, key: Optional[bytes], usage: int) -> bytes:
        return md5_hash(data)


@attrs.define(frozen=True)
class HMACMD5Checksum(ChecksumProfile):
    """KERB_CHECKSUM_HMAC_MD5 per RFC 4757 section 4."""

    cksumtype: int = int(ChecksumType.HMAC_MD5)
    keyed: bool = True

    def compute(self, data: bytes, key: Optional[bytes], usage: int) -> bytes:
        ksign = hmac_md5(key, b"signaturekey\x00")
        return hmac_md5(ksign, md5_hash(_rc4_usage(usage) + data))


@attrs.define(frozen=True)
class HMACSHA1AESChecksum(ChecksumProfile):
    """HMAC-SHA1-96 keyed with an AES-derived Kc (RFC 3962)."""

    cksumtype: int
    key_size: int
    keyed: bool = True

    def compute(self, data: bytes, key: Optional[bytes], usage: int) -> bytes:
        _check_key(key, self.key_size, f"checksum type {self.cksumtype}")
        kc = derive_aes_key(key, _usage_constant(usage, 0x99))
        return hmac_sha1(kc, data)[:12]


# =============================================================================
# REGISTRY
# =============================================================================


_ENCRYPTION_PROFILES: Dict[int, EncryptionProfile] = {}
_CHECKSUM_PROFILES: Dict[int, ChecksumProfile] = {}


def register_enctype(profile: EncryptionProfile) -> None:
    """Register (or replace) the profile for profile.enctype."""
    _ENCRYPTION_PROFILES[int(profile.enctype)] = profile


def register_checksum(profile: ChecksumProfile) -> None:
    """Register (or replace) the profile for profile.cksumtype."""
    _CHECKSUM_PROFILES[int(profile.cksumtype)] = profile


def get_enctype_profile(enctype: int) -> EncryptionProfile:
    """
    Look up a registered encryption profile.

    Raises:
        UnsupportedAlgorithm: If nothing is registered for enctype
    """
    try:
        return _ENCRYPTION_PROFILES[int(enctype)]
    except KeyError:
        raise UnsupportedAlgorithm("encryption type", int(enctype)) from None


def get_checksum_profile(cksumtype: int) -> ChecksumProfile:
    """
    Look up a registered checksum profile.

    Raises:
        UnsupportedAlgorithm: If nothing is registered for cksumtype
    """
    try:
        return _CHECKSUM_PROFILES[int(cksumtype)]
    except KeyError:
        raise UnsupportedAlgorithm("checksum type", int(cksumtype)) from None


register_enctype(RC4HMACProfile())
register_enctype(AESCTSProfile(enctype=int(EncryptionType.AES128_CTS_HMAC_SHA1_96), key_size=16))
register_enctype(AESCTSProfile(enctype=int(EncryptionType.AES256_CTS_HMAC_SHA1_96), key_size=32))
register_checksum(RSAMD5Checksum())
register_checksum(HMACMD5Checksum())
register_checksum(HMACSHA1AESChecksum(cksumtype=int(ChecksumType.HMAC_SHA1_96_AES128), key_size=16))
register_checksum(HMACSHA1AESChecksum(cksumtype=int(ChecksumType.HMAC_SHA1_96_AES256), key_size=32))


# =============================================================================
# CRYPTO COLLABORATOR
# =============================================================================


@attrs.define
class KerberosCrypto:
    """
    Crypto collaborator handed to the request builders.

    Dispatches to registered profiles by integer identifier and draws
    confounders and fresh keys from its RandomSource.

    Example:
        crypto = KerberosCrypto()
        key = crypto.random_key(EncryptionType.RC4_HMAC)
        cipher = crypto.encrypt(EncryptionType.RC4_HMAC, key, 7, b"data")
        assert crypto.decrypt(EncryptionType.RC4_HMAC, key, 7, cipher) == b"data"
    """

    random: RandomSource = attrs.Factory(SystemRandomSource)

    def key_size(self, enctype: int) -> int:
        """Key length in bytes for enctype."""
        return get_enctype_profile(enctype).key_size

    def random_key(self, enctype: int) -> bytes:
        """Fresh random key material for enctype."""
        return self.random.token_bytes(self.key_size(enctype))

    def encrypt(
        self,
        enctype: int,
        key: bytes,
        usage: int,
        plaintext: bytes,
        confounder: Optional[bytes] = None,
    ) -> bytes:
        """
        Encrypt plaintext under key for the given key usage.

        Args:
            enctype: Encryption type identifier
            key: Raw key bytes (length checked by the profile)
            usage: RFC 4120 key usage number
            plaintext: Data to encrypt
            confounder: Fixed confounder (random if not provided)

        Returns:
            Ciphertext including the integrity tag

        Raises:
            UnsupportedAlgorithm: Unregistered enctype
            CryptoError: Wrong key length or malformed input
        """
        profile = get_enctype_profile(enctype)
        if confounder is None:
            confounder = self.random.token_bytes(profile.confounder_size)
        elif len(confounder) != profile.confounder_size:
            raise CryptoError(
                f"Confounder must be {profile.confounder_size} bytes, got {len(confounder)}"
            )
        return profile.encrypt(key, usage, plaintext, confounder)

    def decrypt(self, enctype: int, key: bytes, usage: int, ciphertext: bytes) -> bytes:
        """
        Decrypt ciphertext and verify its integrity tag.

        Raises:
            IntegrityError: Tag mismatch (wrong key, wrong usage or tampering)
        """
        return get_enctype_profile(enctype).decrypt(key, usage, ciphertext)

    def checksum(
        self,
        cksumtype: int,
        data: bytes,
        key: Optional[bytes] = None,
        usage: int = KeyUsage.TGS_REQ_AUTHENTICATOR_CKSUM,
    ) -> bytes:
        """
        Compute a checksum over data.

        Raises:
            UnsupportedAlgorithm: Unregistered checksum type
            CryptoError: Keyed checksum requested without a key
        """
        profile = get_checksum_profile(cksumtype)
        if profile.keyed and key is None:
            raise CryptoError(f"Checksum type {int(cksumtype)} requires a key")
        return profile.compute(data, key, int(usage))

    def verify_checksum(
        self,
        cksumtype: int,
        data: bytes,
        expected: bytes,
        key: Optional[bytes] = None,
        usage: int = KeyUsage.TGS_REQ_AUTHENTICATOR_CKSUM,
    ) -> bool:
        """Recompute a checksum and compare in constant time."""
        return constant_time_compare(self.checksum(cksumtype, data, key, usage), expected)
