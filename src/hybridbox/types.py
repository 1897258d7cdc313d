"""Type definitions and protocol constants for hybridbox."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Union

from cryptography.hazmat.primitives.asymmetric import ec


# Curve constants
CURVE = ec.SECP256K1()
EC_PRIVATE_KEY_SIZE = 32
CURVE_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141

# ECIES constants
ECIES_INFO = b"ECIES-AES256-GCM-SHA256"
NONCE_SIZE = 12
TAG_SIZE = 16
KEY_SIZE = 32
HKDF_KEY_LENGTH = 32

# Wire framing. "_" is outside the standard base64 alphabet.
SEPARATOR = "__n__"
ECIES_PART_COUNT = 4
ENVELOPE_PART_COUNT = 2
SECRET_BOX_PART_COUNT = 2

# RSA constants
DEFAULT_RSA_KEY_SIZE = 4096
RSA_PUBLIC_EXPONENT = 65537
RSA_NONCE_SIZE = 12
RSA_HASH_SIZE = 32  # SHA-256

# Password-based key derivation defaults
DEFAULT_PBKDF2_ITERATIONS = 100_000
DEFAULT_ARGON2_TIME_COST = 3
DEFAULT_ARGON2_MEMORY_COST = 65536  # KiB
DEFAULT_ARGON2_PARALLELISM = 1
ARGON2_MIN_SALT_SIZE = 8

# AES-CBC
AES_CBC_IV_SIZE = 16

# Secret box (XSalsa20-Poly1305)
SECRET_BOX_KEY_SIZE = 32
SECRET_BOX_NONCE_SIZE = 24


class Encoding(str, Enum):
    """Output encoding for keys and binary results."""
    BASE64 = "base64"
    BYTES = "bytes"


class CipherTextFormat(str, Enum):
    """Output format for ECIES ciphertexts."""
    BASE64 = "base64"
    RAW = "raw"


@dataclass
class KeyPair:
    """An asymmetric key pair, as raw bytes or base64 text."""
    public_key: Union[str, bytes]
    private_key: Union[str, bytes]


@dataclass(frozen=True)
class EciesCipher:
    """
    Structured ECIES ciphertext.

    Every field holds standard base64 text. The ciphertext field is empty
    for an empty message; the other three are always present.
    """
    ephemeral_public_key: str
    nonce: str
    ciphertext: str
    mac: str

    def to_string(self) -> str:
        """Serialize to the canonical separator-joined wire form."""
        return SEPARATOR.join(
            [self.ephemeral_public_key, self.nonce, self.ciphertext, self.mac]
        )

    @classmethod
    def from_string(cls, data: str) -> "EciesCipher":
        """
        Parse the canonical wire form.

        Raises:
            MalformedCiphertextError: If the string does not hold exactly
                four parts or a required part is empty
        """
        parts = data.split(SEPARATOR)
        if len(parts) != ECIES_PART_COUNT:
            raise MalformedCiphertextError(
                f"Invalid encrypted data format: expected {ECIES_PART_COUNT} parts, got {len(parts)}"
            )

        ephemeral_public_key, nonce, ciphertext, mac = parts
        if not ephemeral_public_key or not nonce or not mac:
            raise MalformedCiphertextError("Missing required parts in encrypted data")

        return cls(
            ephemeral_public_key=ephemeral_public_key,
            nonce=nonce,
            ciphertext=ciphertext,
            mac=mac,
        )

    def to_dict(self) -> Dict[str, str]:
        """Return the record with the camelCase keys used on the wire."""
        return {
            "ephemeralPublicKey": self.ephemeral_public_key,
            "nonce": self.nonce,
            "ciphertext": self.ciphertext,
            "mac": self.mac,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, str]) -> "EciesCipher":
        """Build a record from camelCase wire keys."""
        try:
            cipher = cls(
                ephemeral_public_key=data["ephemeralPublicKey"],
                nonce=data["nonce"],
                ciphertext=data.get("ciphertext", ""),
                mac=data["mac"],
            )
        except KeyError as e:
            raise MalformedCiphertextError(f"Missing field in encrypted data: {e}") from e

        if not cipher.ephemeral_public_key or not cipher.nonce or not cipher.mac:
            raise MalformedCiphertextError("Missing required parts in encrypted data")
        return cipher


@dataclass(frozen=True)
class AesCbcResult:
    """AES-CBC output: the IV and the padded ciphertext."""
    iv: Union[str, bytes]
    ciphertext: Union[str, bytes]


# Exception types
class HybridBoxError(Exception):
    """Base exception for hybridbox errors."""
    pass


class InvalidKeyError(HybridBoxError):
    """Malformed or wrong-length key material."""
    pass


class MalformedCiphertextError(HybridBoxError):
    """Wrong separator count, missing field or undecodable encoding."""
    pass


class AuthenticationError(HybridBoxError):
    """Authentication tag did not verify."""
    pass


class DecryptionError(HybridBoxError):
    """RSA-OAEP or padding validation failed."""
    pass


class UnsupportedSizeError(HybridBoxError):
    """Payload is too large for direct RSA encryption."""
    pass


class KeyDerivationError(HybridBoxError):
    """Key derivation parameters were rejected."""
    pass
