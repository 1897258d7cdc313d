"""
RSA-OAEP key generation and encryption.

RSA with OAEP padding (SHA-256 for both the label hash and MGF1). Only short
payloads fit: at most `modulus_bytes - 2 * 32 - 2` bytes, e.g. 446 bytes for
a 4096-bit key. Larger messages go through `hybridbox.envelope`.

Ciphertext format:
    [0..11]   random nonce (12 bytes)
    [12..]    OAEP ciphertext (modulus size)

OAEP is already randomized; the nonce prefix is kept so the output matches
other implementations of this wire format.
"""

import logging
import os
from typing import Union

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from .encoding import BytesLike, encode_data, to_bytes
from .types import (
    DEFAULT_RSA_KEY_SIZE,
    RSA_HASH_SIZE,
    RSA_NONCE_SIZE,
    RSA_PUBLIC_EXPONENT,
    DecryptionError,
    Encoding,
    InvalidKeyError,
    KeyPair,
    MalformedCiphertextError,
    UnsupportedSizeError,
)

logger = logging.getLogger(__name__)

RsaPublicKeyInput = Union[str, BytesLike, rsa.RSAPublicKey]
RsaPrivateKeyInput = Union[str, BytesLike, rsa.RSAPrivateKey]


def _oaep() -> padding.OAEP:
    return padding.OAEP(
        mgf=padding.MGF1(algorithm=hashes.SHA256()),
        algorithm=hashes.SHA256(),
        label=None,
    )


def load_rsa_public_key(data: RsaPublicKeyInput) -> rsa.RSAPublicKey:
    """
    Load an RSA public key from DER SubjectPublicKeyInfo bytes.

    Raises:
        InvalidKeyError: If the bytes are not an RSA public key
    """
    if isinstance(data, rsa.RSAPublicKey):
        return data

    try:
        key = serialization.load_der_public_key(to_bytes(data))
    except (ValueError, TypeError, UnsupportedAlgorithm, MalformedCiphertextError) as e:
        raise InvalidKeyError(f"Invalid RSA public key: {e}") from e

    if not isinstance(key, rsa.RSAPublicKey):
        raise InvalidKeyError(f"Expected an RSA public key, got {type(key).__name__}")
    return key


def load_rsa_private_key(data: RsaPrivateKeyInput) -> rsa.RSAPrivateKey:
    """
    Load an RSA private key from DER PKCS#8 bytes.

    Raises:
        InvalidKeyError: If the bytes are not an RSA private key
    """
    if isinstance(data, rsa.RSAPrivateKey):
        return data

    try:
        key = serialization.load_der_private_key(to_bytes(data), password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm, MalformedCiphertextError) as e:
        raise InvalidKeyError(f"Invalid RSA private key: {e}") from e

    if not isinstance(key, rsa.RSAPrivateKey):
        raise InvalidKeyError(f"Expected an RSA private key, got {type(key).__name__}")
    return key


def generate_rsa_key_pair(
    key_size: int = DEFAULT_RSA_KEY_SIZE,
    encoding: Union[Encoding, str] = Encoding.BASE64,
) -> KeyPair:
    """
    Generate an RSA key pair with public exponent 65537.

    Args:
        key_size: Modulus size in bits (default 4096)
        encoding: "base64" (default) or "bytes"

    Returns:
        KeyPair with a DER SPKI public key and a DER PKCS#8 private key
    """
    private_key = rsa.generate_private_key(
        public_exponent=RSA_PUBLIC_EXPONENT,
        key_size=key_size,
    )
    logger.debug("Generated RSA-%d key pair", key_size)

    public_der = private_key.public_key().public_bytes(
        serialization.Encoding.DER,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    private_der = private_key.private_bytes(
        serialization.Encoding.DER,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    )

    return KeyPair(
        public_key=encode_data(public_der, encoding),
        private_key=encode_data(private_der, encoding),
    )


def rsa_max_message_size(public_key: RsaPublicKeyInput) -> int:
    """Largest message `rsa_encrypt` accepts for this key."""
    key = load_rsa_public_key(public_key)
    modulus_bytes = (key.key_size + 7) // 8
    return modulus_bytes - 2 * RSA_HASH_SIZE - 2


def rsa_encrypt(
    public_key: RsaPublicKeyInput,
    message: bytes,
    encoding: Union[Encoding, str] = Encoding.BASE64,
) -> Union[str, bytes]:
    """
    Encrypt a short message with RSA-OAEP.

    Returns:
        nonce || OAEP ciphertext, as base64 text (default) or bytes

    Raises:
        InvalidKeyError: If the public key is malformed
        UnsupportedSizeError: If the message exceeds the OAEP capacity
    """
    key = load_rsa_public_key(public_key)
    max_size = rsa_max_message_size(key)
    if len(message) > max_size:
        raise UnsupportedSizeError(
            f"Message too large: {len(message)} bytes (max {max_size} for RSA-{key.key_size})"
        )

    nonce = os.urandom(RSA_NONCE_SIZE)
    ciphertext = key.encrypt(message, _oaep())
    return encode_data(nonce + ciphertext, encoding)


def rsa_decrypt(private_key: RsaPrivateKeyInput, ciphertext: Union[str, BytesLike]) -> bytes:
    """
    Decrypt output of `rsa_encrypt`.

    Args:
        private_key: DER PKCS#8 bytes, base64 text, or a loaded key
        ciphertext: nonce || OAEP ciphertext, as bytes or base64 text

    Raises:
        InvalidKeyError: If the private key is malformed
        DecryptionError: If OAEP validation fails or the key does not match
    """
    key = load_rsa_private_key(private_key)
    data = to_bytes(ciphertext)

    if len(data) <= RSA_NONCE_SIZE:
        raise DecryptionError(f"Ciphertext too short: {len(data)} bytes")

    try:
        return key.decrypt(data[RSA_NONCE_SIZE:], _oaep())
    except ValueError as e:
        raise DecryptionError("RSA-OAEP decryption failed") from e
