"""NaCl secret-box (XSalsa20-Poly1305) symmetric encryption."""

import os

from nacl.exceptions import CryptoError
from nacl.secret import SecretBox

from .encoding import base64_to_bytes, bytes_to_base64, join_parts, split_parts
from .types import (
    SECRET_BOX_PART_COUNT,
    SECRET_BOX_KEY_SIZE,
    SECRET_BOX_NONCE_SIZE,
    AuthenticationError,
    InvalidKeyError,
    MalformedCiphertextError,
)


def _check_key(key: bytes) -> None:
    if len(key) != SECRET_BOX_KEY_SIZE:
        raise InvalidKeyError(
            f"Secret box key must be {SECRET_BOX_KEY_SIZE} bytes, got {len(key)}"
        )


def generate_secret_box_key() -> bytes:
    """Generate a random 32-byte secret box key."""
    return os.urandom(SECRET_BOX_KEY_SIZE)


def secret_box_encrypt(key: bytes, message: bytes) -> str:
    """
    Encrypt a message with a shared secret key.

    Both fields use the standard base64 alphabet, since the URL-safe one
    contains the "_" of the separator.

    Returns:
        base64(nonce) __n__ base64(ciphertext with Poly1305 tag)
    """
    _check_key(key)

    nonce = os.urandom(SECRET_BOX_NONCE_SIZE)
    encrypted = SecretBox(key).encrypt(message, nonce)

    return join_parts(
        bytes_to_base64(nonce),
        bytes_to_base64(encrypted.ciphertext),
    )


def secret_box_decrypt(key: bytes, encrypted: str) -> bytes:
    """
    Decrypt output of `secret_box_encrypt`.

    Raises:
        MalformedCiphertextError: If the string is not two non-empty parts
            or the nonce has the wrong length
        InvalidKeyError: If the key is not 32 bytes
        AuthenticationError: If the ciphertext was forged or the key is wrong
    """
    nonce_text, ciphertext_text = split_parts(encrypted, SECRET_BOX_PART_COUNT)
    _check_key(key)

    nonce = base64_to_bytes(nonce_text)
    if len(nonce) != SECRET_BOX_NONCE_SIZE:
        raise MalformedCiphertextError(
            f"Nonce must be {SECRET_BOX_NONCE_SIZE} bytes, got {len(nonce)}"
        )

    try:
        return SecretBox(key).decrypt(base64_to_bytes(ciphertext_text), nonce)
    except CryptoError as e:
        raise AuthenticationError("Could not decrypt message") from e
