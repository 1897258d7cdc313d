"""AES-GCM authenticated encryption, plus AES-CBC for interoperability."""

import os
from typing import Optional, Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .encoding import encode_data
from .types import (
    AES_CBC_IV_SIZE,
    KEY_SIZE,
    NONCE_SIZE,
    TAG_SIZE,
    AesCbcResult,
    AuthenticationError,
    DecryptionError,
    Encoding,
    InvalidKeyError,
    MalformedCiphertextError,
)

_AES_KEY_SIZES = (16, 24, 32)


def _check_key(key: bytes) -> None:
    if len(key) not in _AES_KEY_SIZES:
        raise InvalidKeyError(f"AES key must be 16, 24 or 32 bytes, got {len(key)}")


def _check_nonce(nonce: bytes) -> None:
    if len(nonce) != NONCE_SIZE:
        raise InvalidKeyError(f"Nonce must be {NONCE_SIZE} bytes, got {len(nonce)}")


def aead_encrypt(key: bytes, nonce: bytes, plaintext: bytes) -> bytes:
    """
    Encrypt with AES-GCM and no associated data.

    The nonce must be fresh for every call under the same key.

    Returns:
        Ciphertext body followed by the 16-byte tag
    """
    _check_key(key)
    _check_nonce(nonce)
    return AESGCM(key).encrypt(nonce, plaintext, None)


def aead_decrypt(key: bytes, nonce: bytes, ciphertext_with_tag: bytes) -> bytes:
    """
    Decrypt and authenticate AES-GCM output.

    Raises:
        AuthenticationError: If the tag does not verify
    """
    _check_key(key)
    _check_nonce(nonce)
    if len(ciphertext_with_tag) < TAG_SIZE:
        raise AuthenticationError("Ciphertext is shorter than the authentication tag")

    try:
        return AESGCM(key).decrypt(nonce, ciphertext_with_tag, None)
    except InvalidTag as e:
        raise AuthenticationError("Authentication tag mismatch") from e


def generate_aes_key() -> bytes:
    """Generate a random AES-256 key."""
    return os.urandom(KEY_SIZE)


def aes_encrypt(
    key: bytes,
    message: bytes,
    encoding: Union[Encoding, str] = Encoding.BYTES,
) -> Union[str, bytes]:
    """
    Encrypt with AES-GCM under a fresh random nonce.

    Returns:
        nonce || ciphertext || tag, as bytes or base64 text
    """
    nonce = os.urandom(NONCE_SIZE)
    sealed = aead_encrypt(key, nonce, message)
    return encode_data(nonce + sealed, encoding)


def aes_decrypt(key: bytes, data: bytes) -> bytes:
    """
    Decrypt nonce-prefixed AES-GCM output from `aes_encrypt`.

    Raises:
        MalformedCiphertextError: If the data cannot hold a nonce and a tag
        AuthenticationError: If the tag does not verify
    """
    if len(data) < NONCE_SIZE + TAG_SIZE:
        raise MalformedCiphertextError(
            f"Data too short: {len(data)} bytes (minimum {NONCE_SIZE + TAG_SIZE})"
        )
    return aead_decrypt(key, data[:NONCE_SIZE], data[NONCE_SIZE:])


def encrypt_aes_cbc(
    key: bytes,
    message: bytes,
    iv: Optional[bytes] = None,
    encoding: Union[Encoding, str] = Encoding.BYTES,
) -> AesCbcResult:
    """
    Encrypt with AES-CBC and PKCS#7 padding.

    CBC carries no authentication; prefer `aes_encrypt` unless a peer
    requires CBC.

    Args:
        key: 16, 24 or 32-byte key
        message: Plaintext
        iv: 16-byte IV; a random one is generated when omitted
        encoding: "bytes" (default) or "base64"
    """
    _check_key(key)
    if iv is None:
        iv = os.urandom(AES_CBC_IV_SIZE)
    elif len(iv) != AES_CBC_IV_SIZE:
        raise InvalidKeyError(f"IV must be {AES_CBC_IV_SIZE} bytes, got {len(iv)}")

    padder = padding.PKCS7(algorithms.AES.block_size).padder()
    padded = padder.update(message) + padder.finalize()

    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    ciphertext = encryptor.update(padded) + encryptor.finalize()

    return AesCbcResult(
        iv=encode_data(iv, encoding),
        ciphertext=encode_data(ciphertext, encoding),
    )


def decrypt_aes_cbc(key: bytes, iv: bytes, ciphertext: bytes) -> bytes:
    """
    Decrypt AES-CBC output and strip PKCS#7 padding.

    Raises:
        DecryptionError: If the ciphertext length or padding is invalid
    """
    _check_key(key)
    if len(iv) != AES_CBC_IV_SIZE:
        raise InvalidKeyError(f"IV must be {AES_CBC_IV_SIZE} bytes, got {len(iv)}")

    try:
        decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
        padded = decryptor.update(ciphertext) + decryptor.finalize()

        unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
        return unpadder.update(padded) + unpadder.finalize()
    except ValueError as e:
        raise DecryptionError(f"AES-CBC decryption failed: {e}") from e
