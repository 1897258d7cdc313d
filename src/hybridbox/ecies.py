"""ECIES encryption and decryption (secp256k1 + HKDF-SHA256 + AES-256-GCM)."""

import logging
import os
from typing import Dict, Optional, Union

from cryptography.hazmat.primitives.asymmetric import ec

from .aead import aead_decrypt, aead_encrypt
from .encoding import base64_to_bytes, bytes_to_base64
from .kdf import derive_hkdf_key
from .keys import (
    PrivateKeyInput,
    PublicKeyInput,
    derive_shared_secret,
    public_key_from_bytes,
    public_key_to_bytes,
)
from .types import (
    CURVE,
    ECIES_INFO,
    HKDF_KEY_LENGTH,
    NONCE_SIZE,
    TAG_SIZE,
    AuthenticationError,
    CipherTextFormat,
    EciesCipher,
    InvalidKeyError,
    MalformedCiphertextError,
)

logger = logging.getLogger(__name__)

EciesInput = Union[str, EciesCipher, Dict[str, str]]


def _derive_message_key(shared_secret: bytes, ephemeral_public_key: bytes) -> bytes:
    # Salting with the ephemeral key binds the key to this message.
    return derive_hkdf_key(
        shared_secret,
        salt=ephemeral_public_key,
        info=ECIES_INFO,
        length=HKDF_KEY_LENGTH,
    )


def ecies_encrypt(
    recipient_public_key: PublicKeyInput,
    message: bytes,
    format: Union[CipherTextFormat, str] = CipherTextFormat.BASE64,
) -> Union[str, EciesCipher]:
    """
    Encrypt a message for the holder of a secp256k1 private key.

    Args:
        recipient_public_key: Recipient's public key (bytes, base64 or key object)
        message: Plaintext bytes, may be empty
        format: "base64" (default) for the separator-joined string,
            "raw" for an EciesCipher record

    Returns:
        The wire string, or an EciesCipher when format is "raw"

    Raises:
        InvalidKeyError: If the recipient key is malformed
    """
    format = CipherTextFormat(format)
    recipient = public_key_from_bytes(recipient_public_key)

    # Generate ephemeral key pair for this message
    ephemeral_private = ec.generate_private_key(CURVE)
    ephemeral_pub_bytes = public_key_to_bytes(ephemeral_private.public_key())

    shared_secret = derive_shared_secret(ephemeral_private, recipient)
    symmetric_key = _derive_message_key(shared_secret, ephemeral_pub_bytes)

    nonce = os.urandom(NONCE_SIZE)
    sealed = aead_encrypt(symmetric_key, nonce, message)

    cipher = EciesCipher(
        ephemeral_public_key=bytes_to_base64(ephemeral_pub_bytes),
        nonce=bytes_to_base64(nonce),
        ciphertext=bytes_to_base64(sealed[:-TAG_SIZE]),
        mac=bytes_to_base64(sealed[-TAG_SIZE:]),
    )

    if format is CipherTextFormat.RAW:
        return cipher
    return cipher.to_string()


def parse_ecies_cipher_string(data: str) -> EciesCipher:
    """
    Parse a separator-joined ECIES string into its four fields.

    Raises:
        MalformedCiphertextError: If the string is not exactly four parts
            or a required part is empty
    """
    return EciesCipher.from_string(data)


def _to_cipher(data: EciesInput) -> EciesCipher:
    if isinstance(data, EciesCipher):
        return data
    if isinstance(data, str):
        return parse_ecies_cipher_string(data)
    if isinstance(data, dict):
        return EciesCipher.from_dict(data)
    raise TypeError(f"Unsupported ECIES input type: {type(data).__name__}")


def ecies_decrypt(recipient_private_key: PrivateKeyInput, data: EciesInput) -> bytes:
    """
    Decrypt an ECIES ciphertext.

    Args:
        recipient_private_key: Our private key (bytes, base64 or key object)
        data: Wire string, EciesCipher, or dict with camelCase wire keys

    Returns:
        The plaintext

    Raises:
        MalformedCiphertextError: If the input is not well formed
        InvalidKeyError: If a key is malformed
        AuthenticationError: If the ciphertext fails authentication
    """
    cipher = _to_cipher(data)

    ephemeral_pub_bytes = base64_to_bytes(cipher.ephemeral_public_key)
    nonce = base64_to_bytes(cipher.nonce)
    ciphertext = base64_to_bytes(cipher.ciphertext)
    mac = base64_to_bytes(cipher.mac)

    if len(nonce) != NONCE_SIZE:
        raise MalformedCiphertextError(f"Nonce must be {NONCE_SIZE} bytes, got {len(nonce)}")

    shared_secret = derive_shared_secret(recipient_private_key, ephemeral_pub_bytes)
    symmetric_key = _derive_message_key(shared_secret, ephemeral_pub_bytes)

    return aead_decrypt(symmetric_key, nonce, ciphertext + mac)


def ecies_try_decrypt(
    recipient_private_key: PrivateKeyInput,
    data: EciesInput,
) -> Optional[bytes]:
    """
    Decrypt an ECIES ciphertext, returning None instead of raising.

    For callers that treat an undecryptable message as "not for us" rather
    than as an error.
    """
    try:
        return ecies_decrypt(recipient_private_key, data)
    except (AuthenticationError, MalformedCiphertextError, InvalidKeyError) as e:
        logger.debug("ECIES decryption failed: %s", e)
        return None
