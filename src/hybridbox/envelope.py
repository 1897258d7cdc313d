"""
RSA envelope encryption: RSA-OAEP wraps a random AES-256-GCM session key.

RSA can only encrypt a few hundred bytes directly. The envelope encrypts the
message under a fresh AES-256 key and wraps only that 32-byte key with RSA,
so message size is bounded by memory alone.

Wire format:
    rsaWrappedKey __n__ aeadMessage

    rsaWrappedKey  base64(nonce(12) || OAEP(aes_key))
    aeadMessage    base64(nonce(12) || ciphertext || tag(16))

The wrapped key always comes first.
"""

import logging

from .aead import aes_decrypt, aes_encrypt, generate_aes_key
from .encoding import base64_to_bytes, join_parts, split_parts
from .rsa import RsaPrivateKeyInput, RsaPublicKeyInput, rsa_decrypt, rsa_encrypt
from .types import (
    ENVELOPE_PART_COUNT,
    KEY_SIZE,
    DecryptionError,
    Encoding,
)

logger = logging.getLogger(__name__)


def encrypt_envelope(recipient_public_key: RsaPublicKeyInput, message: bytes) -> str:
    """
    Encrypt a message of any size for an RSA key holder.

    Args:
        recipient_public_key: Recipient's RSA public key (DER, base64 or key object)
        message: Plaintext bytes

    Returns:
        Envelope string: wrapped key, separator, encrypted message

    Raises:
        InvalidKeyError: If the public key is malformed
    """
    # 1. Fresh AES-256 session key
    aes_key = generate_aes_key()

    # 2. Encrypt the message with AES-256-GCM
    encrypted_message = aes_encrypt(aes_key, message, Encoding.BASE64)

    # 3. Wrap the session key with RSA-OAEP
    encrypted_key = rsa_encrypt(recipient_public_key, aes_key, Encoding.BASE64)

    logger.debug("Sealed envelope for %d-byte message", len(message))
    return join_parts(encrypted_key, encrypted_message)


def decrypt_envelope(recipient_private_key: RsaPrivateKeyInput, envelope: str) -> bytes:
    """
    Decrypt an envelope produced by `encrypt_envelope`.

    Raises:
        MalformedCiphertextError: If the envelope is not two non-empty parts
        DecryptionError: If the session key cannot be unwrapped
        AuthenticationError: If the message fails authentication
    """
    encrypted_key, encrypted_message = split_parts(envelope, ENVELOPE_PART_COUNT)

    # Decode both parts before any RSA work
    wrapped_key = base64_to_bytes(encrypted_key)
    message_data = base64_to_bytes(encrypted_message)

    # 1. Recover the session key
    aes_key = rsa_decrypt(recipient_private_key, wrapped_key)
    if len(aes_key) != KEY_SIZE:
        raise DecryptionError(
            f"Unwrapped session key must be {KEY_SIZE} bytes, got {len(aes_key)}"
        )

    # 2. Decrypt the message
    message = aes_decrypt(aes_key, message_data)
    logger.debug("Opened envelope with %d-byte message", len(message))
    return message
