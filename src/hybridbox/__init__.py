"""
hybridbox - Hybrid public-key encryption

Python implementation of ECIES (secp256k1 + HKDF-SHA256 + AES-256-GCM) and
RSA-OAEP envelope encryption with a canonical base64 wire format.
"""

from .keys import (
    generate_ec_key_pair,
    derive_shared_secret,
    get_public_key,
    private_key_from_bytes,
    public_key_from_bytes,
    private_key_to_bytes,
    public_key_to_bytes,
)
from .ecies import ecies_encrypt, ecies_decrypt, ecies_try_decrypt, parse_ecies_cipher_string
from .rsa import (
    generate_rsa_key_pair,
    rsa_encrypt,
    rsa_decrypt,
    rsa_max_message_size,
    load_rsa_public_key,
    load_rsa_private_key,
)
from .envelope import encrypt_envelope, decrypt_envelope
from .aead import (
    aead_encrypt,
    aead_decrypt,
    generate_aes_key,
    aes_encrypt,
    aes_decrypt,
    encrypt_aes_cbc,
    decrypt_aes_cbc,
)
from .kdf import derive_hkdf_key, derive_pbkdf2_key, derive_argon2id_key
from .secretbox import generate_secret_box_key, secret_box_encrypt, secret_box_decrypt
from .encoding import (
    bytes_to_base64,
    base64_to_bytes,
    to_bytes,
    encode_data,
    generate_random_bytes,
)
from .types import (
    KeyPair,
    EciesCipher,
    AesCbcResult,
    Encoding,
    CipherTextFormat,
    SEPARATOR,
    ECIES_INFO,
    NONCE_SIZE,
    TAG_SIZE,
    KEY_SIZE,
    DEFAULT_RSA_KEY_SIZE,
    HybridBoxError,
    InvalidKeyError,
    MalformedCiphertextError,
    AuthenticationError,
    DecryptionError,
    UnsupportedSizeError,
    KeyDerivationError,
)

__version__ = "0.1.0"

__all__ = [
    # Keys
    "generate_ec_key_pair",
    "derive_shared_secret",
    "get_public_key",
    "private_key_from_bytes",
    "public_key_from_bytes",
    "private_key_to_bytes",
    "public_key_to_bytes",
    # ECIES
    "ecies_encrypt",
    "ecies_decrypt",
    "ecies_try_decrypt",
    "parse_ecies_cipher_string",
    # RSA
    "generate_rsa_key_pair",
    "rsa_encrypt",
    "rsa_decrypt",
    "rsa_max_message_size",
    "load_rsa_public_key",
    "load_rsa_private_key",
    # Envelope
    "encrypt_envelope",
    "decrypt_envelope",
    # AEAD
    "aead_encrypt",
    "aead_decrypt",
    "generate_aes_key",
    "aes_encrypt",
    "aes_decrypt",
    "encrypt_aes_cbc",
    "decrypt_aes_cbc",
    # KDF
    "derive_hkdf_key",
    "derive_pbkdf2_key",
    "derive_argon2id_key",
    # Secret box
    "generate_secret_box_key",
    "secret_box_encrypt",
    "secret_box_decrypt",
    # Encoding
    "bytes_to_base64",
    "base64_to_bytes",
    "to_bytes",
    "encode_data",
    "generate_random_bytes",
    # Types
    "KeyPair",
    "EciesCipher",
    "AesCbcResult",
    "Encoding",
    "CipherTextFormat",
    # Constants
    "SEPARATOR",
    "ECIES_INFO",
    "NONCE_SIZE",
    "TAG_SIZE",
    "KEY_SIZE",
    "DEFAULT_RSA_KEY_SIZE",
    # Errors
    "HybridBoxError",
    "InvalidKeyError",
    "MalformedCiphertextError",
    "AuthenticationError",
    "DecryptionError",
    "UnsupportedSizeError",
    "KeyDerivationError",
]
