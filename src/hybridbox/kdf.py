"""Hash-based and password-based key derivation."""

from typing import Union

from argon2.exceptions import HashingError
from argon2.low_level import Type as Argon2Type
from argon2.low_level import ARGON2_VERSION, hash_secret_raw
from cryptography.hazmat.primitives.hashes import SHA256
from cryptography.hazmat.primitives.kdf.hkdf import HKDF
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from .encoding import encode_data
from .types import (
    ARGON2_MIN_SALT_SIZE,
    DEFAULT_ARGON2_MEMORY_COST,
    DEFAULT_ARGON2_PARALLELISM,
    DEFAULT_ARGON2_TIME_COST,
    DEFAULT_PBKDF2_ITERATIONS,
    HKDF_KEY_LENGTH,
    Encoding,
    KeyDerivationError,
)


def _secret_bytes(value: Union[str, bytes]) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


def derive_hkdf_key(
    key_material: bytes,
    salt: bytes,
    info: bytes,
    length: int = HKDF_KEY_LENGTH,
    encoding: Union[Encoding, str] = Encoding.BYTES,
) -> Union[str, bytes]:
    """
    Derive a key with HKDF-SHA256 (extract-then-expand).

    Args:
        key_material: Input keying material, e.g. an ECDH shared secret
        salt: HKDF salt (may be empty)
        info: Context label (may be empty)
        length: Output length in bytes
        encoding: "bytes" (default) or "base64"

    Returns:
        Derived key

    Raises:
        KeyDerivationError: If the length is out of range for SHA-256
    """
    if length < 1:
        raise KeyDerivationError(f"Length must be positive, got {length}")

    try:
        hkdf = HKDF(algorithm=SHA256(), length=length, salt=salt, info=info)
        key = hkdf.derive(_secret_bytes(key_material))
    except ValueError as e:
        raise KeyDerivationError(f"HKDF derivation failed: {e}") from e

    return encode_data(key, encoding)


def derive_pbkdf2_key(
    ikm: Union[str, bytes],
    salt: Union[str, bytes],
    iterations: int = DEFAULT_PBKDF2_ITERATIONS,
    length: int = HKDF_KEY_LENGTH,
    encoding: Union[Encoding, str] = Encoding.BYTES,
) -> Union[str, bytes]:
    """
    Derive a key from a password with PBKDF2-HMAC-SHA256.

    String inputs are UTF-8 encoded. The default of 100 000 iterations is
    far above the 32 some other implementations of this API default to, so
    keys only match theirs when `iterations` is passed explicitly.

    Raises:
        KeyDerivationError: If iterations or length are not positive
    """
    if iterations < 1:
        raise KeyDerivationError(f"Iterations must be positive, got {iterations}")
    if length < 1:
        raise KeyDerivationError(f"Length must be positive, got {length}")

    kdf = PBKDF2HMAC(
        algorithm=SHA256(),
        length=length,
        salt=_secret_bytes(salt),
        iterations=iterations,
    )
    try:
        key = kdf.derive(_secret_bytes(ikm))
    except ValueError as e:
        raise KeyDerivationError(f"PBKDF2 derivation failed: {e}") from e

    return encode_data(key, encoding)


def derive_argon2id_key(
    password: Union[str, bytes],
    salt: bytes,
    time_cost: int = DEFAULT_ARGON2_TIME_COST,
    memory_cost: int = DEFAULT_ARGON2_MEMORY_COST,
    parallelism: int = DEFAULT_ARGON2_PARALLELISM,
    length: int = HKDF_KEY_LENGTH,
    encoding: Union[Encoding, str] = Encoding.BYTES,
) -> Union[str, bytes]:
    """
    Derive a key from a password with Argon2id (version 1.3).

    Args:
        password: Password text or bytes
        salt: Salt, at least 8 bytes
        time_cost: Number of passes
        memory_cost: Memory in KiB
        parallelism: Number of lanes
        length: Output length in bytes
        encoding: "bytes" (default) or "base64"

    Raises:
        KeyDerivationError: If Argon2 rejects the parameters
    """
    salt = _secret_bytes(salt)
    if len(salt) < ARGON2_MIN_SALT_SIZE:
        raise KeyDerivationError(
            f"Salt must be at least {ARGON2_MIN_SALT_SIZE} bytes, got {len(salt)}"
        )
    if length < 4:
        raise KeyDerivationError(f"Length must be at least 4 bytes, got {length}")

    try:
        key = hash_secret_raw(
            secret=_secret_bytes(password),
            salt=salt,
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
            hash_len=length,
            type=Argon2Type.ID,
            version=ARGON2_VERSION,
        )
    except HashingError as e:
        raise KeyDerivationError(f"Argon2id derivation failed: {e}") from e

    return encode_data(key, encoding)
