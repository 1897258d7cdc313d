"""Base64 conversion and separator framing for hybridbox wire formats."""

import base64
import binascii
import os
from typing import List, Union

from .types import Encoding, MalformedCiphertextError, SEPARATOR


BytesLike = Union[bytes, bytearray, memoryview]

_URL_SAFE_TABLE = str.maketrans("-_", "+/")


def bytes_to_base64(data: BytesLike, url_safe: bool = False) -> str:
    """
    Encode bytes as padded base64 text.

    Args:
        data: Bytes to encode
        url_safe: Use the URL-safe alphabet instead of the standard one

    Returns:
        Base64 text
    """
    if url_safe:
        return base64.urlsafe_b64encode(bytes(data)).decode("ascii")
    return base64.b64encode(bytes(data)).decode("ascii")


def base64_to_bytes(data: str) -> bytes:
    """
    Decode base64 text in either alphabet, with or without padding.

    Raises:
        MalformedCiphertextError: If the text is not valid base64
    """
    normalized = data.strip().translate(_URL_SAFE_TABLE)
    padding = -len(normalized) % 4
    if padding == 3:
        raise MalformedCiphertextError(f"Invalid base64 length: {len(data)}")
    normalized += "=" * padding

    try:
        return base64.b64decode(normalized, validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedCiphertextError(f"Invalid base64 data: {e}") from e


def to_bytes(value: Union[str, BytesLike]) -> bytes:
    """Return raw bytes, decoding base64 text when given a string."""
    if isinstance(value, str):
        return base64_to_bytes(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise TypeError(f"Expected bytes or base64 str, got {type(value).__name__}")


def encode_data(data: bytes, encoding: Union[Encoding, str]) -> Union[str, bytes]:
    """
    Return data in the requested encoding.

    Args:
        data: Raw bytes
        encoding: "bytes" or "base64"

    Returns:
        The bytes unchanged, or their base64 text
    """
    encoding = Encoding(encoding)
    if encoding is Encoding.BYTES:
        return data
    return bytes_to_base64(data)


def join_parts(*parts: str) -> str:
    """Join encoded fields with the protocol separator."""
    return SEPARATOR.join(parts)


def split_parts(data: str, count: int) -> List[str]:
    """
    Split a wire string into exactly `count` non-empty fields.

    Raises:
        MalformedCiphertextError: On a wrong part count or an empty part
    """
    parts = data.split(SEPARATOR)
    if len(parts) != count:
        raise MalformedCiphertextError(
            f"Invalid encrypted message: expected {count} parts, got {len(parts)}"
        )
    if not all(parts):
        raise MalformedCiphertextError("Invalid encrypted message: empty part")
    return parts


def generate_random_bytes(length: int = 32, encoding: Union[Encoding, str] = Encoding.BYTES) -> Union[str, bytes]:
    """
    Generate cryptographically secure random bytes.

    Args:
        length: Number of bytes
        encoding: "bytes" (default) or "base64"
    """
    return encode_data(os.urandom(length), encoding)
