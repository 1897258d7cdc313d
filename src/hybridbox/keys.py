"""secp256k1 key generation and ECDH key agreement."""

import logging
from typing import Union

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from ecdsa import SECP256k1, VerifyingKey

from .encoding import BytesLike, encode_data, to_bytes
from .types import (
    CURVE,
    CURVE_ORDER,
    EC_PRIVATE_KEY_SIZE,
    Encoding,
    InvalidKeyError,
    KeyPair,
)

logger = logging.getLogger(__name__)

PrivateKeyInput = Union[str, BytesLike, ec.EllipticCurvePrivateKey]
PublicKeyInput = Union[str, BytesLike, ec.EllipticCurvePublicKey]


def private_key_from_bytes(data: PrivateKeyInput) -> ec.EllipticCurvePrivateKey:
    """
    Load a private key from a 32-byte big-endian scalar.

    Args:
        data: Raw scalar bytes, base64 text, or an already loaded key

    Raises:
        InvalidKeyError: If the scalar is not valid for the curve
    """
    if isinstance(data, ec.EllipticCurvePrivateKey):
        return data

    raw = to_bytes(data)
    if len(raw) != EC_PRIVATE_KEY_SIZE:
        raise InvalidKeyError(
            f"Private key must be {EC_PRIVATE_KEY_SIZE} bytes, got {len(raw)}"
        )

    scalar = int.from_bytes(raw, "big")
    if not 0 < scalar < CURVE_ORDER:
        raise InvalidKeyError("Private key scalar is out of range for secp256k1")

    try:
        return ec.derive_private_key(scalar, CURVE)
    except ValueError as e:
        raise InvalidKeyError(f"Invalid private key: {e}") from e


def public_key_from_bytes(data: PublicKeyInput) -> ec.EllipticCurvePublicKey:
    """
    Load a public key from a SEC1 point encoding (compressed or not).

    Raises:
        InvalidKeyError: If the bytes are not a point on the curve
    """
    if isinstance(data, ec.EllipticCurvePublicKey):
        return data

    raw = to_bytes(data)
    try:
        return ec.EllipticCurvePublicKey.from_encoded_point(CURVE, raw)
    except ValueError as e:
        raise InvalidKeyError(f"Invalid public key: {e}") from e


def private_key_to_bytes(private_key: ec.EllipticCurvePrivateKey) -> bytes:
    """Convert a private key to its 32-byte scalar."""
    return private_key.private_numbers().private_value.to_bytes(EC_PRIVATE_KEY_SIZE, "big")


def public_key_to_bytes(public_key: ec.EllipticCurvePublicKey) -> bytes:
    """Convert a public key to its 33-byte compressed point."""
    return public_key.public_bytes(
        serialization.Encoding.X962,
        serialization.PublicFormat.CompressedPoint,
    )


def generate_ec_key_pair(encoding: Union[Encoding, str] = Encoding.BASE64) -> KeyPair:
    """
    Generate a random secp256k1 key pair.

    Args:
        encoding: "base64" (default) or "bytes"

    Returns:
        KeyPair with a compressed public key and a raw private scalar
    """
    private_key = ec.generate_private_key(CURVE)
    logger.debug("Generated secp256k1 key pair")

    return KeyPair(
        public_key=encode_data(public_key_to_bytes(private_key.public_key()), encoding),
        private_key=encode_data(private_key_to_bytes(private_key), encoding),
    )


def derive_shared_secret(private_key: PrivateKeyInput, public_key: PublicKeyInput) -> bytes:
    """
    Perform ECDH key agreement.

    derive_shared_secret(a_priv, b_pub) == derive_shared_secret(b_priv, a_pub).

    The result is the full shared point in compressed SEC1 form, which is
    what other implementations of this wire format feed into HKDF.

    Args:
        private_key: Our private key
        public_key: Their public key

    Returns:
        33-byte compressed shared point

    Raises:
        InvalidKeyError: If either key is malformed
    """
    private = private_key_from_bytes(private_key)
    public = public_key_from_bytes(public_key)

    peer = VerifyingKey.from_string(public_key_to_bytes(public), curve=SECP256k1)
    shared_point = peer.pubkey.point * private.private_numbers().private_value
    shared = VerifyingKey.from_public_point(shared_point, curve=SECP256k1)
    return shared.to_string("compressed")


def get_public_key(
    private_key: PrivateKeyInput,
    encoding: Union[Encoding, str] = Encoding.BASE64,
) -> Union[str, bytes]:
    """Re-derive the compressed public key for a private key."""
    private = private_key_from_bytes(private_key)
    return encode_data(public_key_to_bytes(private.public_key()), encoding)
