"""Tests for secp256k1 key generation and ECDH."""

import base64

import pytest
from hybridbox.keys import (
    derive_shared_secret,
    generate_ec_key_pair,
    get_public_key,
    private_key_from_bytes,
    public_key_from_bytes,
    public_key_to_bytes,
)
from hybridbox.types import InvalidKeyError
from .test_vectors import (
    ALICE_PRIVATE_KEY_HEX,
    BOB_PRIVATE_KEY_HEX,
    ALICE_PUBLIC_KEY_HEX,
    BOB_PUBLIC_KEY_HEX,
    ALICE_BOB_SHARED_SECRET_HEX,
    CURVE_ORDER_HEX,
)


class TestKeyGeneration:
    """Test secp256k1 key pair generation."""

    def test_base64_key_pair(self) -> None:
        """Default encoding is base64 text with the expected sizes."""
        key_pair = generate_ec_key_pair()

        assert isinstance(key_pair.public_key, str)
        assert isinstance(key_pair.private_key, str)
        assert len(base64.b64decode(key_pair.public_key)) == 33
        assert len(base64.b64decode(key_pair.private_key)) == 32

    def test_bytes_key_pair(self) -> None:
        """Bytes encoding returns a compressed point and a raw scalar."""
        key_pair = generate_ec_key_pair("bytes")

        assert isinstance(key_pair.public_key, bytes)
        assert len(key_pair.public_key) == 33
        assert key_pair.public_key[0] in (0x02, 0x03)
        assert len(key_pair.private_key) == 32

    def test_key_pairs_are_unique(self) -> None:
        """Two generated key pairs never collide."""
        first = generate_ec_key_pair("bytes")
        second = generate_ec_key_pair("bytes")

        assert first.private_key != second.private_key
        assert first.public_key != second.public_key

    def test_get_public_key_matches_generated(self) -> None:
        """Re-deriving the public key reproduces the generated one."""
        key_pair = generate_ec_key_pair()

        assert get_public_key(key_pair.private_key) == key_pair.public_key


class TestKnownKeys:
    """Verify key derivation against known curve points."""

    def test_generator_point(self) -> None:
        """Private key 1 maps to the generator G."""
        public = get_public_key(bytes.fromhex(ALICE_PRIVATE_KEY_HEX), "bytes")
        assert public.hex() == ALICE_PUBLIC_KEY_HEX

    def test_double_generator_point(self) -> None:
        """Private key 2 maps to 2G."""
        public = get_public_key(bytes.fromhex(BOB_PRIVATE_KEY_HEX), "bytes")
        assert public.hex() == BOB_PUBLIC_KEY_HEX

    def test_known_shared_secret(self) -> None:
        """ECDH(1, 2G) is the compressed point 2G."""
        secret = derive_shared_secret(
            bytes.fromhex(ALICE_PRIVATE_KEY_HEX),
            bytes.fromhex(BOB_PUBLIC_KEY_HEX),
        )
        assert secret.hex() == ALICE_BOB_SHARED_SECRET_HEX

    def test_known_shared_secret_reversed(self) -> None:
        """ECDH(2, G) gives the same compressed point."""
        secret = derive_shared_secret(
            bytes.fromhex(BOB_PRIVATE_KEY_HEX),
            bytes.fromhex(ALICE_PUBLIC_KEY_HEX),
        )
        assert secret.hex() == ALICE_BOB_SHARED_SECRET_HEX

    def test_shared_secret_is_compressed_point(self) -> None:
        """The secret carries the 0x02/0x03 parity prefix."""
        alice = generate_ec_key_pair("bytes")
        bob = generate_ec_key_pair("bytes")

        secret = derive_shared_secret(alice.private_key, bob.public_key)

        assert len(secret) == 33
        assert secret[0] in (0x02, 0x03)
        public_key_from_bytes(secret)

    def test_uncompressed_public_key_accepted(self) -> None:
        """Uncompressed points load to the same key."""
        compressed = bytes.fromhex(ALICE_PUBLIC_KEY_HEX)
        public = public_key_from_bytes(compressed)

        from cryptography.hazmat.primitives import serialization
        uncompressed = public.public_bytes(
            serialization.Encoding.X962,
            serialization.PublicFormat.UncompressedPoint,
        )

        assert public_key_to_bytes(public_key_from_bytes(uncompressed)) == compressed


class TestSharedSecret:
    """Test ECDH key agreement."""

    def test_symmetry(self) -> None:
        """Both sides derive the same secret."""
        alice = generate_ec_key_pair()
        bob = generate_ec_key_pair()

        alice_secret = derive_shared_secret(alice.private_key, bob.public_key)
        bob_secret = derive_shared_secret(bob.private_key, alice.public_key)

        assert alice_secret == bob_secret
        assert len(alice_secret) == 33

    def test_different_peers_different_secrets(self) -> None:
        """Different peers yield different secrets."""
        alice = generate_ec_key_pair()
        bob = generate_ec_key_pair()
        carol = generate_ec_key_pair()

        assert derive_shared_secret(alice.private_key, bob.public_key) != derive_shared_secret(
            alice.private_key, carol.public_key
        )

    def test_mixed_key_encodings(self) -> None:
        """Keys may be given as bytes or base64 text."""
        alice = generate_ec_key_pair("bytes")
        bob = generate_ec_key_pair()

        from_bytes = derive_shared_secret(alice.private_key, bob.public_key)
        from_text = derive_shared_secret(
            base64.b64encode(alice.private_key).decode("ascii"), bob.public_key
        )
        assert from_bytes == from_text


class TestInvalidKeys:
    """Test rejection of malformed key material."""

    def test_short_private_key(self) -> None:
        """Reject private keys that are not 32 bytes."""
        with pytest.raises(InvalidKeyError, match="32 bytes"):
            private_key_from_bytes(b"too short")

    def test_zero_private_key(self) -> None:
        """Reject the zero scalar."""
        with pytest.raises(InvalidKeyError):
            private_key_from_bytes(bytes(32))

    def test_private_key_equal_to_order(self) -> None:
        """Reject a scalar equal to the group order."""
        with pytest.raises(InvalidKeyError):
            private_key_from_bytes(bytes.fromhex(CURVE_ORDER_HEX))

    def test_invalid_public_key(self) -> None:
        """Reject bytes that are not a curve point."""
        with pytest.raises(InvalidKeyError):
            public_key_from_bytes(b"\x02" + b"\xff" * 32)

    def test_wrong_length_public_key(self) -> None:
        """Reject a truncated point encoding."""
        with pytest.raises(InvalidKeyError):
            public_key_from_bytes(bytes.fromhex(ALICE_PUBLIC_KEY_HEX)[:20])

    def test_shared_secret_with_invalid_public_key(self) -> None:
        """Key agreement fails with InvalidKeyError for a bad peer key."""
        alice = generate_ec_key_pair()
        with pytest.raises(InvalidKeyError):
            derive_shared_secret(alice.private_key, b"\x05" * 33)
