"""Tests for AES-GCM and AES-CBC."""

import os

import pytest
from hybridbox.aead import (
    aead_decrypt,
    aead_encrypt,
    aes_decrypt,
    aes_encrypt,
    decrypt_aes_cbc,
    encrypt_aes_cbc,
    generate_aes_key,
)
from hybridbox.encoding import base64_to_bytes
from hybridbox.types import (
    AuthenticationError,
    DecryptionError,
    InvalidKeyError,
    MalformedCiphertextError,
)


class TestAeadExplicitNonce:
    """Test AES-GCM with a caller-supplied nonce."""

    @pytest.fixture
    def key(self):
        """A random AES-256 key."""
        return generate_aes_key()

    @pytest.fixture
    def nonce(self):
        """A random 12-byte nonce."""
        return os.urandom(12)

    def test_tag_appended(self, key, nonce) -> None:
        """Output is the body followed by a 16-byte tag."""
        sealed = aead_encrypt(key, nonce, b"hello")
        assert len(sealed) == len(b"hello") + 16

    def test_round_trip(self, key, nonce) -> None:
        """Decryption restores the plaintext."""
        sealed = aead_encrypt(key, nonce, b"authenticated")
        assert aead_decrypt(key, nonce, sealed) == b"authenticated"

    def test_empty_plaintext(self, key, nonce) -> None:
        """Empty plaintext seals to a bare tag."""
        sealed = aead_encrypt(key, nonce, b"")
        assert len(sealed) == 16
        assert aead_decrypt(key, nonce, sealed) == b""

    def test_deterministic_under_same_nonce(self, key, nonce) -> None:
        """Same key, nonce and plaintext give the same output."""
        assert aead_encrypt(key, nonce, b"x") == aead_encrypt(key, nonce, b"x")

    def test_wrong_key(self, key, nonce) -> None:
        """A different key fails authentication."""
        sealed = aead_encrypt(key, nonce, b"secret")
        with pytest.raises(AuthenticationError):
            aead_decrypt(generate_aes_key(), nonce, sealed)

    def test_wrong_nonce(self, key, nonce) -> None:
        """A different nonce fails authentication."""
        sealed = aead_encrypt(key, nonce, b"secret")
        with pytest.raises(AuthenticationError):
            aead_decrypt(key, os.urandom(12), sealed)

    def test_tampered_tag(self, key, nonce) -> None:
        """A flipped tag bit fails authentication."""
        sealed = bytearray(aead_encrypt(key, nonce, b"secret"))
        sealed[-1] ^= 0x80
        with pytest.raises(AuthenticationError):
            aead_decrypt(key, nonce, bytes(sealed))

    def test_shorter_than_tag(self, key, nonce) -> None:
        """Input shorter than a tag fails authentication."""
        with pytest.raises(AuthenticationError):
            aead_decrypt(key, nonce, b"short")

    def test_invalid_key_length(self, nonce) -> None:
        """Keys must be 16, 24 or 32 bytes."""
        with pytest.raises(InvalidKeyError):
            aead_encrypt(b"k" * 20, nonce, b"data")

    def test_invalid_nonce_length(self, key) -> None:
        """Nonces must be 12 bytes."""
        with pytest.raises(InvalidKeyError):
            aead_encrypt(key, b"n" * 8, b"data")


class TestAesNoncePrefixed:
    """Test AES-GCM with the nonce carried in the output."""

    def test_round_trip_bytes(self) -> None:
        """Bytes output decrypts."""
        key = generate_aes_key()
        data = aes_encrypt(key, b"prefixed")

        assert isinstance(data, bytes)
        assert len(data) == 12 + len(b"prefixed") + 16
        assert aes_decrypt(key, data) == b"prefixed"

    def test_round_trip_base64(self) -> None:
        """Base64 output decrypts after decoding."""
        key = generate_aes_key()
        data = aes_encrypt(key, b"prefixed", "base64")

        assert isinstance(data, str)
        assert aes_decrypt(key, base64_to_bytes(data)) == b"prefixed"

    def test_fresh_nonce_each_call(self) -> None:
        """Two encryptions differ."""
        key = generate_aes_key()
        assert aes_encrypt(key, b"same") != aes_encrypt(key, b"same")

    def test_too_short(self) -> None:
        """Data without room for a nonce and tag is malformed."""
        with pytest.raises(MalformedCiphertextError):
            aes_decrypt(generate_aes_key(), bytes(20))

    def test_generated_key_size(self) -> None:
        """Generated keys are 32 bytes."""
        assert len(generate_aes_key()) == 32


class TestAesCbc:
    """Test AES-CBC with PKCS#7 padding."""

    def test_round_trip(self) -> None:
        """CBC output decrypts."""
        key = generate_aes_key()
        result = encrypt_aes_cbc(key, b"cbc message")

        assert len(result.iv) == 16
        assert len(result.ciphertext) == 16
        assert decrypt_aes_cbc(key, result.iv, result.ciphertext) == b"cbc message"

    def test_block_aligned_message_gets_full_pad_block(self) -> None:
        """A 16-byte message pads to 32 bytes."""
        key = generate_aes_key()
        result = encrypt_aes_cbc(key, b"A" * 16)

        assert len(result.ciphertext) == 32
        assert decrypt_aes_cbc(key, result.iv, result.ciphertext) == b"A" * 16

    def test_explicit_iv_is_deterministic(self) -> None:
        """Same key, IV and message give the same ciphertext."""
        key = generate_aes_key()
        iv = os.urandom(16)

        assert encrypt_aes_cbc(key, b"data", iv) == encrypt_aes_cbc(key, b"data", iv)

    def test_base64_output(self) -> None:
        """Base64 encoding applies to both IV and ciphertext."""
        key = generate_aes_key()
        result = encrypt_aes_cbc(key, b"data", encoding="base64")

        assert isinstance(result.iv, str)
        assert decrypt_aes_cbc(
            key, base64_to_bytes(result.iv), base64_to_bytes(result.ciphertext)
        ) == b"data"

    def test_bad_ciphertext_length(self) -> None:
        """Ciphertext that is not whole blocks fails."""
        with pytest.raises(DecryptionError):
            decrypt_aes_cbc(generate_aes_key(), os.urandom(16), b"x" * 15)

    def test_invalid_iv_length(self) -> None:
        """IVs must be 16 bytes."""
        with pytest.raises(InvalidKeyError):
            encrypt_aes_cbc(generate_aes_key(), b"data", iv=b"short")
