"""
Unit tests for cryptographic operations.

This module tests the primitives behind vault field encryption:
- Salt generation for key derivation
- Argon2id key derivation from passwords
- Fernet field encoding and decoding
- Printable, delimiter-safe ciphertext
"""

import re

import pytest

from passvault.crypto import (
    DecryptionError,
    decode,
    derive_key,
    encode,
    generate_salt,
    keys_match,
)

TOKEN_ALPHABET = re.compile(r"^[A-Za-z0-9_=-]+$")


class TestSaltGeneration:
    """Test cryptographic salt generation for key derivation."""

    def test_generates_correct_length(self):
        """Salt must be exactly 16 bytes for Argon2 compatibility."""
        assert len(generate_salt()) == 16

    def test_generates_unique_salts(self):
        """Each salt generation must produce unique random values."""
        salts = {generate_salt() for _ in range(100)}
        assert len(salts) == 100, "All 100 salts should be unique"


class TestKeyDerivation:
    """Test Argon2id key derivation from passwords and salts."""

    def test_derives_correct_key_length(self, salt):
        assert len(derive_key("password", salt)) == 32

    def test_is_deterministic(self, salt):
        """Same password + salt must always produce same key."""
        assert derive_key("password", salt) == derive_key("password", salt)

    def test_different_passwords_produce_different_keys(self, salt):
        assert derive_key("password1", salt) != derive_key("password2", salt)

    def test_different_salts_produce_different_keys(self):
        assert derive_key("password", generate_salt()) != derive_key(
            "password", generate_salt()
        )

    def test_handles_unicode_password(self, salt):
        assert len(derive_key("пароль密码🔒", salt)) == 32

    def test_keys_match_compares_contents(self, salt):
        first = derive_key("password", salt)
        assert keys_match(first, derive_key("password", salt))
        assert not keys_match(first, derive_key("other", salt))


class TestEncode:
    """Test field encoding."""

    @pytest.mark.parametrize(
        "text",
        ["", "hello", "pipe|inside|text", "line\nbreak", "пароль密码🔒", "x" * 5000],
    )
    def test_decode_inverts_encode(self, key, text):
        assert decode(encode(text, key), key) == text

    def test_token_is_printable_and_delimiter_free(self, key):
        token = encode("a|b\nc\x00d", key)
        assert TOKEN_ALPHABET.match(token)
        assert "|" not in token
        assert "\n" not in token

    def test_produces_unique_ciphertext_each_time(self, key):
        """Same text should produce different tokens (random IV)."""
        assert encode("same", key) != encode("same", key)

    def test_ciphertext_does_not_contain_plaintext(self, key):
        assert "SECRET" not in encode("SECRET_PASSWORD_123", key)


class TestDecode:
    """Test decryption error handling."""

    def test_wrong_key_raises_error(self, key):
        token = encode("Secret data", key)
        wrong_key = derive_key("wrong", generate_salt())

        with pytest.raises(DecryptionError) as exc:
            decode(token, wrong_key)

        assert "incorrect master password" in str(exc.value).lower()

    def test_tampered_token_raises_error(self, key):
        token = encode("Secret data", key)
        tampered = token[:20] + ("A" if token[20] != "A" else "B") + token[21:]

        with pytest.raises(DecryptionError):
            decode(tampered, key)

    def test_garbage_raises_error(self, key):
        with pytest.raises(DecryptionError):
            decode("not-a-token", key)

    def test_non_ascii_input_raises_error(self, key):
        with pytest.raises(DecryptionError):
            decode("ünïcode", key)
