"""Cryptographic operations for vault field encryption."""

import base64
import hmac
import secrets

from argon2.exceptions import HashingError
from argon2.low_level import Type, hash_secret_raw
from cryptography.fernet import Fernet, InvalidToken

# Argon2id parameters (OWASP recommendations for password storage)
ARGON2_TIME_COST = 2  # Number of iterations
ARGON2_MEMORY_COST = 65536  # 64 MiB
ARGON2_PARALLELISM = 4  # Number of parallel threads
ARGON2_HASH_LENGTH = 32  # 32 bytes for Fernet key
ARGON2_SALT_LENGTH = 16  # 16 bytes salt

SALT_LENGTH = ARGON2_SALT_LENGTH


class CryptoError(Exception):
    """Base exception for cryptographic operations."""

    pass


class DecryptionError(CryptoError):
    """Raised when decryption fails (wrong key or tampered data)."""

    pass


class EncryptionError(CryptoError):
    """Raised when encryption fails."""

    pass


def generate_salt() -> bytes:
    """Generate a cryptographically secure random salt."""
    return secrets.token_bytes(SALT_LENGTH)


def derive_key(master_password: str, salt: bytes) -> bytes:
    """Derive the vault key from the master password using Argon2id.

    Deterministic for a given password and salt.
    """
    try:
        return hash_secret_raw(
            secret=master_password.encode("utf-8"),
            salt=salt,
            time_cost=ARGON2_TIME_COST,
            memory_cost=ARGON2_MEMORY_COST,
            parallelism=ARGON2_PARALLELISM,
            hash_len=ARGON2_HASH_LENGTH,
            type=Type.ID,
        )
    except (ValueError, TypeError, HashingError) as e:
        raise CryptoError(f"Key derivation failed: {e}") from e


def create_fernet(key: bytes) -> Fernet:
    """Create Fernet cipher from derived key."""
    try:
        return Fernet(base64.urlsafe_b64encode(key))
    except (ValueError, TypeError) as e:
        raise CryptoError(f"Fernet creation failed: {e}") from e


def encode(plaintext: str, key: bytes) -> str:
    """Encrypt text into a printable token.

    The token is URL-safe base64, so it never contains the record
    delimiter, newlines or control characters.
    """
    try:
        token = create_fernet(key).encrypt(plaintext.encode("utf-8"))
    except CryptoError:
        raise
    except (ValueError, TypeError) as e:
        raise EncryptionError(f"Encryption failed: {e}") from e
    return token.decode("ascii")


def decode(ciphertext: str, key: bytes) -> str:
    """Decrypt a token produced by :func:`encode`."""
    try:
        plaintext = create_fernet(key).decrypt(ciphertext.encode("ascii"))
        return plaintext.decode("utf-8")
    except InvalidToken:
        raise DecryptionError(
            "Decryption failed - incorrect master password or corrupted vault"
        )
    except CryptoError:
        raise
    except (ValueError, TypeError, UnicodeError) as e:
        raise DecryptionError(f"Decryption failed: {e}") from e


def keys_match(first: bytes, second: bytes) -> bool:
    """Compare two derived keys in constant time."""
    return hmac.compare_digest(first, second)
