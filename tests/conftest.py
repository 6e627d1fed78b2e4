"""Shared pytest fixtures for all tests."""

import os
import tempfile
from datetime import datetime, timedelta, timezone
from typing import Generator

import pytest

from passvault import crypto
from passvault.crypto import derive_key, generate_salt
from passvault.models import PasswordEntry
from passvault.vault import Vault

# ============================================================================
# Environment Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def fast_key_derivation(monkeypatch):
    """Use cheap Argon2 parameters so tests don't spend 64 MiB per derivation."""
    monkeypatch.setattr(crypto, "ARGON2_TIME_COST", 1)
    monkeypatch.setattr(crypto, "ARGON2_MEMORY_COST", 1024)
    monkeypatch.setattr(crypto, "ARGON2_PARALLELISM", 1)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's PassVault environment out of tests."""
    for name in (
        "PASSVAULT_PATH",
        "PASSVAULT_AUTO_LOCK_MINUTES",
        "PASSVAULT_MASTER_PASSWORD",
    ):
        monkeypatch.delenv(name, raising=False)


# ============================================================================
# File System Fixtures
# ============================================================================


@pytest.fixture
def temp_dir() -> Generator[str, None, None]:
    """Provide a temporary directory that's automatically cleaned up."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def vault_path(temp_dir: str) -> str:
    """Provide a temporary vault file path."""
    return os.path.join(temp_dir, "passvault.dat")


# ============================================================================
# Clock Fixtures
# ============================================================================


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 1, 15, 9, 30, tzinfo=timezone.utc))


# ============================================================================
# Vault Fixtures
# ============================================================================


@pytest.fixture
def master_password() -> str:
    """Standard master password for tests."""
    return "TestMasterPassword123!"


@pytest.fixture
def vault(vault_path: str, master_password: str, clock: FakeClock) -> Vault:
    """Provide an empty, unlocked vault."""
    v = Vault(vault_path, auto_lock_minutes=10, clock=clock)
    assert v.initialize(master_password)
    return v


@pytest.fixture
def vault_with_entries(vault: Vault) -> Vault:
    """Provide a vault with sample entries."""
    vault.add_entry(PasswordEntry("Google.com", "user@gmail.com", "GmailPass123!"))
    vault.add_entry(PasswordEntry("github.com", "developer", "GitHubToken456!", "Work"))
    vault.add_entry(
        PasswordEntry(
            "aws.amazon.com",
            "admin",
            "AwsSecret789!",
            category="Work",
            notes="Production account",
        )
    )
    return vault


# ============================================================================
# Crypto Fixtures
# ============================================================================


@pytest.fixture
def salt() -> bytes:
    """Provide a random salt for testing."""
    return generate_salt()


@pytest.fixture
def key(salt: bytes) -> bytes:
    """Provide a derived key for testing."""
    return derive_key("password", salt)


# ============================================================================
# Model Fixtures
# ============================================================================


@pytest.fixture
def sample_entry() -> PasswordEntry:
    """Provide a sample draft entry."""
    return PasswordEntry(
        website="example.com",
        username="testuser@example.com",
        password="SecurePassword123!",
        category="Personal",
        notes="Sample notes",
    )
