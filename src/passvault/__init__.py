"""PassVault encrypted credential store."""

# Version constants (must be defined before imports to avoid circular dependencies)
__version__ = "0.1.0"
SCHEMA_VERSION = 1

# ruff: noqa: E402
from .analyzer import PasswordStrength, analyze_password
from .config import config
from .health import HealthReport, build_health_report
from .models import PasswordEntry
from .passwordgen import GenOptions, generate_password
from .vault import (
    EntryNotFoundError,
    Vault,
    VaultAuthenticationError,
    VaultCorruptedError,
    VaultDecryptionError,
    VaultEncryptionError,
    VaultError,
    VaultLockedError,
    VaultNotFoundError,
)

__all__ = [
    "PasswordEntry",
    "Vault",
    "config",
    "GenOptions",
    "generate_password",
    "PasswordStrength",
    "analyze_password",
    "HealthReport",
    "build_health_report",
    "VaultError",
    "VaultLockedError",
    "VaultAuthenticationError",
    "EntryNotFoundError",
    "VaultNotFoundError",
    "VaultCorruptedError",
    "VaultEncryptionError",
    "VaultDecryptionError",
]
