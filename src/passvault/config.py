"""Configuration management for PassVault."""

import os


class Config:
    """Configuration settings for PassVault."""

    DEFAULT_VAULT_PATH = "~/.passvault/passvault.dat"
    VAULT_PATH_ENV = "PASSVAULT_PATH"
    AUTO_LOCK_ENV = "PASSVAULT_AUTO_LOCK_MINUTES"
    DEFAULT_CATEGORY = "General"

    # Lock policy (0 disables auto-lock)
    DEFAULT_AUTO_LOCK_MINUTES = 10

    # Security constants
    MAX_PASSWORD_ATTEMPTS = 3
    MIN_MASTER_PASSWORD_LENGTH = 6

    # Health analytics
    STALE_AFTER_SECONDS = 6 * 30 * 24 * 3600

    def __init__(self):
        """Initialize configuration with environment variable support."""
        self.vault_path = self._get_vault_path()
        self.auto_lock_minutes = self._get_auto_lock_minutes()

    def _get_vault_path(self) -> str:
        """Get vault path from environment or use default."""
        env_path = os.getenv(self.VAULT_PATH_ENV)
        if env_path:
            return os.path.expanduser(env_path)
        return os.path.expanduser(self.DEFAULT_VAULT_PATH)

    def _get_auto_lock_minutes(self) -> int:
        """Get auto-lock interval from environment, falling back to the default."""
        raw = os.getenv(self.AUTO_LOCK_ENV)
        if raw is None:
            return self.DEFAULT_AUTO_LOCK_MINUTES
        try:
            minutes = int(raw)
        except ValueError:
            return self.DEFAULT_AUTO_LOCK_MINUTES
        return minutes if minutes >= 0 else self.DEFAULT_AUTO_LOCK_MINUTES


config = Config()
