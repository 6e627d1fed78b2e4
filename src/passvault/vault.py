"""Vault management - lock-gated, encrypted storage of credential entries."""

import base64
import binascii
import logging
import os
import secrets
import stat
import tempfile
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Tuple

from . import SCHEMA_VERSION
from .config import config
from .crypto import (
    SALT_LENGTH,
    CryptoError,
    DecryptionError,
    EncryptionError,
    decode,
    derive_key,
    encode,
    generate_salt,
    keys_match,
)
from .health import HealthReport, build_health_report
from .models import PasswordEntry, from_epoch, to_epoch, utc_now

logger = logging.getLogger(__name__)

FIELD_DELIMITER = "|"
HEADER_MAGIC = "PASSVAULT"
HEADER_FIELD_COUNT = 4
ENTRY_FIELD_COUNT = 8
VERIFIER_PLAINTEXT = "passvault"


class VaultError(Exception):
    """Base exception for vault-related errors."""

    pass


class VaultLockedError(VaultError):
    """Raised when a gated operation is attempted on a locked vault."""

    pass


class VaultAuthenticationError(VaultError):
    """Raised when the master password does not match the vault."""

    pass


class EntryNotFoundError(VaultError):
    """Raised when no entry has the requested id."""

    pass


class VaultNotFoundError(VaultError):
    """Raised when vault file doesn't exist."""

    pass


class VaultCorruptedError(VaultError):
    """Raised when vault file exists but is unreadable."""

    pass


class VaultEncryptionError(VaultError):
    """Raised when vault encryption fails."""

    pass


class VaultDecryptionError(VaultError):
    """Raised when vault decryption fails."""

    pass


class Vault:
    """Credential vault persisted as one encrypted line per entry.

    Every text field is encrypted with Fernet under an Argon2id key derived
    from the master password and a per-vault salt kept in the file header.

    The vault starts locked. Reads and mutations are gated: when the vault
    is locked, or has been idle longer than ``auto_lock_minutes``, they fail
    without side effects. Public operations report failure through their
    return value and record the cause in :attr:`last_error`.
    """

    def __init__(
        self,
        file_path: Optional[str] = None,
        *,
        auto_lock_minutes: Optional[int] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Bind a locked vault to its storage path.

        Args:
            file_path: Optional custom vault file path (defaults to config.vault_path)
            auto_lock_minutes: Idle minutes before auto-lock, 0 disables
                (defaults to config.auto_lock_minutes)
            clock: Returns the current aware UTC time; injectable for tests
        """
        self.file_path = file_path or config.vault_path
        self.auto_lock_minutes = (
            config.auto_lock_minutes
            if auto_lock_minutes is None
            else auto_lock_minutes
        )
        self._clock = clock or utc_now
        self.entries: List[PasswordEntry] = []
        self.last_activity = self._clock()
        self.last_error: Optional[VaultError] = None
        self._key: Optional[bytes] = None
        self._salt: Optional[bytes] = None
        self._locked = True

    # ------------------------------------------------------------------
    # Lock state
    # ------------------------------------------------------------------

    @property
    def is_locked(self) -> bool:
        return self._locked

    def initialize(self, master_password: str) -> bool:
        """Derive the vault key, load any existing entries and unlock.

        An existing vault file supplies the salt, and its header verifier
        must decrypt under the derived key. A missing file starts an empty
        vault with a fresh salt; it is written on the first mutation.
        """
        exists = os.path.exists(self.file_path)
        try:
            if exists:
                salt, verifier = self._parse_header(self._read_lines()[0])
                key = derive_key(master_password, salt)
                self._check_verifier(verifier, key)
            else:
                salt = generate_salt()
                key = derive_key(master_password, salt)
        except VaultError as e:
            return self._fail(e)
        except CryptoError as e:
            return self._fail(VaultError(f"Failed to derive vault key: {e}"))

        self._key = key
        self._salt = salt
        self._locked = False
        self._touch()
        self.last_error = None

        if exists:
            if self.load_from_file():
                return True
            # Never leave an unreadable vault open; a save would overwrite it.
            self._key = None
            self._salt = None
            self._locked = True
            return False

        self.entries = []
        logger.info("Initialized new vault at %s", self.file_path)
        return True

    def unlock(self, master_password: str) -> bool:
        """Unlock when ``master_password`` matches the one used to initialize."""
        if self._key is None or self._salt is None:
            return self._fail(VaultLockedError("Vault has not been initialized"))

        try:
            candidate = derive_key(master_password, self._salt)
        except CryptoError as e:
            return self._fail(VaultError(f"Failed to derive vault key: {e}"))

        if not keys_match(candidate, self._key):
            return self._fail(
                VaultAuthenticationError("Incorrect master password")
            )

        self._locked = False
        self._touch()
        self.last_error = None
        logger.debug("Vault unlocked")
        return True

    def lock(self) -> None:
        """Lock the vault; gated operations fail until :meth:`unlock`."""
        self._locked = True
        logger.debug("Vault locked")

    def _touch(self) -> None:
        self.last_activity = self._clock()

    def _now(self) -> datetime:
        # Entry timestamps are stored as whole epoch seconds
        return self._clock().replace(microsecond=0)

    def _auto_lock_expired(self) -> bool:
        if self.auto_lock_minutes <= 0:
            return False
        idle = self._clock() - self.last_activity
        return idle > timedelta(minutes=self.auto_lock_minutes)

    def _check_access(self) -> bool:
        """Apply lazy auto-lock, then refresh activity if still unlocked."""
        if not self._locked and self._auto_lock_expired():
            self._locked = True
            logger.info(
                "Vault auto-locked after %d minutes of inactivity",
                self.auto_lock_minutes,
            )
        if self._locked:
            self._fail(VaultLockedError("Vault is locked"), level=logging.DEBUG)
            return False
        self._touch()
        return True

    def _fail(self, error: VaultError, level: int = logging.WARNING) -> bool:
        self.last_error = error
        logger.log(level, "%s: %s", type(error).__name__, error)
        return False

    # ------------------------------------------------------------------
    # Entry operations (gated)
    # ------------------------------------------------------------------

    def add_entry(self, entry: PasswordEntry) -> Optional[str]:
        """Store a copy of ``entry`` under a fresh id.

        Returns the new id, or None when locked or the save fails.
        """
        if not self._check_access():
            return None

        now = self._now()
        new_entry = replace(
            entry, id=self._generate_id(now), created_at=now, last_modified=now
        )
        self.entries.append(new_entry)
        if not self.save_to_file():
            self.entries.pop()
            return None

        logger.info("Added entry %s", new_entry.id)
        return new_entry.id

    def update_entry(self, entry_id: str, entry: PasswordEntry) -> bool:
        """Overwrite every field of entry ``entry_id`` except id and creation time."""
        if not self._check_access():
            return False

        index = self._find_index(entry_id)
        if index is None:
            return self._fail(
                EntryNotFoundError(f"Entry '{entry_id}' not found"),
                level=logging.DEBUG,
            )

        previous = self.entries[index]
        updated = replace(entry, id=previous.id, created_at=previous.created_at)
        updated.mark_updated(max(self._now(), previous.created_at))
        self.entries[index] = updated
        if not self.save_to_file():
            self.entries[index] = previous
            return False

        logger.info("Updated entry %s", entry_id)
        return True

    def delete_entry(self, entry_id: str) -> bool:
        """Remove entry ``entry_id``."""
        if not self._check_access():
            return False

        index = self._find_index(entry_id)
        if index is None:
            return self._fail(
                EntryNotFoundError(f"Entry '{entry_id}' not found"),
                level=logging.DEBUG,
            )

        removed = self.entries.pop(index)
        if not self.save_to_file():
            self.entries.insert(index, removed)
            return False

        logger.info("Deleted entry %s", entry_id)
        return True

    def search_entries(self, query: str) -> List[PasswordEntry]:
        """Search entries by website, username, or category (case-insensitive)."""
        if not self._check_access():
            return []

        query_lower = query.lower()
        return [
            e.copy()
            for e in self.entries
            if query_lower in e.website.lower()
            or query_lower in e.username.lower()
            or query_lower in e.category.lower()
        ]

    def get_all_entries(self) -> List[PasswordEntry]:
        """Get copies of all entries in insertion order."""
        if not self._check_access():
            return []
        return [e.copy() for e in self.entries]

    def get_entry(self, entry_id: str) -> Optional[PasswordEntry]:
        """Get a copy of the entry with ``entry_id``, if any."""
        if not self._check_access():
            return None
        index = self._find_index(entry_id)
        return self.entries[index].copy() if index is not None else None

    def get_health_report(self) -> HealthReport:
        """Weak, reused and stale counts over the whole vault."""
        return build_health_report(self.entries, self._clock())

    def count(self) -> int:
        """Get the number of entries."""
        return len(self.entries)

    def _find_index(self, entry_id: str) -> Optional[int]:
        return next(
            (i for i, e in enumerate(self.entries) if e.id == entry_id), None
        )

    def _generate_id(self, now: datetime) -> str:
        existing = {e.id for e in self.entries}
        while True:
            entry_id = f"{to_epoch(now)}{secrets.token_hex(8)}"
            if entry_id not in existing:
                return entry_id

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save_to_file(self) -> bool:
        """Encrypt and write the full collection, replacing the file atomically."""
        try:
            self._save()
        except VaultError as e:
            return self._fail(e)
        return True

    def load_from_file(self) -> bool:
        """Replace the in-memory collection with the file's entries.

        On failure the collection is left untouched and :attr:`last_error`
        tells a storage problem apart from an empty vault.
        """
        try:
            entries = self._load()
        except VaultError as e:
            return self._fail(e)

        self.entries = entries
        logger.info("Loaded %d entries from %s", len(entries), self.file_path)
        return True

    def _require_key(self) -> Tuple[bytes, bytes]:
        if self._key is None or self._salt is None:
            raise VaultLockedError("Vault has not been initialized")
        return self._key, self._salt

    def _read_lines(self) -> List[str]:
        if not os.path.exists(self.file_path):
            raise VaultNotFoundError(f"Vault file not found: {self.file_path}")
        try:
            with open(self.file_path, "r", encoding="utf-8", newline="") as f:
                lines = f.read().splitlines()
        except UnicodeDecodeError:
            raise VaultCorruptedError("Vault file has invalid encoding")
        except OSError as e:
            raise VaultCorruptedError(f"Failed to read vault file: {e}") from e

        if not lines:
            raise VaultCorruptedError("Vault file is missing its header")
        return lines

    def _parse_header(self, line: str) -> Tuple[bytes, str]:
        fields = line.split(FIELD_DELIMITER)
        if len(fields) != HEADER_FIELD_COUNT or fields[0] != HEADER_MAGIC:
            raise VaultCorruptedError("Vault file has an invalid header")

        _, version, salt_text, verifier = fields
        if version != str(SCHEMA_VERSION):
            raise VaultCorruptedError(f"Unsupported vault format version: {version}")

        try:
            salt = base64.urlsafe_b64decode(salt_text.encode("ascii"))
        except (binascii.Error, ValueError) as e:
            raise VaultCorruptedError(f"Vault salt is invalid: {e}") from e
        if len(salt) != SALT_LENGTH:
            raise VaultCorruptedError("Vault salt has the wrong length")
        return salt, verifier

    def _check_verifier(self, verifier: str, key: bytes) -> None:
        try:
            matches = decode(verifier, key) == VERIFIER_PLAINTEXT
        except DecryptionError:
            matches = False
        if not matches:
            raise VaultAuthenticationError(
                "Incorrect master password or corrupted vault"
            )

    def _load(self) -> List[PasswordEntry]:
        key, _ = self._require_key()
        lines = self._read_lines()

        _, verifier = self._parse_header(lines[0])
        try:
            self._check_verifier(verifier, key)
        except VaultAuthenticationError as e:
            raise VaultDecryptionError(f"Failed to decrypt vault: {e}") from e

        entries: List[PasswordEntry] = []
        seen_ids = set()
        for line_number, line in enumerate(lines[1:], start=2):
            entry = self._parse_entry(line, line_number, key)
            if entry.id in seen_ids:
                raise VaultCorruptedError(
                    f"Line {line_number}: duplicate entry id"
                )
            seen_ids.add(entry.id)
            entries.append(entry)
        return entries

    def _parse_entry(self, line: str, line_number: int, key: bytes) -> PasswordEntry:
        fields = line.split(FIELD_DELIMITER)
        if len(fields) != ENTRY_FIELD_COUNT:
            raise VaultCorruptedError(
                f"Line {line_number}: expected {ENTRY_FIELD_COUNT} fields, "
                f"got {len(fields)}"
            )

        try:
            entry_id, website, username, password, category, notes = (
                decode(token, key) for token in fields[:6]
            )
        except DecryptionError as e:
            raise VaultDecryptionError(f"Line {line_number}: {e}") from e

        try:
            created_at = from_epoch(int(fields[6]))
            last_modified = from_epoch(int(fields[7]))
        except (ValueError, OverflowError, OSError) as e:
            raise VaultCorruptedError(
                f"Line {line_number}: invalid timestamp: {e}"
            ) from e

        return PasswordEntry(
            id=entry_id,
            website=website,
            username=username,
            password=password,
            category=category,
            notes=notes,
            created_at=created_at,
            last_modified=last_modified,
        )

    def _serialize_entry(self, entry: PasswordEntry, key: bytes) -> str:
        fields = [
            encode(value, key)
            for value in (
                entry.id,
                entry.website,
                entry.username,
                entry.password,
                entry.category,
                entry.notes,
            )
        ]
        fields.append(str(to_epoch(entry.created_at)))
        fields.append(str(to_epoch(entry.last_modified)))
        return FIELD_DELIMITER.join(fields)

    def _save(self) -> None:
        """Write header and entries to a temp file, then atomically replace."""
        key, salt = self._require_key()

        try:
            header = FIELD_DELIMITER.join(
                [
                    HEADER_MAGIC,
                    str(SCHEMA_VERSION),
                    base64.urlsafe_b64encode(salt).decode("ascii"),
                    encode(VERIFIER_PLAINTEXT, key),
                ]
            )
            lines = [header] + [self._serialize_entry(e, key) for e in self.entries]
        except (EncryptionError, CryptoError) as e:
            raise VaultEncryptionError(f"Failed to encrypt vault: {e}") from e

        vault_dir = os.path.dirname(os.path.abspath(self.file_path))
        try:
            os.makedirs(vault_dir, exist_ok=True)
            # Create temp file in same directory for atomic move
            temp_fd, temp_path = tempfile.mkstemp(
                dir=vault_dir, prefix=".vault_tmp_", suffix=".dat"
            )
        except OSError as e:
            raise VaultError(f"Failed to save vault: {e}") from e

        try:
            with os.fdopen(temp_fd, "w", encoding="utf-8", newline="\n") as f:
                f.write("\n".join(lines) + "\n")

            # Set permissions (0600)
            os.chmod(temp_path, stat.S_IRUSR | stat.S_IWUSR)

            # Atomic replace (works on Unix and Windows)
            os.replace(temp_path, self.file_path)
        except OSError as e:
            self._cleanup_temp(temp_path)
            raise VaultError(f"Failed to save vault: {e}") from e

        logger.debug("Saved %d entries to %s", len(self.entries), self.file_path)

    def _cleanup_temp(self, temp_path: str) -> None:
        """Remove temporary file if it exists."""
        try:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
        except OSError:
            pass
