"""Data models for credential storage."""

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional

from .config import Config


def utc_now() -> datetime:
    """Current UTC time truncated to whole seconds (the on-disk precision)."""
    return datetime.now(timezone.utc).replace(microsecond=0)


def to_epoch(dt: datetime) -> int:
    """Convert an aware datetime to integer epoch seconds."""
    return int(dt.timestamp())


def from_epoch(seconds: int) -> datetime:
    """Convert integer epoch seconds to an aware UTC datetime."""
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


@dataclass
class PasswordEntry:
    """A stored credential.

    ``id`` is assigned by the vault when the entry is added; drafts leave
    it empty.
    """

    website: str
    username: str
    password: str
    category: str = Config.DEFAULT_CATEGORY
    notes: str = ""
    id: str = ""

    # Temporal tracking
    created_at: Optional[datetime] = None
    last_modified: Optional[datetime] = None

    def __post_init__(self):
        """Set timestamps if not provided."""
        now = utc_now()
        if self.created_at is None:
            self.created_at = now
        if self.last_modified is None:
            self.last_modified = self.created_at

    def mark_updated(self, now: Optional[datetime] = None) -> None:
        """Update modification timestamp when entry is changed."""
        self.last_modified = now or utc_now()

    def copy(self) -> "PasswordEntry":
        """Return an independent copy of this entry."""
        return replace(self)

    def to_dict(self) -> dict:
        """Convert to a plain dictionary (timestamps as epoch seconds)."""
        return {
            "id": self.id,
            "website": self.website,
            "username": self.username,
            "password": self.password,
            "category": self.category,
            "notes": self.notes,
            "created_at": to_epoch(self.created_at) if self.created_at else None,
            "last_modified": (
                to_epoch(self.last_modified) if self.last_modified else None
            ),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PasswordEntry":
        """Create PasswordEntry from dictionary."""
        data = dict(data)
        for ts_field in ["created_at", "last_modified"]:
            if isinstance(data.get(ts_field), int):
                data[ts_field] = from_epoch(data[ts_field])

        data.setdefault("category", Config.DEFAULT_CATEGORY)
        data.setdefault("notes", "")
        data.setdefault("id", "")

        return cls(**data)
