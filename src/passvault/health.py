"""Vault health analytics: weak, reused and stale password detection."""

import hashlib
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, List, Sequence

from .analyzer import is_weak
from .config import Config
from .models import PasswordEntry

STALE_AFTER = timedelta(seconds=Config.STALE_AFTER_SECONDS)

# (score exclusive upper bound, verdict)
HEALTH_VERDICTS = [
    (70, "Needs attention"),
    (90, "Fair"),
]
TOP_VERDICT = "Excellent"


@dataclass(frozen=True)
class HealthReport:
    """Aggregate counts over the whole vault."""

    total: int = 0
    weak: int = 0
    reused: int = 0
    old: int = 0

    @property
    def score(self) -> int:
        """Overall 0-100 score used for display guidance only."""
        if self.total == 0:
            return 100
        score = 100
        score -= self.weak * 30 // self.total
        score -= self.reused * 30 // self.total
        score -= self.old * 20 // self.total
        return max(0, score)

    @property
    def verdict(self) -> str:
        for bound, verdict in HEALTH_VERDICTS:
            if self.score < bound:
                return verdict
        return TOP_VERDICT

    def to_dict(self) -> Dict[str, int]:
        return {
            "total": self.total,
            "weak": self.weak,
            "reused": self.reused,
            "old": self.old,
        }


def find_weak_entries(entries: Sequence[PasswordEntry]) -> List[PasswordEntry]:
    """Entries whose password scores below the weakness threshold."""
    return [e for e in entries if is_weak(e.password)]


def find_reused_passwords(
    entries: Sequence[PasswordEntry],
) -> List[List[PasswordEntry]]:
    """
    Find passwords that are reused across multiple entries.

    Returns one list of entries per shared password, in first-seen order.
    Note: Actual passwords are not returned to prevent accidental exposure.
    """
    password_usage: Dict[str, List[PasswordEntry]] = {}

    for entry in entries:
        # Hash password to avoid storing plaintext as dict keys
        pwd_hash = hashlib.sha256(entry.password.encode("utf-8")).hexdigest()
        password_usage.setdefault(pwd_hash, []).append(entry)

    return [group for group in password_usage.values() if len(group) > 1]


def find_old_entries(
    entries: Sequence[PasswordEntry], now: datetime
) -> List[PasswordEntry]:
    """Entries not modified for longer than six 30-day months."""
    return [
        e
        for e in entries
        if e.last_modified is not None and now - e.last_modified > STALE_AFTER
    ]


def build_health_report(
    entries: Sequence[PasswordEntry], now: datetime
) -> HealthReport:
    """
    Build the health report for a collection of entries.

    ``reused`` counts every entry that shares its password with at least
    one other entry, not the number of distinct shared passwords.
    """
    return HealthReport(
        total=len(entries),
        weak=len(find_weak_entries(entries)),
        reused=sum(len(group) for group in find_reused_passwords(entries)),
        old=len(find_old_entries(entries, now)),
    )
