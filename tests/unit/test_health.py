"""Tests for vault health analytics."""

from datetime import datetime, timedelta, timezone

from passvault.health import (
    STALE_AFTER,
    HealthReport,
    build_health_report,
    find_old_entries,
    find_reused_passwords,
    find_weak_entries,
)
from passvault.models import PasswordEntry

NOW = datetime(2026, 6, 1, tzinfo=timezone.utc)


def make_entry(website: str, password: str, age: timedelta = timedelta(0)):
    stamp = NOW - age
    return PasswordEntry(
        website, "user", password, created_at=stamp, last_modified=stamp
    )


class TestReuse:
    def test_counts_every_participating_entry(self):
        entries = [
            make_entry("a.com", "X1"),
            make_entry("b.com", "X1"),
            make_entry("c.com", "Y2"),
        ]
        assert build_health_report(entries, NOW).reused == 2

    def test_multiple_groups(self):
        entries = [make_entry(f"{i}.com", pw) for i, pw in enumerate("aaabbc")]
        groups = find_reused_passwords(entries)
        assert [len(g) for g in groups] == [3, 2]
        assert build_health_report(entries, NOW).reused == 5

    def test_no_reuse(self):
        entries = [make_entry("a.com", "one"), make_entry("b.com", "two")]
        assert find_reused_passwords(entries) == []


class TestWeak:
    def test_below_sixty_is_weak(self):
        entries = [
            make_entry("a.com", "abcdefgh"),  # 35
            make_entry("b.com", "ABCDEFGHIJKL"),  # 50
            make_entry("c.com", "Passw0rd!"),  # 70
        ]
        assert [e.website for e in find_weak_entries(entries)] == ["a.com", "b.com"]


class TestStaleness:
    def test_older_than_six_months_is_old(self):
        entries = [
            make_entry("fresh.com", "pw", age=timedelta(days=30)),
            make_entry("edge.com", "pw", age=STALE_AFTER),
            make_entry("old.com", "pw", age=STALE_AFTER + timedelta(seconds=1)),
        ]
        assert [e.website for e in find_old_entries(entries, NOW)] == ["old.com"]

    def test_stale_threshold_is_180_days(self):
        assert STALE_AFTER == timedelta(seconds=6 * 30 * 24 * 3600)


class TestReport:
    def test_empty(self):
        report = build_health_report([], NOW)
        assert report == HealthReport(total=0, weak=0, reused=0, old=0)
        assert report.score == 100
        assert report.verdict == "Excellent"

    def test_combined_counts_and_score(self):
        entries = [
            make_entry("a.com", "X1"),
            make_entry("b.com", "X1"),
            make_entry("c.com", "Y2"),
        ]
        report = build_health_report(entries, NOW)
        assert report.to_dict() == {"total": 3, "weak": 3, "reused": 2, "old": 0}
        # 100 - 3*30//3 - 2*30//3
        assert report.score == 50
        assert report.verdict == "Needs attention"

    def test_score_uses_integer_division(self):
        report = HealthReport(total=7, weak=1, reused=0, old=1)
        # 30//7 == 4, 20//7 == 2
        assert report.score == 94

    def test_score_floor(self):
        report = HealthReport(total=2, weak=2, reused=2, old=2)
        assert report.score == 20
        assert HealthReport(total=1, weak=5, reused=5, old=5).score == 0

    def test_verdict_bands(self):
        assert HealthReport(total=10, weak=3).verdict == "Excellent"  # 91
        assert HealthReport(total=10, weak=5).verdict == "Fair"  # 85
        assert HealthReport(total=10, weak=5, reused=6).verdict == "Needs attention"
