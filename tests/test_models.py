"""Tests for timekeeper.lib.models."""

from datetime import datetime, timedelta, timezone

import pytest

from timekeeper.lib.models import (
    ZERO_TIME,
    Entry,
    Project,
    format_timestamp,
    parse_timestamp,
    same_iso_week,
)

from conftest import NOW, make_project

UTC = timezone.utc


class TestEntry:
    """Tests for Entry durations and state."""

    def test_closed_duration(self):
        entry = Entry(start=NOW, end=NOW + timedelta(minutes=25))
        assert entry.duration(NOW + timedelta(days=3)) == timedelta(minutes=25)
        assert not entry.in_progress

    def test_open_duration_uses_now(self):
        entry = Entry(start=NOW)
        assert entry.in_progress
        assert entry.duration(NOW + timedelta(hours=2)) == timedelta(hours=2)

    def test_close_sets_end(self):
        entry = Entry(start=NOW)
        entry.close(NOW + timedelta(seconds=30))
        assert entry.end == NOW + timedelta(seconds=30)
        assert not entry.in_progress


class TestProjectAggregation:
    """Tests for total and weekly durations."""

    def test_empty_project(self):
        project = make_project(1)
        assert project.last_entry is None
        assert not project.in_progress
        assert project.last_duration(NOW) is None
        assert project.total(NOW) == timedelta()
        assert project.this_week(NOW) == timedelta()

    def test_total_includes_open_entry(self):
        project = make_project(1, starts=[NOW - timedelta(hours=3), NOW - timedelta(hours=1)],
                               open_last=True)
        assert project.in_progress
        assert project.total(NOW) == timedelta(minutes=10) + timedelta(hours=1)

    def test_this_week_excludes_earlier_weeks(self):
        project = make_project(1, starts=[NOW - timedelta(days=14), NOW - timedelta(days=1)])
        assert project.this_week(NOW) == timedelta(minutes=10)
        assert project.total(NOW) == timedelta(minutes=20)

    def test_this_week_never_exceeds_total(self):
        starts = [NOW - timedelta(days=d, hours=h) for d in range(0, 20, 3) for h in (1, 5)]
        project = make_project(1, starts=sorted(starts))
        assert project.total(NOW) >= project.this_week(NOW)

    def test_same_week_number_different_year(self):
        """Week 3 of last year is not this week."""
        last_year = datetime(2024, 1, 17, 9, 0, tzinfo=UTC)
        assert last_year.isocalendar()[1] == NOW.isocalendar()[1]
        project = make_project(1, starts=[last_year])
        assert project.this_week(NOW) == timedelta()

    def test_iso_week_spanning_new_year(self):
        """Sunday 2021-01-03 is in ISO week 2020-W53, with Monday 2020-12-28."""
        now = datetime(2021, 1, 3, 18, 0, tzinfo=UTC)
        project = make_project(1, starts=[datetime(2020, 12, 28, 9, 0, tzinfo=UTC),
                                          datetime(2020, 12, 27, 9, 0, tzinfo=UTC)])
        assert project.this_week(now) == timedelta(minutes=10)

    def test_week_is_judged_in_local_zone(self):
        """23:30 UTC on Sunday is already Monday at +02:00."""
        plus_two = timezone(timedelta(hours=2))
        start = datetime(2025, 1, 19, 23, 30, tzinfo=UTC)
        now = datetime(2025, 1, 20, 3, 0, tzinfo=plus_two)
        assert same_iso_week(start, now)
        assert not same_iso_week(start, now.astimezone(UTC) + timedelta(hours=-1))


class TestTimestamps:
    """Tests for the RFC 3339 codec."""

    def test_parse_z_suffix(self):
        assert parse_timestamp("2025-01-15T12:00:00Z") == NOW

    def test_parse_nanoseconds(self):
        dt = parse_timestamp("2024-05-01T10:00:00.123456789+02:00")
        assert dt.microsecond == 123456
        assert dt.utcoffset() == timedelta(hours=2)

    def test_parse_short_fraction(self):
        assert parse_timestamp("2024-05-01T10:00:00.5Z").microsecond == 500000

    def test_parse_naive_is_made_aware(self):
        assert parse_timestamp("2024-05-01T10:00:00").tzinfo is not None

    def test_parse_garbage_raises(self):
        with pytest.raises(ValueError):
            parse_timestamp("yesterday")

    def test_format_open_end(self):
        assert format_timestamp(None) == ZERO_TIME

    def test_format_aware(self):
        assert format_timestamp(NOW) == "2025-01-15T12:00:00+00:00"


class TestSerialization:
    """Tests for Entry/Project dict conversion."""

    def test_open_entry_written_as_zero_time(self):
        assert Entry(start=NOW).to_dict()["end"] == ZERO_TIME

    def test_zero_time_reads_as_open(self):
        entry = Entry.from_dict({"start": "2025-01-15T12:00:00Z", "end": ZERO_TIME})
        assert entry.in_progress

    def test_missing_or_null_end_reads_as_open(self):
        assert Entry.from_dict({"start": "2025-01-15T12:00:00Z"}).in_progress
        assert Entry.from_dict({"start": "2025-01-15T12:00:00Z", "end": None}).in_progress

    def test_project_from_dict_defaults(self):
        project = Project.from_dict({"id": 3, "name": "Docs"})
        assert project.entries == []
        assert project.archived is False
        assert project.ref is None

    def test_project_dict_has_no_ref(self):
        project = make_project(4, starts=[NOW])
        project.ref = 0
        data = project.to_dict()
        assert "ref" not in data
        assert Project.from_dict(data) == project


class TestProjectEquality:
    """Refs are ephemeral and don't affect equality."""

    def test_ref_ignored(self):
        a = make_project(1, starts=[NOW])
        b = make_project(1, starts=[NOW])
        a.ref, b.ref = 0, 7
        assert a == b

    def test_closing_entry_changes_equality(self):
        a = make_project(1, starts=[NOW], open_last=True)
        b = make_project(1, starts=[NOW], open_last=True)
        b.last_entry.close(NOW + timedelta(minutes=1))
        assert a != b
