"""
Projects and their time entries.

Durations are always computed against an explicit `now` so callers (and
tests) control the clock. Timestamps are timezone-aware; on disk they are
RFC 3339 strings, with the zero time marking an entry that is still open.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional

ZERO_TIME = "0001-01-01T00:00:00Z"
ZERO_DATETIME = datetime(1, 1, 1, tzinfo=timezone.utc)

_FRACTION = re.compile(r'\.(\d+)')


def _normalize_fraction(match: re.Match) -> str:
    # fromisoformat wants exactly microseconds; other writers emit nanoseconds
    return "." + (match.group(1) + "000000")[:6]


def parse_timestamp(value: str) -> datetime:
    """Parse an RFC 3339 timestamp into an aware datetime.

    Naive values are taken to be local time.

    Raises:
        ValueError: if the value is not a timestamp
    """
    text = value.strip()
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    text = _FRACTION.sub(_normalize_fraction, text, count=1)
    dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        dt = dt.astimezone()
    return dt


def format_timestamp(dt: Optional[datetime]) -> str:
    """Format a datetime as RFC 3339; None and the zero time become ZERO_TIME."""
    if dt is None or dt.year == 1:
        return ZERO_TIME
    return dt.isoformat()


def is_zero(dt: datetime) -> bool:
    return dt.year == 1


def same_iso_week(dt: datetime, now: datetime) -> bool:
    """True if `dt`, seen from `now`'s time zone, is in the same ISO year and week."""
    local = dt.astimezone(now.tzinfo) if dt.tzinfo is not None else dt
    return local.isocalendar()[:2] == now.isocalendar()[:2]


@dataclass
class Entry:
    """One span of tracked work. `end is None` while it is running."""
    start: datetime
    end: Optional[datetime] = None

    @property
    def in_progress(self) -> bool:
        return self.end is None

    def duration(self, now: datetime) -> timedelta:
        if self.end is None:
            return now - self.start
        return self.end - self.start

    def close(self, now: datetime) -> None:
        self.end = now

    def to_dict(self) -> dict:
        return {"start": format_timestamp(self.start), "end": format_timestamp(self.end)}

    @classmethod
    def from_dict(cls, data: dict) -> 'Entry':
        end_raw = data.get("end")
        end = parse_timestamp(end_raw) if end_raw else None
        if end is not None and is_zero(end):
            end = None
        return cls(start=parse_timestamp(data["start"]), end=end)


@dataclass
class Project:
    """A named activity with an append-only history of entries.

    `id` is permanent. `ref` is the short handle assigned when the store is
    loaded; it is None for a project created during this run and is not
    part of equality.
    """
    id: int
    name: str
    created: datetime = ZERO_DATETIME
    entries: list[Entry] = field(default_factory=list)
    archived: bool = False
    ref: Optional[int] = field(default=None, compare=False)

    @property
    def just_created(self) -> bool:
        return self.ref is None

    @property
    def last_entry(self) -> Optional[Entry]:
        if not self.entries:
            return None
        return self.entries[-1]

    @property
    def in_progress(self) -> bool:
        last = self.last_entry
        return last is not None and last.in_progress

    def last_duration(self, now: datetime) -> Optional[timedelta]:
        last = self.last_entry
        return last.duration(now) if last else None

    def total(self, now: datetime) -> timedelta:
        return sum((e.duration(now) for e in self.entries), timedelta())

    def this_week(self, now: datetime) -> timedelta:
        return sum(
            (e.duration(now) for e in self.entries if same_iso_week(e.start, now)),
            timedelta(),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "entries": [e.to_dict() for e in self.entries],
            "archived": self.archived,
            "created": format_timestamp(self.created),
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Project':
        created_raw = data.get("created")
        return cls(
            id=data["id"],
            name=data["name"],
            created=parse_timestamp(created_raw) if created_raw else ZERO_DATETIME,
            entries=[Entry.from_dict(e) for e in data.get("entries") or []],
            archived=data.get("archived", False),
        )
