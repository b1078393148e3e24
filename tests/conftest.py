"""Shared fixtures: a controllable clock, project builders and a captured console."""

import io
from datetime import datetime, timedelta, timezone

import pytest
from rich.console import Console

from timekeeper.lib.config import DEFAULT_STYLES
from timekeeper.lib.models import Entry, Project
from timekeeper.lib.render import View, build_theme

# Wednesday of ISO week 2025-W03
NOW = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)


class Clock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime = NOW):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current += timedelta(**kwargs)
        return self.current


def make_project(pid: int, name: str = "", starts=(), open_last: bool = False,
                 archived: bool = False, created: datetime = NOW - timedelta(days=30)) -> Project:
    """Build a project whose entries each last ten minutes from the given starts."""
    entries = [Entry(start=s, end=s + timedelta(minutes=10)) for s in starts]
    if open_last and entries:
        entries[-1].end = None
    return Project(id=pid, name=name or f"project-{pid}", created=created,
                   entries=entries, archived=archived)


@pytest.fixture
def clock():
    return Clock()


def capture_console() -> Console:
    """A plain-text console writing to a StringIO."""
    return Console(
        file=io.StringIO(),
        theme=build_theme(DEFAULT_STYLES),
        color_system=None,
        highlight=False,
        width=120,
    )


@pytest.fixture
def console():
    return capture_console()


@pytest.fixture
def view(console, clock):
    return View(console, clock)
