"""
Terminal output: duration formatting, tables and themed messages.

Colors are looked up by semantic role ("ref", "started", ...) in a rich
Theme built from Settings, so nothing here holds global style state.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, Iterable, Mapping, Optional

from rich.console import Console
from rich.errors import StyleSyntaxError
from rich.markup import escape
from rich.style import Style
from rich.table import Table
from rich.theme import Theme

from timekeeper.lib.config import DEFAULT_STYLES
from timekeeper.lib.models import Project

logger = logging.getLogger(__name__)

MAX_UNITS = 2
EMPTY = "-"


def format_duration(duration: Optional[timedelta]) -> str:
    """Format as at most two units, e.g. '2d3h', '1h5m', '45s'. Zero is '-'."""
    if duration is None:
        return EMPTY
    remaining = int(duration.total_seconds())
    if remaining <= 0:
        return EMPTY

    parts = []
    for suffix, size in (("d", 86400), ("h", 3600), ("m", 60), ("s", 1)):
        count, remaining = divmod(remaining, size)
        if count > 0:
            parts.append(f"{count}{suffix}")
    return "".join(parts[:MAX_UNITS])


def build_theme(styles: Mapping[str, str]) -> Theme:
    """Build a Theme from role -> style strings, falling back per role on bad styles."""
    resolved = dict(DEFAULT_STYLES)
    for role, style in styles.items():
        try:
            Style.parse(style)
        except StyleSyntaxError as e:
            logger.warning(f"Invalid style for '{role}': {e}; using '{resolved.get(role, '')}'")
            continue
        resolved[role] = style
    return Theme(resolved)


def make_console(styles: Mapping[str, str], **kwargs) -> Console:
    return Console(theme=build_theme(styles), highlight=False, **kwargs)


class View:
    """Renders projects to a console. `now` supplies the clock for durations."""

    def __init__(self, console: Console, now: Callable[[], datetime]):
        self.console = console
        self.now = now

    def print(self, text: str = "") -> None:
        self.console.print(text)

    # --- refs ---

    def pretty_ref(self, p: Project) -> str:
        if p.ref is None or p.ref == p.id:
            return f"[ref]{p.id}[/ref]"
        return f"[ref]{p.ref}[/ref] (id=[ref]{p.id}[/ref])"

    def pretty_ref_paren(self, p: Project) -> str:
        if p.ref is None:
            return f"(id=[ref]{p.id}[/ref])"
        if p.ref == p.id:
            return f"(ref=[ref]{p.ref}[/ref])"
        return f"(ref=[ref]{p.ref}[/ref] id=[ref]{p.id}[/ref])"

    def label(self, p: Project) -> str:
        return f"{escape(p.name)} {self.pretty_ref_paren(p)}"

    # --- formatted values ---

    def last_start(self, p: Project) -> str:
        last = p.last_entry
        if last is None:
            return EMPTY
        return f"{format_duration(self.now() - last.start)} ago"

    def last_duration(self, p: Project) -> str:
        return format_duration(p.last_duration(self.now()))

    def this_week(self, p: Project) -> str:
        if not p.entries:
            return EMPTY
        return format_duration(p.this_week(self.now()))

    def total(self, p: Project) -> str:
        if not p.entries:
            return EMPTY
        return format_duration(p.total(self.now()))

    # --- tables ---

    def grid(self, rows: Iterable[Iterable[str]], header: Optional[list[str]] = None) -> Table:
        table = Table(
            box=None,
            show_header=header is not None,
            header_style="header",
            pad_edge=False,
            padding=(0, 2, 0, 0),
        )
        for name in header or []:
            table.add_column(name, no_wrap=True)
        for row in rows:
            table.add_row(*row)
        return table

    def stats(self, p: Project, with_duration: bool) -> None:
        rows = []
        if with_duration:
            rows.append(["Duration", f"[ref]{self.last_duration(p)}[/ref]"])
        rows.append(["This week", f"[ref]{self.this_week(p)}[/ref]"])
        rows.append(["Total", f"[ref]{self.total(p)}[/ref]"])
        self.console.print(self.grid(rows))

    # --- session messages ---

    def started(self, p: Project) -> None:
        self.console.print(f"[started]Started:[/started] {self.label(p)}")
        if not p.just_created:
            self.console.print()
            self.stats(p, with_duration=False)

    def stopped(self, p: Project) -> None:
        self.console.print(f"[stopped]Stopped:[/stopped] {self.label(p)}")
        self.console.print()
        self.stats(p, with_duration=True)

    def current(self, p: Project) -> None:
        if p.in_progress:
            state = "[started]In progress:[/started]"
        else:
            state = "[stopped]Stopped:[/stopped]"
        self.console.print(f"{state} {self.label(p)}")
        self.console.print()
        self.stats(p, with_duration=True)
