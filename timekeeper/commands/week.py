"""
tk week - Summarize time tracked in the current ISO week.
"""

from rich.markup import escape

from timekeeper.lib.context import AppContext
from timekeeper.lib.render import format_duration


def cmd_week(args, app: AppContext) -> int:
    """Show active projects with time logged this week."""
    projects = app.store.list_projects(include_archived=False)
    if not projects:
        app.view.print("No projects")
        return 0

    now = app.now()
    rows = []
    for p in projects:
        this_week = p.this_week(now)
        if not this_week:
            continue
        rows.append([
            escape(p.name),
            f"[ref]{format_duration(this_week)}[/ref]",
            f"[ref]{app.view.total(p)}[/ref]",
        ])

    app.view.console.print(app.view.grid(rows, header=["Name", "This Week", "Total"]))
    return 0
