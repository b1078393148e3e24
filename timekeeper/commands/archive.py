"""
tk archive - Archive or unarchive projects.

Archived projects drop out of the default listing and lose their short
ref. Archiving a running project stops it first.
"""

from timekeeper.commands.start import report
from timekeeper.lib.context import AppContext
from timekeeper.lib.store import parse_ref


def cmd_archive(args, app: AppContext) -> int:
    """Toggle the archived flag on each given ref (default: ref 0)."""
    refs = [parse_ref(r) for r in args.refs] or [0]
    view = app.view

    for ref in refs:
        project = app.store.by_ref(ref)

        result = app.session.toggle_archive(project)
        if result.stopped:
            report(view, result)
            view.print()

        if project.archived:
            view.print(f"[muted]Archived:[/muted] {view.label(project)}")
        else:
            view.print(f"[header]Unarchived:[/header] {view.label(project)}")

    return 0
