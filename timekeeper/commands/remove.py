"""
tk remove - Delete projects and their history.
"""

from timekeeper.lib.context import AppContext
from timekeeper.lib.store import parse_ref


def cmd_remove(args, app: AppContext) -> int:
    """Remove each given ref (default: ref 0), or everything with --all."""
    if args.all:
        projects = list(app.store.projects)
    else:
        refs = [parse_ref(r) for r in args.refs] or [0]
        projects = []
        for ref in refs:
            project = app.store.by_ref(ref)
            if all(p.id != project.id for p in projects):
                projects.append(project)

    for project in projects:
        app.session.remove(project)
        app.view.print(f"[stopped]Removed:[/stopped] {app.view.label(project)}")

    return 0
