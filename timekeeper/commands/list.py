"""
tk list - List projects with their recent and accumulated time.
"""

from rich.markup import escape

from timekeeper.lib.context import AppContext

HEADER = ["Ref", "Name", "Last Start", "Last Duration", "This Week", "Total"]


def cmd_list(args, app: AppContext) -> int:
    """List active projects, or all of them with --all-archived."""
    view = app.view
    projects = app.store.list_projects(include_archived=args.all_archived)
    if not projects:
        view.print("No projects")
        return 0

    limit = args.n if args.n is not None else app.settings.list_limit
    if not args.all and not args.all_archived:
        projects = projects[:limit]

    header = list(HEADER)
    if args.all_archived:
        header.append("Archived")

    rows = []
    for p in projects:
        if p.archived:
            name = f"[muted]{escape(p.name)}[/muted]"
        elif p.in_progress:
            name = f"[started]{escape(p.name)}[/started]"
        else:
            name = escape(p.name)

        value = "muted" if p.archived else "ref"
        row = [
            view.pretty_ref(p),
            name,
            f"[{value}]{view.last_start(p)}[/{value}]",
            f"[{value}]{view.last_duration(p)}[/{value}]",
            f"[{value}]{view.this_week(p)}[/{value}]",
            f"[{value}]{view.total(p)}[/{value}]",
        ]
        if args.all_archived:
            row.append("[muted]True[/muted]" if p.archived else "")
        rows.append(row)

    view.console.print(view.grid(rows, header=header))
    return 0
