"""
tk new - Create a project without starting it.
"""

import sys

from timekeeper.lib.context import AppContext


def cmd_new(args, app: AppContext) -> int:
    """Create a new project."""
    name = args.name
    if not name:
        print("ERROR: missing project name", file=sys.stderr)
        return 1

    project = app.store.create(name, app.now())
    app.view.print(f"Created {app.view.label(project)}")
    return 0
