"""
tk - Show the most recent project.
"""

from timekeeper.lib.context import AppContext

NO_PROJECTS_MESSAGE = "No projects. Start one with `tk start <name>`"


def cmd_current(args, app: AppContext) -> int:
    """Show the project at the top of the ordering, running or not."""
    if not app.store.projects:
        app.view.print(NO_PROJECTS_MESSAGE)
        return 0

    app.view.current(app.store.projects[0])
    return 0
