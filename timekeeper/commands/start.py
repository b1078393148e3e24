"""
tk start / stop / s - Start and stop tracking.

`start` leaves an already running project alone; `s` treats the same
request as a stop.
"""

from timekeeper.lib.context import AppContext
from timekeeper.lib.render import View
from timekeeper.workflow.session import SessionResult


def report(view: View, result: SessionResult) -> None:
    """Print what a session operation stopped and started, in that order."""
    if result.stopped:
        view.stopped(result.stopped)
    if result.started:
        if result.stopped:
            view.print()
        view.started(result.started)


def cmd_start(args, app: AppContext) -> int:
    """Start a project by ref/ID, or create and start one by name."""
    target = app.session.resolve(args.target)
    result = app.session.start(target)

    if result.already_running:
        app.view.print("Project already in progress")
        return 0

    report(app.view, result)
    return 0


def cmd_stop(args, app: AppContext) -> int:
    """Stop the running project."""
    result = app.session.stop()
    if not result.changed:
        app.view.print("No project in progress")
        return 0

    report(app.view, result)
    return 0


def cmd_toggle(args, app: AppContext) -> int:
    """Context-aware start/stop."""
    target = app.session.resolve(args.target)
    report(app.view, app.session.toggle(target))
    return 0
