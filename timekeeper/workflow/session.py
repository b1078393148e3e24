"""Start/stop state machine using the transitions library.

The store is either idle (no open entry anywhere) or tracking exactly one
project. Every change to the running entry goes through the `begin` and
`end` triggers, which keeps at most one entry open store-wide.

Usage:
    from timekeeper.workflow.session import SessionController

    session = SessionController(store, now=clock)
    result = session.start(session.resolve("42"))
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from transitions import Machine, MachineError

from timekeeper.lib.models import Entry, Project
from timekeeper.lib.store import ProjectStore

logger = logging.getLogger(__name__)


STATES = ["idle", "tracking"]

TRANSITIONS = [
    {"trigger": "begin", "source": "idle", "dest": "tracking", "after": "_open_entry"},
    {"trigger": "end", "source": "tracking", "dest": "idle", "after": "_close_entry"},
]


class InvalidTransition(Exception):
    """Raised when a trigger is not allowed in the current state."""

    def __init__(self, from_state: str, trigger: str):
        self.from_state = from_state
        self.trigger = trigger
        super().__init__(f"Invalid transition: {trigger} from {from_state}")


@dataclass
class SessionResult:
    """What a session operation did, for the caller to report."""
    started: Optional[Project] = None
    stopped: Optional[Project] = None
    already_running: bool = False

    @property
    def changed(self) -> bool:
        return self.started is not None or self.stopped is not None


class SessionController:
    """Enforces that at most one project is in progress."""

    def __init__(self, store: ProjectStore, now: Callable[[], datetime]):
        self.store = store
        self.now = now
        self.current: Optional[Project] = store.in_progress_project()

        self.machine = Machine(
            model=self,
            states=STATES,
            transitions=TRANSITIONS,
            initial="tracking" if self.current else "idle",
            auto_transitions=False,
            send_event=True,
            after_state_change="on_state_change",
        )

    def _open_entry(self, event) -> None:
        project = event.kwargs["project"]
        project.entries.append(Entry(start=self.now()))
        self.current = project

    def _close_entry(self, event) -> None:
        self.current.last_entry.close(self.now())
        event.kwargs["result"].stopped = self.current
        self.current = None

    def on_state_change(self, event) -> None:
        logger.info(
            f"[SESSION] {event.transition.source} -> {event.transition.dest} ({event.event.name})"
        )

    def _fire(self, trigger: str, **kwargs) -> None:
        try:
            getattr(self, trigger)(**kwargs)
        except MachineError as e:
            raise InvalidTransition(self.state, trigger) from e

    def _is_current(self, project: Project) -> bool:
        return self.current is not None and self.current.id == project.id

    def resolve(self, arg: Optional[str]) -> Project:
        """Turn a command-line argument into a project.

        An integer is a ref or ID, an empty argument means ref 0, and
        anything else is the name of a new project.

        Raises:
            NoProjectsError: if a ref was requested from an empty store
            ProjectNotFoundError: if the ref matches nothing
        """
        ref = 0
        if arg:
            try:
                ref = int(arg)
            except ValueError:
                return self.store.create(arg, self.now())
        return self.store.by_ref(ref)

    def stop(self) -> SessionResult:
        """Close the running entry, if any."""
        result = SessionResult()
        if self.is_idle():
            logger.debug("[SESSION] stop requested while idle")
            return result
        self._fire("end", result=result)
        return result

    def start(self, target: Project) -> SessionResult:
        """Start `target`, stopping whatever else is running.

        Starting the project that is already running changes nothing.
        """
        if self._is_current(target):
            return SessionResult(already_running=True)

        result = self.stop()
        self._fire("begin", project=target)
        result.started = target
        return result

    def toggle(self, target: Project) -> SessionResult:
        """Stop `target` if it is running, otherwise start it."""
        was_running = self._is_current(target)
        result = self.stop()
        if was_running:
            return result
        self._fire("begin", project=target)
        result.started = target
        return result

    def toggle_archive(self, project: Project) -> SessionResult:
        """Flip the archived flag, stopping the project first if it is running."""
        result = SessionResult()
        if not project.archived and self._is_current(project):
            result = self.stop()
        project.archived = not project.archived
        logger.info(f"{'Archived' if project.archived else 'Unarchived'} project {project.id}")
        return result

    def remove(self, project: Project) -> None:
        """Drop a project from the store, going idle if it was running."""
        if self._is_current(project):
            self.current = None
            self.machine.set_state("idle")
        self.store.remove(project)
