"""
Per-invocation context handed to every command.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from timekeeper.lib.config import Settings
from timekeeper.lib.render import View
from timekeeper.lib.store import ProjectStore
from timekeeper.workflow.session import SessionController


def local_now() -> datetime:
    """Current time as an aware datetime in the local zone."""
    return datetime.now().astimezone()


@dataclass
class AppContext:
    """Everything a command needs: loaded store, session, view, settings."""
    settings: Settings
    store: ProjectStore
    session: SessionController
    view: View
    now: Callable[[], datetime] = local_now

    @classmethod
    def create(cls, settings: Settings, store: ProjectStore, view: View,
               now: Callable[[], datetime] = local_now) -> 'AppContext':
        return cls(
            settings=settings,
            store=store,
            session=SessionController(store, now=now),
            view=view,
            now=now,
        )
