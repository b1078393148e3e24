"""
In-memory project store.

Ordering and refs are derived: `init()` sorts the projects by recency and
hands out the short refs 0-9 once per load. Persistent IDs come from a
counter that is never rewound, so a removed project's ID is not reissued
within a run.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from functools import cmp_to_key
from typing import Optional

from timekeeper.lib.models import Project

logger = logging.getLogger(__name__)

# A loaded store never hands out IDs at or below this, so new IDs stay clear
# of the 0-9 ref range.
ID_FLOOR = 9
MAX_REFS = 10


class NoProjectsError(Exception):
    """A project was requested but the store is empty."""

    def __init__(self):
        super().__init__("no projects")


class ProjectNotFoundError(Exception):
    """No project matches the given ref or ID."""

    def __init__(self, ref: int):
        self.ref = ref
        super().__init__(f"project not found: {ref}")


class InvalidReferenceError(ValueError):
    """A reference argument is not an integer."""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"invalid reference '{text}'")


def parse_ref(text: str) -> int:
    """Parse a ref or ID argument.

    Raises:
        InvalidReferenceError: if `text` is not an integer
    """
    try:
        return int(text)
    except ValueError:
        raise InvalidReferenceError(text) from None


def compare_projects(a: Project, b: Project) -> int:
    """Order projects most-recent first.

    - archived projects sort after active ones
    - projects with entries sort by their last entry's start, newest first
    - projects without entries sort after those with entries
    - two projects without entries sort by creation time, newest first
    """
    if a.archived != b.archived:
        return 1 if a.archived else -1

    last_a, last_b = a.last_entry, b.last_entry
    if last_a is None and last_b is None:
        return _cmp(b.created, a.created)
    if last_a is None:
        return 1
    if last_b is None:
        return -1
    return _cmp(last_b.start, last_a.start)


def _cmp(x: datetime, y: datetime) -> int:
    return (x > y) - (x < y)


def sort_projects(projects: list[Project]) -> list[Project]:
    return sorted(projects, key=cmp_to_key(compare_projects))


def compute_refs(ordered: list[Project]) -> dict[int, int]:
    """Map project ID -> ref for an already ordered collection.

    The first MAX_REFS active projects get their position; everything else
    is addressed by its ID.
    """
    refs = {p.id: p.id for p in ordered}
    active = [p for p in ordered if not p.archived]
    for position, project in enumerate(active[:MAX_REFS]):
        refs[project.id] = position
    return refs


@dataclass
class ProjectStore:
    """All projects plus the ID counter.

    Equality looks at the projects only; the counter is rebuilt on every
    load and never persisted.
    """
    projects: list[Project] = field(default_factory=list)
    next_id: int = field(default=0, compare=False)

    def init(self) -> None:
        """Sort projects, seed the ID counter and assign refs."""
        self.projects = sort_projects(self.projects)
        self.next_id = max([ID_FLOOR] + [p.id for p in self.projects])

        refs = compute_refs(self.projects)
        for p in self.projects:
            p.ref = refs[p.id]
        logger.debug(f"Initialized store: {len(self.projects)} project(s), last id {self.next_id}")

    def list_projects(self, include_archived: bool = False) -> list[Project]:
        if include_archived:
            return list(self.projects)
        return [p for p in self.projects if not p.archived]

    def create(self, name: str, now: datetime) -> Project:
        self.next_id += 1
        project = Project(id=self.next_id, name=name, created=now)
        self.projects.append(project)
        logger.info(f"Created project {project.id}: {name}")
        return project

    def remove(self, project: Project) -> None:
        self.projects = [p for p in self.projects if p.id != project.id]
        logger.info(f"Removed project {project.id}: {project.name}")

    def by_ref(self, ref: int) -> Project:
        """Resolve a ref, falling back to a persistent ID.

        Raises:
            NoProjectsError: if the store is empty
            ProjectNotFoundError: if nothing matches
        """
        if not self.projects:
            raise NoProjectsError()
        for p in self.projects:
            if p.ref == ref:
                return p
        for p in self.projects:
            if p.id == ref:
                return p
        raise ProjectNotFoundError(ref)

    def in_progress_project(self) -> Optional[Project]:
        for p in self.projects:
            if p.in_progress:
                return p
        return None

    def to_document(self) -> dict:
        return {"projects": [p.to_dict() for p in self.projects]}

    @classmethod
    def from_document(cls, data: dict) -> 'ProjectStore':
        """Build and initialize a store from a persisted document."""
        store = cls(projects=[Project.from_dict(p) for p in data.get("projects") or []])
        store.init()
        return store
