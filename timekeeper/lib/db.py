"""
Persistence adapter: the store as one JSON document on disk.

The file is read once at startup and written once at exit. There is no
locking and no atomic rename; the last writer wins. The document is
checked against `schemas/db.schema.json` on the way in and on the way out.
"""

import json
import logging
from pathlib import Path
from typing import Optional

from jsonschema.exceptions import best_match
from jsonschema.validators import validator_for

from timekeeper.lib.store import ProjectStore

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).parent.parent / "schemas" / "db.schema.json"
ENCODING = "utf-8"

_validator = None


class StoreError(Exception):
    """The store could not be read or written."""

    def __init__(self, action: str, path: Path, cause: Exception):
        self.action = action
        self.path = path
        self.cause = cause
        super().__init__(f"{action} {path}: {cause}")


class DocumentError(Exception):
    """The store document doesn't match the schema.

    When the problem is inside a project, `project_index` is its position
    in the document and `project_id` its id (if it has a readable one).
    """

    def __init__(self, message: str, project_index: Optional[int] = None,
                 project_id: Optional[int] = None, field: Optional[str] = None):
        self.project_index = project_index
        self.project_id = project_id
        self.field = field

        where = "document"
        if project_index is not None:
            where = f"project #{project_index}"
            if project_id is not None:
                where += f" (id={project_id})"
        if field:
            where += f" {field}"
        super().__init__(f"{where}: {message}")


def _get_validator():
    """Load the store schema once."""
    global _validator
    if _validator is None:
        schema = json.loads(SCHEMA_PATH.read_text(encoding=ENCODING))
        cls = validator_for(schema)
        cls.check_schema(schema)
        _validator = cls(schema)
    return _validator


def check_document(data) -> None:
    """Check a store document, pointing at the offending project if there is one.

    Raises:
        DocumentError: if the document doesn't match the schema
    """
    error = best_match(_get_validator().iter_errors(data))
    if error is None:
        return

    path = list(error.absolute_path)
    if len(path) < 2 or path[0] != "projects" or not isinstance(path[1], int):
        raise DocumentError(error.message, field=".".join(str(p) for p in path) or None)

    index = path[1]
    project = data["projects"][index]
    project_id = project.get("id") if isinstance(project, dict) else None
    if not isinstance(project_id, int) or isinstance(project_id, bool):
        project_id = None
    field = ".".join(str(p) for p in path[2:]) or None
    raise DocumentError(error.message, project_index=index, project_id=project_id, field=field)


def read_db(path: Path) -> ProjectStore:
    """Load the store from `path`.

    A missing file is an empty store whose first project gets ID 1.

    Raises:
        StoreError: if the file can't be read, isn't UTF-8 JSON, or fails the schema
    """
    try:
        text = path.read_text(encoding=ENCODING)
    except FileNotFoundError:
        logger.debug(f"No store at {path}, starting empty")
        return ProjectStore()
    except (OSError, UnicodeDecodeError) as e:
        raise StoreError("read", path, e) from e

    try:
        data = json.loads(text)
        check_document(data)
        store = ProjectStore.from_document(data)
    except (json.JSONDecodeError, DocumentError, ValueError) as e:
        raise StoreError("read", path, e) from e

    logger.debug(f"Loaded {len(store.projects)} project(s) from {path}")
    return store


def write_db(store: ProjectStore, path: Path) -> None:
    """Write the store to `path`, creating parent directories as needed.

    Raises:
        StoreError: if the document is invalid or the write fails
    """
    data = store.to_document()
    try:
        check_document(data)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding=ENCODING)
    except (DocumentError, OSError) as e:
        raise StoreError("write", path, e) from e

    logger.debug(f"Wrote {len(store.projects)} project(s) to {path}")
