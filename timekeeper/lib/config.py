"""
Configuration for timekeeper.

Settings come from an optional .env file in the working directory,
overridden by the process environment.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from . import envparse

logger = logging.getLogger(__name__)

ENV_PREFIX = "TIMEKEEPER_"
DEFAULT_LIST_LIMIT = 15
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Semantic role -> rich style
DEFAULT_STYLES = {
    "header": "bold color(15)",
    "muted": "bold color(246)",
    "ref": "bold color(14)",
    "started": "bold color(10)",
    "stopped": "bold color(9)",
}


def default_db_path() -> Path:
    return Path.home() / ".timekeeper" / "db.json"


@dataclass
class Settings:
    """Runtime configuration."""
    db_path: Path = field(default_factory=default_db_path)
    log_level: str = "WARNING"
    list_limit: int = DEFAULT_LIST_LIMIT
    styles: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_STYLES))


def load_dotenv(path: Path) -> dict[str, str]:
    """Load a .env file, returning {} if it is missing or unreadable."""
    try:
        return envparse.load_env(path)
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as e:
        logger.warning(f"Ignoring {path}: {e}")
        return {}


def load_settings(environ: Optional[Mapping[str, str]] = None,
                  dotenv_path: Optional[Path] = None) -> Settings:
    """Build Settings from .env values overlaid with the environment."""
    if environ is None:
        environ = os.environ
    if dotenv_path is None:
        dotenv_path = Path.cwd() / ".env"

    env = {**load_dotenv(dotenv_path), **environ}
    settings = Settings()

    db = env.get(f"{ENV_PREFIX}DB")
    if db:
        settings.db_path = Path(db).expanduser()

    level = env.get(f"{ENV_PREFIX}LOG_LEVEL", "").upper()
    if level:
        if level in VALID_LOG_LEVELS:
            settings.log_level = level
        else:
            logger.warning(f"Unknown {ENV_PREFIX}LOG_LEVEL '{level}', using {settings.log_level}")

    limit = env.get(f"{ENV_PREFIX}LIST_LIMIT")
    if limit:
        try:
            settings.list_limit = int(limit)
        except ValueError:
            logger.warning(f"Invalid {ENV_PREFIX}LIST_LIMIT '{limit}', using {DEFAULT_LIST_LIMIT}")
        else:
            if settings.list_limit < 1:
                logger.warning(f"Invalid {ENV_PREFIX}LIST_LIMIT '{limit}', using {DEFAULT_LIST_LIMIT}")
                settings.list_limit = DEFAULT_LIST_LIMIT

    for role in DEFAULT_STYLES:
        style = env.get(f"{ENV_PREFIX}STYLE_{role.upper()}")
        if style:
            settings.styles[role] = style

    return settings
