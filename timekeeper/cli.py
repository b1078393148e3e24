#!/usr/bin/env python3
"""tk CLI entrypoint."""

import argparse
import copy
import logging
import sys
from pathlib import Path
from typing import Callable, Optional

from rich.console import Console

from timekeeper.commands import archive as cmd_archive_module
from timekeeper.commands import colors as cmd_colors_module
from timekeeper.commands import current as cmd_current_module
from timekeeper.commands import list as cmd_list_module
from timekeeper.commands import new as cmd_new_module
from timekeeper.commands import remove as cmd_remove_module
from timekeeper.commands import start as cmd_start_module
from timekeeper.commands import week as cmd_week_module
from timekeeper.lib.config import Settings, load_settings
from timekeeper.lib.context import AppContext, local_now
from timekeeper.lib.db import StoreError, read_db, write_db
from timekeeper.lib.render import View, make_console
from timekeeper.lib.store import InvalidReferenceError, NoProjectsError, ProjectNotFoundError
from timekeeper.workflow.session import InvalidTransition

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def positive_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}")
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {n}")
    return n


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='tk', description='Personal time tracker')
    parser.add_argument('--db', help='Path to the store (overrides TIMEKEEPER_DB)')
    parser.add_argument('--verbose', '-v', action='store_true', help='Log debug output to stderr')
    parser.set_defaults(func=cmd_current_module.cmd_current)
    subparsers = parser.add_subparsers(dest='command')

    # tk new
    p_new = subparsers.add_parser('new', help='Create a new project')
    p_new.add_argument('name', nargs='?', help='Project name')
    p_new.set_defaults(func=cmd_new_module.cmd_new)

    # tk start
    p_start = subparsers.add_parser('start', help='Start a project, or create a new one')
    p_start.add_argument('target', nargs='?', help='Ref, ID or new project name (default: ref 0)')
    p_start.set_defaults(func=cmd_start_module.cmd_start)

    # tk stop
    p_stop = subparsers.add_parser('stop', help='Stop the current project')
    p_stop.set_defaults(func=cmd_start_module.cmd_stop)

    # tk s
    p_toggle = subparsers.add_parser('s', help='Context-aware start/stop')
    p_toggle.add_argument('target', nargs='?', help='Ref, ID or new project name (default: ref 0)')
    p_toggle.set_defaults(func=cmd_start_module.cmd_toggle)

    # tk list
    p_list = subparsers.add_parser('list', aliases=['ls', 'l'], help='List projects')
    p_list.add_argument('--all', '-a', action='store_true', help='List all projects')
    p_list.add_argument('--all-archived', '-A', action='store_true',
                        help='List all projects, including archived')
    p_list.add_argument('-n', type=positive_int, help='List the first n projects')
    p_list.set_defaults(func=cmd_list_module.cmd_list)

    # tk archive
    p_archive = subparsers.add_parser('archive', aliases=['a'], help='Archive (or unarchive) a project')
    p_archive.add_argument('refs', nargs='*', help='Refs or IDs (default: 0)')
    p_archive.set_defaults(func=cmd_archive_module.cmd_archive)

    # tk remove
    p_remove = subparsers.add_parser('remove', aliases=['rm', 'r'], help='Remove a project')
    p_remove.add_argument('refs', nargs='*', help='Refs or IDs (default: 0)')
    p_remove.add_argument('--all', '-a', action='store_true', help='Remove all projects')
    p_remove.set_defaults(func=cmd_remove_module.cmd_remove)

    # tk week
    p_week = subparsers.add_parser('week', help='Show a summary of the current week')
    p_week.set_defaults(func=cmd_week_module.cmd_week)

    # tk colors
    p_colors = subparsers.add_parser('colors', help='Print the color palette')
    p_colors.set_defaults(func=cmd_colors_module.cmd_colors)

    return parser


def run(args, settings: Settings, console: Optional[Console] = None,
        now: Callable = local_now) -> int:
    """Load the store, run one command, save if it changed."""
    try:
        store = read_db(settings.db_path)
    except StoreError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    snapshot = copy.deepcopy(store)
    view = View(console or make_console(settings.styles), now)
    app = AppContext.create(settings, store, view, now=now)

    try:
        rc = args.func(args, app)
    except NoProjectsError:
        view.print(cmd_current_module.NO_PROJECTS_MESSAGE)
        return 0
    except (ProjectNotFoundError, InvalidReferenceError, InvalidTransition) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    if rc != 0:
        return rc

    if store == snapshot:
        logger.debug("Store unchanged, not writing")
        return 0

    try:
        write_db(store, settings.db_path)
    except StoreError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = load_settings()
    if args.db:
        settings.db_path = Path(args.db).expanduser()
    configure_logging("DEBUG" if args.verbose else settings.log_level)

    return run(args, settings)


if __name__ == '__main__':
    sys.exit(main())
