"""Command-line front-end for the task tracker."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from . import __version__
from .config import PmSettings
from .editor import EditorError, EditorLauncher
from .errors import AlreadyExistsError, NotFoundError, ParseError, PmError
from .paths import find_project_root
from .registry import TaskRegistry
from .render import TerminalRenderer
from .storage import Status

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Configure root logging for the command-line tool."""

    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _task_id(value: str) -> int:
    try:
        task_id = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid task id {value!r}") from exc
    if task_id < 1:
        raise argparse.ArgumentTypeError(f"invalid task id {value!r}")
    return task_id


def _status(value: str) -> Status:
    try:
        status = Status.parse(value)
    except ParseError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc
    if status is Status.NONE:
        raise argparse.ArgumentTypeError("None is not a status a task can be moved to")
    return status


def _project_root(args: argparse.Namespace) -> Path:
    return find_project_root(args.directory, args.settings.root_marker)


def _renderer(args: argparse.Namespace) -> TerminalRenderer:
    color = not args.no_color and args.settings.use_color(sys.stdout.isatty())
    return TerminalRenderer(sys.stdout, color=color)


def _open_registry(args: argparse.Namespace) -> TaskRegistry:
    registry = TaskRegistry.load(_project_root(args))
    if registry.pending is not None:
        print(
            f"warning: {registry.pending.describe()}; run 'pm check' and reconcile by hand",
            file=sys.stderr,
        )
    return registry


def cmd_init(args: argparse.Namespace) -> int:
    root = _project_root(args)
    try:
        index = TaskRegistry.initialize(root, args.name, force=args.force)
    except AlreadyExistsError:
        print("index already exists, not overwriting", file=sys.stderr)
        return 1
    print(f"initialized project {index.meta.name!r} in {root}")
    return 0


def cmd_add(args: argparse.Namespace) -> int:
    registry = _open_registry(args)
    registry.create_task(args.entry)
    _renderer(args).board(registry)
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    registry = _open_registry(args)
    renderer = _renderer(args)
    if args.task_id is None:
        renderer.board(registry)
        return 0

    task = registry.get_task(args.task_id)
    if task is None:
        raise NotFoundError(f"task {args.task_id} not found in index")
    renderer.task(task, registry.detail(task.id))
    return 0


def cmd_move(args: argparse.Namespace) -> int:
    registry = _open_registry(args)
    registry.move_task(args.task_id, args.status)
    _renderer(args).board(registry)
    return 0


def cmd_delete(args: argparse.Namespace) -> int:
    registry = _open_registry(args)
    registry.delete_task(args.task_id)
    _renderer(args).board(registry)
    return 0


def cmd_edit(args: argparse.Namespace) -> int:
    registry = _open_registry(args)
    if registry.get_task(args.task_id) is None:
        raise NotFoundError(f"task {args.task_id} not found in index")

    launcher = EditorLauncher(args.settings.editor)
    launcher.edit(registry.detail_path(args.task_id))
    # The document must still parse after a free-form edit.
    registry.detail(args.task_id)
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    registry = _open_registry(args)
    problems = registry.check_consistency()
    if not problems:
        print(f"{len(registry.tasks)} task(s), index and detail documents agree")
        return 0
    for problem in problems:
        print(problem)
    return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pm", description="File-backed project task tracker")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-C",
        "--directory",
        type=Path,
        default=Path.cwd(),
        help="Directory to start searching for the project root from",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI styling")
    sub = parser.add_subparsers(dest="cmd")

    p_init = sub.add_parser("init", help="Create the task index for this project")
    p_init.add_argument("-n", "--name", required=True)
    p_init.add_argument("-f", "--force", action="store_true", help="Overwrite an existing index")
    p_init.set_defaults(func=cmd_init)

    p_add = sub.add_parser("add", help="Add a task; words like :tag: become tags")
    p_add.add_argument("entry", nargs="+")
    p_add.set_defaults(func=cmd_add)

    p_show = sub.add_parser("show", help="Show the board, or one task in full")
    p_show.add_argument("task_id", nargs="?", type=_task_id)
    p_show.set_defaults(func=cmd_show)

    p_move = sub.add_parser("move", help="Move a task to Todo, Doing or Done")
    p_move.add_argument("task_id", type=_task_id)
    p_move.add_argument("status", type=_status)
    p_move.set_defaults(func=cmd_move)

    p_start = sub.add_parser("start", help="Move a task to Doing")
    p_start.add_argument("task_id", type=_task_id)
    p_start.set_defaults(func=cmd_move, status=Status.DOING)

    p_finish = sub.add_parser("finish", help="Move a task to Done")
    p_finish.add_argument("task_id", type=_task_id)
    p_finish.set_defaults(func=cmd_move, status=Status.DONE)

    p_delete = sub.add_parser("delete", help="Delete a task and its detail document")
    p_delete.add_argument("task_id", type=_task_id)
    p_delete.set_defaults(func=cmd_delete)

    p_edit = sub.add_parser("edit", help="Open a task's detail document in $EDITOR")
    p_edit.add_argument("task_id", type=_task_id)
    p_edit.set_defaults(func=cmd_edit)

    p_check = sub.add_parser("check", help="Report disagreements between index and details")
    p_check.set_defaults(func=cmd_check)

    return parser


def main(argv: list[str] | None = None) -> int:
    try:
        settings = PmSettings()
    except ValidationError as exc:
        print(f"error: invalid configuration: {exc}", file=sys.stderr)
        return 1
    configure_logging(settings.log_level)

    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return 1
    args.settings = settings

    try:
        return args.func(args)
    except (PmError, EditorError) as exc:
        logger.debug("Command %s failed", args.cmd, exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
