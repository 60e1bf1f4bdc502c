"""Command-line entry point: ``saru``.

Usage::

    saru create
    saru run 8080
    saru init npm
    saru help
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Callable

from pydantic import ValidationError
from rich.text import Text
from rich.traceback import Traceback

from saru_cli import __version__
from saru_cli.config import Config
from saru_cli.errors import SaruError
from saru_cli.server import run_server
from saru_cli.utils import console, err_console, print_error, print_warning
from saru_cli.workflow import CreateWorkflow

HELP_TEXT = f"""\
saruCanvas CLI v{__version__}
Usage: saru <command> [options]

Commands:
  create        Create a new saruCanvas project
  run [port]    Start the web server, optionally on the given port
  init npm      Create an npm project template
  help          Show this help
  version       Show version information (saru -v)

Examples:
  saru create   Create a new project
  saru run 8080 Start the server on port 8080
"""


def _report_failure(exc: BaseException, debug: bool) -> None:
    print_error(f"Error: {exc}")
    if debug:
        err_console.print_exception()


def cmd_create(args: argparse.Namespace, config: Config) -> int:
    workflow = CreateWorkflow(config)
    try:
        result = asyncio.run(workflow.run())
    except KeyboardInterrupt:
        print_error("Aborted")
        return 130

    if result.error is not None:
        print_error(f"Error: {result.error}")
        if config.debug:
            exc = result.error
            err_console.print(
                Text(f"failed while {result.failed_state.value}: {type(exc).__name__}", style="dim")
            )
            err_console.print(Traceback.from_exception(type(exc), exc, exc.__traceback__))
    return result.exit_code


def cmd_run(args: argparse.Namespace, config: Config) -> int:
    try:
        asyncio.run(run_server(args.port))
    except SaruError as exc:
        _report_failure(exc, config.debug)
        return 1
    return 0


def cmd_init(args: argparse.Namespace, config: Config) -> int:
    print_warning(
        "In development: create vue, react and vite projects with sarucanvas embedded"
    )
    return 0


def cmd_help(args: argparse.Namespace, config: Config) -> int:
    console.print(HELP_TEXT, highlight=False, markup=False)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="saru",
        description="saruCanvas command-line tool",
    )
    parser.add_argument(
        "-v", "--version",
        action="version",
        version=__version__,
        help="Show version information",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Show tracebacks on failure",
    )

    subparsers = parser.add_subparsers(dest="command")

    create = subparsers.add_parser("create", help="Create a new saruCanvas project")
    create.set_defaults(handler=cmd_create)

    run = subparsers.add_parser("run", help="Start the web server")
    run.add_argument("port", nargs="?", default=None, help="Port (default: saru.json, then 2017)")
    run.set_defaults(handler=cmd_run)

    init = subparsers.add_parser("init", help="Create a project template")
    init.add_argument("template", choices=["npm"], help="Template kind")
    init.set_defaults(handler=cmd_init)

    help_cmd = subparsers.add_parser("help", help="Show help")
    help_cmd.set_defaults(handler=cmd_help)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``saru`` and ``python -m saru_cli``."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = Config.from_env()
    except (ValidationError, ValueError) as exc:
        print_error(f"Error: invalid configuration: {exc}")
        sys.exit(1)
    if args.debug:
        config.debug = True

    handler: Callable[[argparse.Namespace, Config], int] = getattr(args, "handler", cmd_help)
    try:
        code = handler(args, config)
    except Exception as exc:
        _report_failure(exc, config.debug)
        code = 1
    sys.exit(code)


if __name__ == "__main__":
    main()
