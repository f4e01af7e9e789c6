"""
command-line interface for switchenv.

a child process cannot change its parent shell's environment, so commands
that activate an environment print `export` lines meant for `eval`:

    eval "$(switchenv use myenv)"
"""

from __future__ import annotations

import argparse
import json
import logging
import shlex
import sys
from collections.abc import Mapping, Sequence
from typing import TextIO

from . import __version__
from .activation import WRITTEN_VARIABLES
from .config import Config
from .models import EnvironmentDescriptor
from .project import ProjectRootUnavailableError
from .switcher import EnvironmentSwitcher, FormatItem, OnChoice


def create_parser() -> argparse.ArgumentParser:
    """
    create the argument parser for the cli.

    returns: `argparse.ArgumentParser`
        configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog="switchenv",
        description="discover and activate python environments",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
  switchenv list                    # list every known environment
  switchenv list --json             # output as json
  switchenv current                 # show the inherited environment
  eval "$(switchenv use myenv)"     # activate the closest match to 'myenv'
  eval "$(switchenv auto)"          # activate the current project's environment
  eval "$(switchenv pick)"          # choose interactively
        """,
    )
    _ = parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    _ = parser.add_argument(
        "--debug",
        action="store_true",
        help="enable debug logging for troubleshooting",
    )

    subparsers = parser.add_subparsers(dest="command", help="available commands")

    list_parser = subparsers.add_parser("list", help="list candidate environments")
    _ = list_parser.add_argument(
        "--root",
        type=str,
        help="venvs directory to scan instead of the configured one",
    )
    _ = list_parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="output in json format (default: text)",
    )

    current_parser = subparsers.add_parser("current", help="show the active environment")
    _ = current_parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="output in json format (default: text)",
    )

    use_parser = subparsers.add_parser("use", help="activate the environment matching a name")
    _ = use_parser.add_argument("query", help="environment name, path, or fragment of either")

    _ = subparsers.add_parser("auto", help="activate the current project's environment")
    _ = subparsers.add_parser("pick", help="choose an environment interactively")

    return parser


def format_exports(environ: Mapping[str, str]) -> str:
    """
    render the variables an activation writes as posix shell exports.

    arguments:
        `environ: Mapping[str, str]`
            environment after activation

    returns: `str`
        one `export NAME=value` line per written variable
    """
    return "\n".join(
        f"export {name}={shlex.quote(environ.get(name, ''))}" for name in WRITTEN_VARIABLES
    )


def prompt_selection(
    items: list[EnvironmentDescriptor],
    format_item: FormatItem,
    on_choice: OnChoice,
    stdin: TextIO | None = None,
    stderr: TextIO | None = None,
) -> None:
    """
    ask for a choice on the terminal.

    the menu goes to stderr so stdout stays clean for `eval`. an empty
    answer, end of input, or an out-of-range number cancels.

    arguments:
        `items: list[EnvironmentDescriptor]`
            environments to choose from
        `format_item: FormatItem`
            renders one environment
        `on_choice: OnChoice`
            receives the chosen environment, or none on cancellation
    """
    in_stream = stdin if stdin is not None else sys.stdin
    out_stream = stderr if stderr is not None else sys.stderr

    if not items:
        print("no environments found", file=out_stream)
        on_choice(None)
        return

    for i, item in enumerate(items, 1):
        print(f"[{i}] {format_item(item)}", file=out_stream)
    print("select python venv: ", end="", file=out_stream, flush=True)

    answer = in_stream.readline().strip()
    if not answer.isdigit() or not 1 <= int(answer) <= len(items):
        on_choice(None)
        return
    on_choice(items[int(answer) - 1])


def handle_list(args: argparse.Namespace, switcher: EnvironmentSwitcher) -> int:
    """
    handle the list command.

    returns: `int`
        exit code
    """
    root_raw = getattr(args, "root", None)
    root = str(root_raw) if root_raw is not None else None  # pyright: ignore[reportAny]
    json_output = bool(getattr(args, "json_output", False))

    current = switcher.init()
    candidates = switcher.list_candidates(root)

    if json_output:
        print(json.dumps([c.to_dict() for c in candidates], indent=2))
        return 0

    if not candidates:
        print("no environments found")
        return 0

    for candidate in candidates:
        marker = "*" if current is not None and candidate.path == current.path else " "
        print(f"{marker} {candidate.format()}")
    return 0


def handle_current(args: argparse.Namespace, switcher: EnvironmentSwitcher) -> int:
    """
    handle the current command.

    returns: `int`
        exit code
    """
    json_output = bool(getattr(args, "json_output", False))
    current = switcher.init()

    if json_output:
        print(json.dumps(current.to_dict() if current is not None else None, indent=2))
    elif current is None:
        print("no active environment")
    else:
        print(current.format())
    return 0


def handle_use(args: argparse.Namespace, switcher: EnvironmentSwitcher) -> int:
    """
    handle the use command.

    returns: `int`
        exit code (0 = activated, 1 = no match)
    """
    query = str(getattr(args, "query", ""))
    _ = switcher.init()

    if switcher.activate_by_name(query) is None:
        print(f"switchenv: error: no environment matches '{query}'", file=sys.stderr)
        return 1

    print(format_exports(switcher.environ))
    return 0


def handle_auto(_args: argparse.Namespace, switcher: EnvironmentSwitcher) -> int:
    """
    handle the auto command.

    returns: `int`
        exit code (0 = done, 2 = project root lookup unavailable)
    """
    _ = switcher.init()

    try:
        activated = switcher.auto_resolve()
    except ProjectRootUnavailableError as e:
        print(f"switchenv: error: {e}", file=sys.stderr)
        return 2

    if activated is not None:
        print(format_exports(switcher.environ))
    return 0


def handle_pick(_args: argparse.Namespace, switcher: EnvironmentSwitcher) -> int:
    """
    handle the pick command.

    returns: `int`
        exit code
    """
    before = switcher.init()
    switcher.pick(prompt_selection)

    if switcher.get_current() is not before:
        print(format_exports(switcher.environ))
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """
    run the cli main entry point.

    arguments:
        `argv: Sequence[str] | None`
            command-line arguments (default: sys.argv[1:])

    returns: `int`
        exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    cmd_raw = getattr(args, "command", None)
    command = str(cmd_raw) if cmd_raw is not None else None  # pyright: ignore[reportAny]

    if not command:
        parser.print_help()
        return 2

    if bool(getattr(args, "debug", False)):
        logging.basicConfig(
            level=logging.DEBUG,
            format="[%(name)s] %(message)s",
        )

    switcher = EnvironmentSwitcher(Config.load())

    if command == "list":
        return handle_list(args, switcher)
    elif command == "current":
        return handle_current(args, switcher)
    elif command == "use":
        return handle_use(args, switcher)
    elif command == "auto":
        return handle_auto(args, switcher)
    elif command == "pick":
        return handle_pick(args, switcher)
    else:
        parser.print_help()
        return 2


if __name__ == "__main__":
    sys.exit(main())
