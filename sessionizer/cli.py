"""Command-line front door for sessionizer.

Parses CLI options and dispatches to the project picker or one of the small
history/shell helpers. Selected directories are printed as ``<#Execute#>``
lines for the shell hook to run.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from .config import Settings, load_settings
from .input import open_key_decoder
from .logging_setup import setup_logging
from .picker import SHUTDOWN, Dialogue, DialogueResult, InlineTerminal, MessageChannel, install_interrupt_handler
from .projects.history import expand_directory, record_visit
from .projects.scan import start_project_scan
from .shell import SHELLS, cd_command, init_script, new_tab_command

logger = logging.getLogger(__name__)

COMMANDS = ("find-project", "on-changed-directory", "expand", "init")
SHUTDOWN_EXIT_CODE = 130


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sessionizer",
        description="Pick a project directory with an interactive fuzzy finder and cd into it.",
    )
    subparsers = parser.add_subparsers(dest="command")

    find = subparsers.add_parser("find-project", help="Scan PATH for projects and pick one (default command).")
    find.add_argument("path", nargs="?", default=".", help="Directory to scan. Defaults to current directory.")
    find.add_argument("-n", "--new-tab", action="store_true", help="Open the project in a new terminal tab.")
    find.add_argument("--shell", choices=SHELLS, default="posix", help="Quote the emitted command for this shell.")
    find.add_argument("--no-color", action="store_true", help="Disable color output.")

    changed = subparsers.add_parser("on-changed-directory", help="Record a visit to PATH in the history.")
    changed.add_argument("path")

    expand = subparsers.add_parser("expand", help="Resolve PATH through the visit history and cd there.")
    expand.add_argument("path")
    expand.add_argument("--shell", choices=SHELLS, default="posix", help="Quote the emitted command for this shell.")

    init = subparsers.add_parser("init", help="Print the shell hook that runs emitted commands.")
    init.add_argument("--shell", choices=SHELLS, default="posix")
    return parser


def _normalize_argv(argv: list[str]) -> list[str]:
    """Make ``find-project`` the implicit command."""
    if argv and (argv[0] in COMMANDS or argv[0] in {"-h", "--help"}):
        return argv
    return ["find-project", *argv]


def pick_project(root: Path, settings: Settings, no_color: bool = False) -> DialogueResult:
    """Scan ``root`` in the background and run the picker over its projects."""
    channel = MessageChannel()
    start_project_scan(root, channel, settings.skip_dirs)

    stdin_fd = sys.stdin.fileno()
    terminal = InlineTerminal(stdin_fd=stdin_fd, out_fd=sys.stderr.fileno(), no_color=no_color)
    interrupt_sender = channel.sender()
    restore_interrupt = install_interrupt_handler(interrupt_sender)
    try:
        with terminal.cbreak_mode():
            dialogue = Dialogue(
                channel,
                terminal=terminal,
                keys=open_key_decoder(stdin_fd),
                max_predictions=settings.max_predictions,
                poll_interval=settings.poll_interval_ms / 1000.0,
            ).prompt(settings.prompt)
            return dialogue.interact()
    finally:
        restore_interrupt()
        interrupt_sender.close()


def find_project(path: str, new_tab: bool, shell: str, settings: Settings, no_color: bool = False) -> None:
    root = Path(path)
    if not root.is_dir():
        raise SystemExit(f"Not a directory: {root}")
    if not sys.stdin.isatty():
        raise SystemExit("sessionizer needs an interactive terminal on stdin.")

    result = pick_project(root, settings, no_color=no_color or bool(os.environ.get("NO_COLOR")))
    if result.status == SHUTDOWN:
        raise SystemExit(SHUTDOWN_EXIT_CODE)
    if not result.is_selected:
        return

    directory = getattr(result.item, "path", str(result.item))
    command = new_tab_command(directory, shell) if new_tab else cd_command(directory, shell)
    sys.stdout.write(command + "\n")


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and run the requested command."""
    parser = _build_parser()
    args = parser.parse_args(_normalize_argv(list(sys.argv[1:] if argv is None else argv)))
    settings = load_settings()
    setup_logging(settings.log_level)
    logger.debug("running command %s", args.command)

    if args.command == "init":
        sys.stdout.write(init_script(args.shell))
        return
    if args.command == "on-changed-directory":
        record_visit(args.path)
        return
    if args.command == "expand":
        sys.stdout.write(cd_command(expand_directory(args.path), args.shell) + "\n")
        return
    find_project(args.path, args.new_tab, args.shell, settings, no_color=args.no_color)


if __name__ == "__main__":
    main()
