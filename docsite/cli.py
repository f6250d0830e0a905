"""Command-line entrypoint and command dispatcher.

Parses a single top-level command (``build``, ``run``, ``clean``, ``lint``,
``help``) plus the options ``run`` accepts, and routes it to
:class:`docsite.workflows.SiteWorkflows`. Every failure surfaces as an
:class:`docsite.exceptions.AppError`, printed to stderr and mapped to exit
status 1.

Examples
--------
>>> from docsite.cli import main
>>> main(["help"])  # doctest: +SKIP
0
>>> main(["deploy"])  # doctest: +SKIP
1
"""

from __future__ import annotations

import argparse
import enum
import logging
import os
import sys
from dataclasses import dataclass
from typing import Callable, Sequence

from docsite.config import (
    DEFAULT_LOG_LEVEL,
    LOG_FORMAT,
    LOG_LEVEL_ENV,
    SiteConfig,
    load_config,
)
from docsite.console import print_usage, ui_error, ui_rule
from docsite.exceptions import AppError, UnknownCommandError, UnknownFlagError
from docsite.workflows import SiteWorkflows

logger = logging.getLogger(__name__)

COMMANDS: tuple[str, ...] = ("build", "run", "clean", "lint", "help")
HELP_ALIASES = frozenset({"help", "-h", "--help"})
EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


class DispatchState(enum.Enum):
    """Lifecycle of a single dispatch."""

    IDLE = "idle"
    PARSING = "parsing"
    DISPATCHED = "dispatched"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class ParsedCommand:
    """A recognised command and its options."""

    name: str
    build_first: bool = False


def configure_logging(level: str | None = None) -> None:
    r"""Configure the root logger for the CLI.

    All existing root handlers are replaced by a single stderr handler using
    :data:`docsite.config.LOG_FORMAT`. The level comes from ``level``, then
    the ``DOCSITE_LOG_LEVEL`` environment variable, then ``WARNING``.
    Unknown level names fall back to ``WARNING``.

    Parameters
    ----------
    level : str | None, optional
        Logging level name such as ``"DEBUG"`` or ``"INFO"``.
    """
    name = (level or os.environ.get(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).upper()
    resolved = getattr(logging, name, None)
    if not isinstance(resolved, int):
        resolved = getattr(logging, DEFAULT_LOG_LEVEL)
    for h in logging.root.handlers[:]:
        logging.root.removeHandler(h)
    logging.basicConfig(
        level=resolved,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def _run_option_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docsite run", add_help=False, allow_abbrev=False, exit_on_error=False
    )
    parser.add_argument("--build", action="store_true")
    return parser


def parse_run_options(args: Sequence[str]) -> bool:
    """Return whether ``run`` was asked to build first.

    Raises
    ------
    UnknownFlagError
        For any argument other than ``--build``.
    """
    try:
        namespace, extra = _run_option_parser().parse_known_args(list(args))
    except argparse.ArgumentError as error:
        raise UnknownFlagError(
            f"Unknown option for run: {error.argument_name or args[0]}",
            context={"args": list(args)},
        ) from error
    if extra:
        raise UnknownFlagError(
            f"Unknown option for run: {extra[0]}", context={"args": list(args)}
        )
    return bool(namespace.build)


def parse_command(argv: Sequence[str]) -> ParsedCommand:
    """Turn a non-empty argument list into a :class:`ParsedCommand`.

    Arguments after ``build``, ``clean`` and ``lint`` are ignored.

    Raises
    ------
    UnknownCommandError
        If the first argument is not a known command.
    UnknownFlagError
        If ``run`` receives an unsupported option.
    """
    command, rest = argv[0], list(argv[1:])
    if command in HELP_ALIASES:
        return ParsedCommand("help")
    if command not in COMMANDS:
        raise UnknownCommandError(
            f"Unknown command: {command}", context={"command": command}
        )
    if command == "run":
        return ParsedCommand("run", build_first=parse_run_options(rest))
    if rest:
        logger.debug(f"Ignoring extra arguments for {command}: {rest}")
    return ParsedCommand(command)


class Dispatcher:
    """Route one command line to a workflow and report an exit status.

    Parameters
    ----------
    config : SiteConfig
        Shared configuration.
    workflows : SiteWorkflows | None, optional
        Workflow implementation; built from ``config`` when omitted.
    """

    def __init__(
        self, config: SiteConfig, workflows: SiteWorkflows | None = None
    ) -> None:
        self.config = config
        self.workflows = workflows or SiteWorkflows(config)
        self.state = DispatchState.IDLE

    def _handler(self, command: ParsedCommand) -> Callable[[], object]:
        handlers: dict[str, Callable[[], object]] = {
            "build": self.workflows.build,
            "run": lambda: self.workflows.run(build_first=command.build_first),
            "clean": self.workflows.clean,
            "lint": self.workflows.lint,
        }
        return handlers[command.name]

    def _fail(self, code: int = EXIT_FAILURE) -> int:
        self.state = DispatchState.FAILED
        return code

    def dispatch(self, argv: Sequence[str]) -> int:
        r"""Parse ``argv`` and run the selected workflow.

        Parameters
        ----------
        argv : Sequence[str]
            Command-line arguments without the program name.

        Returns
        -------
        int
            0 on success (including ``help``), 1 on any failure, 130 when
            interrupted outside the server.
        """
        self.state = DispatchState.PARSING
        if not argv:
            print_usage()
            return self._fail()
        try:
            command = parse_command(argv)
        except UnknownCommandError as error:
            ui_error(error.message)
            print_usage()
            return self._fail()
        except UnknownFlagError as error:
            # Only ``run`` takes options; its header precedes the rejection.
            ui_rule(argv[0])
            ui_error(error.message)
            return self._fail()

        if command.name == "help":
            print_usage()
            self.state = DispatchState.SUCCEEDED
            return EXIT_OK

        self.state = DispatchState.DISPATCHED
        try:
            self._handler(command)()
        except AppError as error:
            logger.debug(f"{command.name} failed: {error.to_dict()}")
            ui_error(error.message)
            return self._fail()
        except KeyboardInterrupt:
            ui_error("Interrupted.")
            return self._fail(EXIT_INTERRUPTED)
        self.state = DispatchState.SUCCEEDED
        return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI and return its exit status."""
    configure_logging()
    args = sys.argv[1:] if argv is None else list(argv)
    return Dispatcher(load_config()).dispatch(args)


def entry_point() -> None:
    """Console-script entrypoint; exits the process with :func:`main`'s status."""
    raise SystemExit(main())


__all__ = [
    "COMMANDS",
    "DispatchState",
    "Dispatcher",
    "ParsedCommand",
    "configure_logging",
    "entry_point",
    "main",
    "parse_command",
    "parse_run_options",
]
