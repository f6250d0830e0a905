"""Terminal output primitives for the toolchain CLI.

All user-facing output goes through this module. Informational messages are
rendered on stdout through a Rich console; errors are rendered on stderr with
an ``ERROR:`` prefix. Messages are printed verbatim: markup and automatic
highlighting are disabled so paths and URLs containing brackets survive
unchanged.

Examples
--------
>>> from docsite.console import ui_info
>>> ui_info("Installing dependencies from requirements.txt ...")
Installing dependencies from requirements.txt ...
"""

from __future__ import annotations

from rich.console import Console

# ``file`` is left unset so both consoles follow the current sys.stdout /
# sys.stderr, which keeps output capturable in tests.
_STDOUT = Console(soft_wrap=True, highlight=False)
_STDERR = Console(stderr=True, soft_wrap=True, highlight=False)

USAGE = """\
Usage:
  docsite <command> [options]

Commands:
  build
      Create venv, install requirements, run mkdocs build

  run [--build]
      Run mkdocs serve
      --build   Run build before serving

  clean
      Remove site/, .cache/, and .venv/

  lint
      Ensure autocorrect exists (download if missing), then run autocorrect check

Examples:
  docsite build
  docsite run
  docsite run --build
  docsite clean
  docsite lint
"""


def ui_info(message: str) -> None:
    """Print an informational line to stdout."""
    _STDOUT.print(message, markup=False)


def ui_rule(title: str) -> None:
    r"""Print a workflow header such as ``==> BUILD``.

    Parameters
    ----------
    title : str
        Workflow name; rendered upper-case after an arrow marker.
    """
    _STDOUT.print(f"==> {title.upper()}", style="bold", markup=False)


def ui_success(message: str) -> None:
    """Print a completion line to stdout in green."""
    _STDOUT.print(message, style="green", markup=False)


def ui_error(message: str) -> None:
    """Print an error line to stderr, prefixed with ``ERROR:``."""
    _STDERR.print(f"ERROR: {message}", style="bold red", markup=False)


def print_usage() -> None:
    """Print the CLI usage text to stdout."""
    _STDOUT.print(USAGE, markup=False, end="")


__all__ = ["USAGE", "print_usage", "ui_error", "ui_info", "ui_rule", "ui_success"]
