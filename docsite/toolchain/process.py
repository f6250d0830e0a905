"""Subprocess runner for external tools.

Single point through which the toolchain launches MkDocs, pip and the
linter. Commands always run with the project root as working directory;
their output streams straight to the terminal unless ``quiet`` is set.
The runner never interprets exit codes: it returns them and lets the
caller decide which error to raise.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Mapping, Sequence

logger = logging.getLogger(__name__)


def format_command(args: Sequence[str | Path]) -> str:
    """Return a printable, space-separated form of ``args``."""
    return " ".join(str(a) for a in args)


def run_command(
    args: Sequence[str | Path],
    cwd: Path,
    *,
    env: Mapping[str, str] | None = None,
    quiet: bool = False,
) -> int:
    r"""Run ``args`` to completion and return its exit code.

    Parameters
    ----------
    args : Sequence[str | Path]
        Executable followed by its arguments.
    cwd : Path
        Working directory for the child process.
    env : Mapping[str, str] | None, optional
        Environment for the child; inherits the current one when ``None``.
    quiet : bool, optional
        Discard stdout and stderr of the child. Used for probes such as
        ``--version`` where only the exit code matters.

    Returns
    -------
    int
        The child's exit status.

    Raises
    ------
    FileNotFoundError
        If the executable does not exist.
    PermissionError
        If the executable cannot be launched.

    Examples
    --------
    >>> from pathlib import Path
    >>> run_command(["true"], Path("."))  # doctest: +SKIP
    0
    """
    argv = [str(a) for a in args]
    logger.info(f"Running: {format_command(argv)} (cwd={cwd})")
    stream = subprocess.DEVNULL if quiet else None
    result = subprocess.run(
        argv,
        cwd=cwd,
        env=dict(env) if env is not None else None,
        check=False,
        stdout=stream,
        stderr=stream,
    )
    if result.returncode != 0:
        logger.warning(
            f"Command exited with status {result.returncode}: {format_command(argv)}"
        )
    return result.returncode


__all__ = ["format_command", "run_command"]
