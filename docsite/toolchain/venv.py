"""Virtual environment path helpers.

Helpers for resolving platform-specific paths inside a Python virtual
environment. These functions are side-effect free and return Path objects
or plain mappings.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Mapping


def get_venv_bin_dir(venv_path: Path) -> Path:
    """Return the platform-specific binary directory inside a virtualenv.

    Parameters
    ----------
    venv_path : Path
        Path to the root of the virtual environment directory.

    Returns
    -------
    Path
        Path to the binaries directory ("Scripts" on Windows, "bin" otherwise).

    Examples
    --------
    >>> from pathlib import Path
    >>> get_venv_bin_dir(Path('/tmp/venv')).as_posix()
    '/tmp/venv/bin'
    """
    return venv_path / ("Scripts" if sys.platform == "win32" else "bin")


def get_venv_python_executable(venv_path: Path) -> Path:
    """Return the python executable path for the given virtualenv."""
    bin_dir = get_venv_bin_dir(venv_path)
    return bin_dir / ("python.exe" if sys.platform == "win32" else "python")


def executable_name(name: str) -> str:
    """Return ``name`` with the platform executable suffix applied."""
    return f"{name}.exe" if sys.platform == "win32" else name


def activated_env(
    venv_path: Path, base: Mapping[str, str] | None = None
) -> dict[str, str]:
    """Return an environment mapping equivalent to an activated virtualenv.

    The venv's binary directory is prepended to ``PATH`` and
    ``VIRTUAL_ENV`` is set, mirroring what ``bin/activate`` does for an
    interactive shell. ``PYTHONHOME`` is dropped as activation does.

    Parameters
    ----------
    venv_path : Path
        Root of the virtual environment.
    base : Mapping[str, str] | None
        Environment to start from; defaults to ``os.environ``.

    Returns
    -------
    dict[str, str]
        A new environment mapping suitable for ``subprocess`` calls.
    """
    env = dict(os.environ if base is None else base)
    env.pop("PYTHONHOME", None)
    bin_dir = str(get_venv_bin_dir(venv_path))
    current = env.get("PATH", "")
    env["PATH"] = bin_dir + (os.pathsep + current if current else "")
    env["VIRTUAL_ENV"] = str(venv_path)
    return env


__all__ = [
    "activated_env",
    "executable_name",
    "get_venv_bin_dir",
    "get_venv_python_executable",
]
