"""Release archive download, extraction and binary installation.

The steps used by :meth:`docsite.toolchain.locator.ToolLocator.ensure_available`
to install an external executable from a release tarball:

1. :func:`download_archive` fetches the archive with the first installed
   transport (``curl``, then ``wget``).
2. :func:`extract_archive` unpacks it next to the download.
3. :func:`find_binary` locates the executable, tolerating archives that nest
   it in a version directory.
4. :func:`install_binary` moves it into the project tool directory and marks
   it executable.

Each step raises a dedicated :class:`docsite.exceptions.AppError` subclass.
"""

from __future__ import annotations

import logging
import shutil
import stat
import subprocess
import tarfile
from collections import deque
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Sequence

from docsite.exceptions import (
    ArchiveExtractionError,
    BinaryNotFoundInArchiveError,
    DownloadFailedError,
    DownloadUnavailableError,
)

logger = logging.getLogger(__name__)

_EXECUTABLE_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


@dataclass(frozen=True)
class Transport:
    """A command-line HTTP client able to save a URL to a file.

    Parameters
    ----------
    name : str
        Executable name looked up on ``PATH``.
    build_command : Callable[[str, str, Path, int], list[str]]
        Builds the argv from ``(executable, url, destination, retries)``.
    """

    name: str
    build_command: Callable[[str, str, Path, int], list[str]]


def _curl_command(executable: str, url: str, dest: Path, retries: int) -> list[str]:
    return [
        executable,
        "-fL",
        "--retry",
        str(retries),
        "--retry-delay",
        "1",
        "-o",
        str(dest),
        url,
    ]


def _wget_command(executable: str, url: str, dest: Path, retries: int) -> list[str]:
    return [executable, "--tries", str(retries), "-O", str(dest), url]


TRANSPORTS: tuple[Transport, ...] = (
    Transport("curl", _curl_command),
    Transport("wget", _wget_command),
)


def select_transport(
    transports: Sequence[Transport] = TRANSPORTS,
) -> tuple[Transport, str]:
    """Return the first transport found on ``PATH`` with its resolved path.

    Raises
    ------
    DownloadUnavailableError
        If none of the transports is installed.
    """
    for transport in transports:
        executable = shutil.which(transport.name)
        if executable:
            return transport, executable
    names = " nor ".join(t.name for t in transports)
    raise DownloadUnavailableError(
        f"Neither {names} is available to download files.",
        context={"transports": [t.name for t in transports]},
    )


def download_archive(
    url: str,
    dest: Path,
    *,
    retries: int,
    transports: Sequence[Transport] = TRANSPORTS,
) -> Path:
    r"""Download ``url`` to ``dest`` with the first available transport.

    Parameters
    ----------
    url : str
        Release archive URL.
    dest : Path
        File the archive is written to. Its directory must exist.
    retries : int
        Retry budget handed to the transport.
    transports : Sequence[Transport], optional
        Transports in preference order.

    Returns
    -------
    Path
        ``dest``.

    Raises
    ------
    DownloadUnavailableError
        If no transport is installed.
    DownloadFailedError
        If the transport exits non-zero, cannot be launched, or leaves no file.
    """
    transport, executable = select_transport(transports)
    argv = transport.build_command(executable, url, dest, retries)
    logger.info(f"Downloading {url} with {transport.name}")
    context = {"url": url, "transport": transport.name}
    try:
        result = subprocess.run(argv, check=False)
    except OSError as error:
        raise DownloadFailedError(
            f"Could not run {transport.name}: {error}", context=context
        ) from error
    if result.returncode != 0:
        raise DownloadFailedError(
            f"Download of {url} failed ({transport.name} exited with "
            f"status {result.returncode}).",
            context={**context, "returncode": result.returncode},
        )
    if not dest.is_file():
        raise DownloadFailedError(
            f"Download of {url} produced no file.", context=context
        )
    return dest


def extract_archive(archive: Path, dest_dir: Path) -> None:
    """Unpack a tar archive (any compression) into ``dest_dir``.

    Members are filtered with the ``data`` extraction filter, which rejects
    absolute paths, parent traversal and device files.

    Raises
    ------
    ArchiveExtractionError
        If the archive is corrupt, not a tar file, or contains unsafe members.
    """
    try:
        with tarfile.open(archive, "r:*") as tf:
            tf.extractall(dest_dir, filter="data")
    except (tarfile.TarError, OSError) as error:
        raise ArchiveExtractionError(
            f"Failed to extract '{archive.name}': {error}",
            context={"archive": str(archive)},
        ) from error


def find_binary(root: Path, name: str, *, max_depth: int) -> Path:
    r"""Locate a regular file called ``name`` under ``root``.

    The exact path ``root / name`` is checked first. Otherwise the tree is
    searched breadth-first, so shallower matches win, and entries within a
    directory are visited in sorted order. Depth counts path components
    relative to ``root``: ``root/a/b/name`` has depth 3. Directories are not
    descended beyond ``max_depth``.

    Parameters
    ----------
    root : Path
        Directory to search.
    name : str
        Filename to match exactly.
    max_depth : int
        Maximum depth of a matching file.

    Returns
    -------
    Path
        The first match.

    Raises
    ------
    BinaryNotFoundInArchiveError
        If no match exists within ``max_depth``.

    Examples
    --------
    >>> from pathlib import Path
    >>> find_binary(Path("/tmp/extracted"), "autocorrect", max_depth=3)  # doctest: +SKIP
    PosixPath('/tmp/extracted/autocorrect-v2/autocorrect')
    """
    direct = root / name
    if direct.is_file():
        return direct

    queue: deque[tuple[Path, int]] = deque([(root, 0)])
    while queue:
        directory, depth = queue.popleft()
        try:
            entries = sorted(directory.iterdir())
        except OSError:
            continue
        for entry in entries:
            entry_depth = depth + 1
            if entry.is_symlink():
                continue
            if entry.is_file() and entry.name == name:
                return entry
            if entry.is_dir() and entry_depth < max_depth:
                queue.append((entry, entry_depth))

    raise BinaryNotFoundInArchiveError(
        f"Failed to find '{name}' binary in downloaded archive.",
        context={"root": str(root), "max_depth": max_depth},
    )


def install_binary(source: Path, dest: Path) -> Path:
    """Move ``source`` to ``dest`` and add execute permission.

    An existing file at ``dest`` is replaced.
    """
    dest.parent.mkdir(parents=True, exist_ok=True)
    if dest.exists() or dest.is_symlink():
        dest.unlink()
    shutil.move(str(source), str(dest))
    dest.chmod(dest.stat().st_mode | _EXECUTABLE_BITS)
    logger.info(f"Installed {dest}")
    return dest


__all__ = [
    "TRANSPORTS",
    "Transport",
    "download_archive",
    "extract_archive",
    "find_binary",
    "install_binary",
    "select_transport",
]
