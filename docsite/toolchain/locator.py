"""Locate external executables and install them on demand.

:class:`ToolLocator` answers "is this tool available?" by a ranked lookup
(project tool directory first, then the system ``PATH``) and, for tools with
a known release archive, installs a missing tool into the project tool
directory. Once installed, later calls resolve the local copy and perform no
network access.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Iterable, Mapping

from docsite.config import SiteConfig, ToolRelease
from docsite.console import ui_info, ui_success
from docsite.exceptions import InstallationIncompleteError, ToolNotFoundError
from docsite.toolchain import download
from docsite.toolchain.venv import executable_name

logger = logging.getLogger(__name__)


def is_executable_file(path: Path) -> bool:
    """Return True if ``path`` is a regular file the current user may execute."""
    return path.is_file() and os.access(path, os.X_OK)


def find_executable(
    name: str, search_dirs: Iterable[Path], *, use_system_path: bool = True
) -> Path | None:
    r"""Return the first match for ``name`` from an ordered list of locations.

    Each directory in ``search_dirs`` is checked for an exact executable
    path, in order; the system ``PATH`` is consulted last.

    Parameters
    ----------
    name : str
        Command name without platform suffix.
    search_dirs : Iterable[Path]
        Directories to check before ``PATH``, highest priority first.
    use_system_path : bool, optional
        Whether to fall back to ``shutil.which``.

    Returns
    -------
    Path | None
        The resolved executable, or None if it is not resolvable.
    """
    filename = executable_name(name)
    for directory in search_dirs:
        candidate = directory / filename
        if is_executable_file(candidate):
            return candidate
    if use_system_path:
        found = shutil.which(name)
        if found:
            return Path(found)
    return None


class ToolLocator:
    """Resolve or install named external tools for a project.

    Parameters
    ----------
    config : SiteConfig
        Shared configuration; provides the tool directory, retry budget
        and search depth.
    releases : Mapping[str, ToolRelease] | None, optional
        Installable tools by name. Defaults to the configured linter.
    """

    def __init__(
        self,
        config: SiteConfig,
        releases: Mapping[str, ToolRelease] | None = None,
    ) -> None:
        self.config = config
        if releases is None:
            releases = {config.linter.name: config.linter}
        self.releases = dict(releases)

    def local_path(self, name: str) -> Path:
        """Return where ``name`` lives once installed into the tool directory."""
        return self.config.bin_dir / executable_name(name)

    def resolve(self, name: str) -> Path | None:
        """Return the preferred executable for ``name`` or None."""
        return find_executable(name, [self.config.bin_dir])

    def is_available(self, name: str) -> bool:
        """Return True if ``name`` resolves locally or on ``PATH``."""
        return self.resolve(name) is not None

    def ensure_available(self, name: str) -> Path:
        r"""Make sure ``name`` is resolvable, installing it if needed.

        Parameters
        ----------
        name : str
            Tool to resolve.

        Returns
        -------
        Path
            The resolved executable.

        Raises
        ------
        ToolNotFoundError
            If the tool is missing and no release is known for it.
        DownloadUnavailableError, DownloadFailedError
            If the release archive cannot be fetched.
        ArchiveExtractionError, BinaryNotFoundInArchiveError
            If the archive is unusable.
        InstallationIncompleteError
            If the tool is still unresolvable after installation.
        """
        existing = self.resolve(name)
        if existing is not None:
            logger.debug(f"{name} resolved to {existing}")
            return existing

        release = self.releases.get(name)
        if release is None:
            raise ToolNotFoundError(
                f"{name} not found and no release is configured to install it.",
                context={"tool": name},
            )

        ui_info(f"{name} not found. Installing into {self.config.bin_dir_name}/ ...")
        self.install(release)

        resolved = self.resolve(name)
        if resolved is None:
            raise InstallationIncompleteError(
                f"{name} is still not available after installation.",
                context={"tool": name, "bin_dir": str(self.config.bin_dir)},
            )
        return resolved

    def install(self, release: ToolRelease) -> Path:
        """Download ``release`` and install its executable into the tool directory.

        The scratch directory holding the archive and its extracted tree is
        removed on every exit path.
        """
        bin_dir = self.config.bin_dir
        try:
            bin_dir.mkdir(parents=True, exist_ok=True)
        except OSError as error:
            raise InstallationIncompleteError(
                f"Cannot create {self.config.bin_dir_name}/: {error}",
                context={"tool": release.name, "bin_dir": str(bin_dir)},
            ) from error
        ui_info(f"Downloading {release.name} from:")
        ui_info(f"  {release.url}")
        with tempfile.TemporaryDirectory(prefix=f"{release.name}-") as tmp:
            tmpdir = Path(tmp)
            archive = download.download_archive(
                release.url,
                tmpdir / release.archive_name,
                retries=self.config.download_retries,
            )
            download.extract_archive(archive, tmpdir)
            found = download.find_binary(
                tmpdir,
                executable_name(release.name),
                max_depth=self.config.search_depth,
            )
            target = self.local_path(release.name)
            try:
                installed = download.install_binary(found, target)
            except OSError as error:
                raise InstallationIncompleteError(
                    f"Cannot install {release.name} to {target}: {error}",
                    context={"tool": release.name, "bin_dir": str(bin_dir)},
                ) from error
        ui_success(
            f"{release.name} installed to {self.config.bin_dir_name}/{installed.name}"
        )
        return installed


__all__ = ["ToolLocator", "find_executable", "is_executable_file"]
