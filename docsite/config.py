"""Configuration constants for the documentation-site toolchain.

Defines the directory names, manifest filename, serve address and linter
release used by the CLI. The constants are the single source of truth; at
process start they are bundled into an immutable :class:`SiteConfig`
(see :func:`load_config`) which is passed to every component.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

# Project directories (relative to the project root)
VENV_DIR_NAME: str = ".venv"
SITE_DIR_NAME: str = "site"
CACHE_DIR_NAME: str = ".cache"
BIN_DIR_NAME: str = ".bin"

# Requirements
REQUIREMENTS_FILE_NAME: str = "requirements.txt"

# Static-site generator
SITE_GENERATOR: str = "mkdocs"
SERVE_ADDRESS: str = "0.0.0.0:8000"

# Linter release
LINTER_NAME: str = "autocorrect"
LINTER_VERSION: str = "v2.16.2"
LINTER_URL: str = (
    "https://github.com/huacnlee/autocorrect/releases/download/"
    f"{LINTER_VERSION}/autocorrect-linux-amd64.tar.gz"
)
DOWNLOAD_RETRIES: int = 3
ARCHIVE_SEARCH_DEPTH: int = 3

# Logging
LOG_LEVEL_ENV: str = "DOCSITE_LOG_LEVEL"
DEFAULT_LOG_LEVEL: str = "WARNING"
LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class ToolRelease:
    """A downloadable release archive that contains a single executable.

    Parameters
    ----------
    name : str
        Canonical executable name, also the filename searched for inside
        the extracted archive.
    url : str
        Fixed download URL of the release archive.
    archive_name : str
        Filename used for the downloaded archive inside the temporary
        directory.
    """

    name: str
    url: str
    archive_name: str


LINTER_RELEASE = ToolRelease(
    name=LINTER_NAME,
    url=LINTER_URL,
    archive_name=f"{LINTER_NAME}.tar.gz",
)


@dataclass(frozen=True)
class SiteConfig:
    """Immutable configuration shared by all toolchain components.

    Built once by :func:`load_config` and passed by reference. Paths are
    derived from ``project_root`` so tests can point the whole toolchain
    at a temporary directory.

    Examples
    --------
    >>> from pathlib import Path
    >>> cfg = SiteConfig(project_root=Path("/work/site-project"))
    >>> cfg.venv_dir.as_posix()
    '/work/site-project/.venv'
    >>> cfg.serve_address
    '0.0.0.0:8000'
    """

    project_root: Path
    venv_dir_name: str = VENV_DIR_NAME
    requirements_file_name: str = REQUIREMENTS_FILE_NAME
    site_dir_name: str = SITE_DIR_NAME
    cache_dir_name: str = CACHE_DIR_NAME
    bin_dir_name: str = BIN_DIR_NAME
    serve_address: str = SERVE_ADDRESS
    site_generator: str = SITE_GENERATOR
    linter: ToolRelease = field(default=LINTER_RELEASE)
    download_retries: int = DOWNLOAD_RETRIES
    search_depth: int = ARCHIVE_SEARCH_DEPTH

    @property
    def venv_dir(self) -> Path:
        return self.project_root / self.venv_dir_name

    @property
    def requirements_file(self) -> Path:
        return self.project_root / self.requirements_file_name

    @property
    def site_dir(self) -> Path:
        return self.project_root / self.site_dir_name

    @property
    def cache_dir(self) -> Path:
        return self.project_root / self.cache_dir_name

    @property
    def bin_dir(self) -> Path:
        return self.project_root / self.bin_dir_name

    @property
    def clean_targets(self) -> tuple[Path, ...]:
        """Directories removed by ``clean``, in removal order."""
        return (self.site_dir, self.cache_dir, self.venv_dir)


def load_config(project_root: Path | None = None) -> SiteConfig:
    """Return the process-wide configuration.

    Parameters
    ----------
    project_root : Path | None
        Root of the documentation project. Defaults to the current working
        directory, which is where the CLI is expected to be launched from.

    Returns
    -------
    SiteConfig
        Configuration with an absolute ``project_root``.
    """
    root = Path.cwd() if project_root is None else Path(project_root)
    return SiteConfig(project_root=root.resolve())
