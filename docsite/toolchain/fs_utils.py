"""Filesystem utilities to validate and safely remove whitelisted paths.

This module provides helpers to validate that a path is safe to remove and
to perform an explicit, logged removal of whitelisted project directories.
It is used by the ``clean`` workflow.

Functions
---------
- ``create_safe_path``: Validate and stamp a path as safe for removal.
- ``safe_rmtree``: Remove a validated directory tree.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import NewType

from docsite.config import SiteConfig

logger = logging.getLogger(__name__)

# NewType used as a static "seal" to indicate the path is validated for removal.
_ValidatedPath = NewType("_ValidatedPath", Path)


def create_safe_path(path_to_validate: Path, config: SiteConfig) -> _ValidatedPath:
    r"""Validate and stamp a Path as safe for destructive operations.

    Safety checks, in order:

    - Never allows deletion of the project root itself.
    - Requires the path to be inside the project tree.
    - Permits only the directories listed in ``config.clean_targets`` and
      anything beneath them.

    Parameters
    ----------
    path_to_validate : Path
        The directory path to be validated for safe removal.
    config : SiteConfig
        Configuration providing the project root and the whitelist.

    Returns
    -------
    _ValidatedPath
        The resolved path, stamped for use by removal helpers.

    Raises
    ------
    PermissionError
        If the path is the project root, outside the project, or not
        whitelisted.

    Examples
    --------
    >>> from pathlib import Path
    >>> from docsite.config import SiteConfig
    >>> cfg = SiteConfig(project_root=Path("/work/proj"))
    >>> create_safe_path(Path("/work/proj/site"), cfg).as_posix()  # doctest: +SKIP
    '/work/proj/site'
    >>> create_safe_path(Path("/work/proj"), cfg)  # doctest: +IGNORE_EXCEPTION_DETAIL
    Traceback (most recent call last):
      ...
    PermissionError: SECURITY STOP: Attempt to delete the project root was blocked.
    """
    project_root = config.project_root.resolve()
    target_path = Path(path_to_validate).resolve()

    if target_path == project_root:
        raise PermissionError(
            "SECURITY STOP: Attempt to delete the project root was blocked."
        )

    if not target_path.is_relative_to(project_root):
        raise PermissionError(
            "SECURITY STOP: Attempt to delete a path outside the project was blocked."
        )

    whitelisted_roots = [p.resolve() for p in config.clean_targets]
    is_safe_path = any(
        target_path == safe_root or target_path.is_relative_to(safe_root)
        for safe_root in whitelisted_roots
    )
    if not is_safe_path:
        raise PermissionError(
            f"SECURITY STOP: Path '{target_path}' is not in the whitelist."
        )
    return _ValidatedPath(target_path)


def safe_rmtree(safe_path: _ValidatedPath | Path, config: SiteConfig) -> bool:
    r"""Remove a directory tree for a validated, whitelisted path.

    The path is re-validated with :func:`create_safe_path` before anything
    is deleted. A path that does not exist is a no-op.

    Parameters
    ----------
    safe_path : Path or _ValidatedPath
        The target directory.
    config : SiteConfig
        Configuration providing the project root and the whitelist.

    Returns
    -------
    bool
        True if a directory was removed, False if there was nothing to remove.

    Raises
    ------
    PermissionError
        If the supplied path fails validation.
    OSError
        If removal of an existing tree fails.
    """
    validated = create_safe_path(Path(safe_path), config)
    if not validated.exists():
        logger.info(f"Path '{validated}' does not exist; nothing to remove.")
        return False
    logger.warning(f"Performing safe rmtree on: {validated}")
    if validated.is_dir():
        shutil.rmtree(validated)
    else:
        validated.unlink()
    logger.info(f"Removed: {validated}")
    return True


__all__ = ["create_safe_path", "safe_rmtree"]
