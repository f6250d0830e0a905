"""Virtual environment provisioning.

Creates the project's isolated environment and installs the packages
declared in the requirements manifest. Installation is not transactional:
if pip fails part-way the environment is left as pip left it and the
failure is raised to the caller.
"""

from __future__ import annotations

import logging
import subprocess
import venv
from pathlib import Path

from docsite.config import SiteConfig
from docsite.console import ui_info
from docsite.exceptions import (
    DependencyInstallError,
    EnvironmentCreationError,
    MissingManifestError,
    ToolNotFoundError,
)
from docsite.toolchain.locator import find_executable
from docsite.toolchain.venv import get_venv_bin_dir, get_venv_python_executable

logger = logging.getLogger(__name__)


class EnvironmentProvisioner:
    """Create and populate the virtual environment described by ``config``.

    Parameters
    ----------
    config : SiteConfig
        Shared configuration; provides the venv directory and the manifest.
    """

    def __init__(self, config: SiteConfig) -> None:
        self.config = config

    @property
    def python_executable(self) -> Path:
        return get_venv_python_executable(self.config.venv_dir)

    def ensure_environment(self) -> Path:
        """Create the virtual environment if it does not exist yet.

        A directory without an interpreter (for example left behind by an
        interrupted creation) is cleared and created again.

        Returns
        -------
        Path
            The environment directory.

        Raises
        ------
        EnvironmentCreationError
            If ``venv`` or ``ensurepip`` fails.
        """
        venv_dir = self.config.venv_dir
        name = self.config.venv_dir_name
        if venv_dir.exists() and self.python_executable.exists():
            return venv_dir
        try:
            if venv_dir.exists():
                logger.warning(f"No interpreter in {venv_dir}; recreating it")
                ui_info(f"Recreating virtual environment at {name} ...")
                venv.create(venv_dir, with_pip=True, clear=True)
            else:
                ui_info(f"Creating virtual environment at {name} ...")
                venv.create(venv_dir, with_pip=True)
        except (subprocess.CalledProcessError, OSError) as error:
            raise EnvironmentCreationError(
                f"Could not create virtual environment at {name}: {error}",
                context={"path": str(venv_dir)},
            ) from error
        logger.info(f"Created virtual environment: {venv_dir}")
        return venv_dir

    def install_dependencies(self) -> None:
        r"""Upgrade pip and install every package listed in the manifest.

        Raises
        ------
        MissingManifestError
            If the requirements file does not exist.
        DependencyInstallError
            If either pip invocation fails or the venv interpreter is missing.
        """
        requirements = self.config.requirements_file
        if not requirements.is_file():
            raise MissingManifestError(
                f"Missing {self.config.requirements_file_name} in current directory.",
                context={"path": str(requirements)},
            )

        ui_info(f"Installing dependencies from {self.config.requirements_file_name} ...")
        python = str(self.python_executable)
        upgrade = [
            python,
            "-m",
            "pip",
            "install",
            "--upgrade",
            "pip",
            "--disable-pip-version-check",
        ]
        install = [
            python,
            "-m",
            "pip",
            "install",
            "-r",
            str(requirements),
            "--disable-pip-version-check",
        ]
        try:
            subprocess.check_call(
                upgrade, cwd=self.config.project_root, stdout=subprocess.DEVNULL
            )
            subprocess.check_call(install, cwd=self.config.project_root)
        except subprocess.CalledProcessError as error:
            raise DependencyInstallError(
                f"pip failed with exit status {error.returncode}.",
                context={"command": error.cmd, "returncode": error.returncode},
            ) from error
        except FileNotFoundError as error:
            raise DependencyInstallError(
                f"Error: {python} not found; recreate the environment with 'clean'.",
                context={"python": python},
            ) from error

    def verify_tool_present(self, name: str) -> Path:
        """Return the resolved path of ``name``, preferring the venv's copy.

        Raises
        ------
        ToolNotFoundError
            If the command is not resolvable after installation.
        """
        resolved = find_executable(name, [get_venv_bin_dir(self.config.venv_dir)])
        if resolved is None:
            raise ToolNotFoundError(
                f"{name} not found. Ensure it is listed in "
                f"{self.config.requirements_file_name}.",
                context={"tool": name},
            )
        logger.debug(f"{name} resolved to {resolved}")
        return resolved


__all__ = ["EnvironmentProvisioner"]
