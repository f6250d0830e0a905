"""Build, serve, clean and lint workflows.

Each workflow is a fixed sequence of provisioning, tool lookup and external
command invocation. A workflow either completes or raises an
:class:`docsite.exceptions.AppError`; there is no partial success.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Mapping, Sequence

from docsite.config import SiteConfig
from docsite.console import ui_info, ui_rule, ui_success
from docsite.exceptions import (
    LintFindingsError,
    SiteGeneratorError,
    ToolNotRunnableError,
)
from docsite.toolchain.fs_utils import safe_rmtree
from docsite.toolchain.locator import ToolLocator
from docsite.toolchain.process import run_command
from docsite.toolchain.provisioner import EnvironmentProvisioner
from docsite.toolchain.venv import activated_env

logger = logging.getLogger(__name__)

CommandRunner = Callable[..., int]


class SiteWorkflows:
    """The CLI's workflows, wired to their collaborators.

    Parameters
    ----------
    config : SiteConfig
        Shared configuration.
    provisioner : EnvironmentProvisioner | None, optional
        Environment provisioner; built from ``config`` when omitted.
    locator : ToolLocator | None, optional
        External tool locator; built from ``config`` when omitted.
    runner : CommandRunner | None, optional
        Callable with the signature of
        :func:`docsite.toolchain.process.run_command`.
    """

    def __init__(
        self,
        config: SiteConfig,
        *,
        provisioner: EnvironmentProvisioner | None = None,
        locator: ToolLocator | None = None,
        runner: CommandRunner | None = None,
    ) -> None:
        self.config = config
        self.provisioner = provisioner or EnvironmentProvisioner(config)
        self.locator = locator or ToolLocator(config)
        self.runner = runner or run_command

    def _run(
        self,
        args: Sequence[str | Path],
        *,
        env: Mapping[str, str] | None = None,
        quiet: bool = False,
    ) -> int:
        return self.runner(args, self.config.project_root, env=env, quiet=quiet)

    def _prepare_generator(self) -> Path:
        self.provisioner.ensure_environment()
        self.provisioner.install_dependencies()
        return self.provisioner.verify_tool_present(self.config.site_generator)

    def build(self) -> Path:
        """Provision the environment and generate the static site.

        Returns the resolved site generator so ``run --build`` can reuse it.
        """
        ui_rule("build")
        generator = self._prepare_generator()
        self._generate(generator)
        return generator

    def _generate(self, generator: Path) -> None:
        ui_info(f"Running {self.config.site_generator} build ...")
        returncode = self._run(
            [generator, "build"], env=activated_env(self.config.venv_dir)
        )
        if returncode != 0:
            raise SiteGeneratorError(
                f"{self.config.site_generator} build failed.", returncode=returncode
            )
        ui_success(
            f"Build finished. Output directory: {self.config.site_dir_name}/"
        )

    def run(self, build_first: bool = False) -> None:
        r"""Serve the site, optionally building it first.

        Without ``build_first`` the environment is provisioned and the
        generator verified, but no output is generated. Blocks until the
        server exits; an interrupt from the terminal is a clean shutdown.

        Raises
        ------
        SiteGeneratorError
            If the server exits with a non-zero status.
        """
        ui_rule("run")
        if build_first:
            generator = self.build()
        else:
            generator = self._prepare_generator()

        address = self.config.serve_address
        ui_info(f"Starting {self.config.site_generator} server at http://{address} ...")
        try:
            returncode = self._run(
                [generator, "serve", "-a", address],
                env=activated_env(self.config.venv_dir),
            )
        except KeyboardInterrupt:
            ui_info("Server stopped.")
            return
        if returncode != 0:
            raise SiteGeneratorError(
                f"{self.config.site_generator} serve exited with status {returncode}.",
                returncode=returncode,
            )

    def clean(self) -> None:
        """Remove generated output, caches and the environment.

        Missing directories are skipped silently. A directory that cannot be
        removed is logged and skipped so the remaining ones are still cleaned.
        """
        ui_rule("clean")
        for target in self.config.clean_targets:
            try:
                safe_rmtree(target, self.config)
            except OSError as error:
                logger.error(f"Could not remove '{target}': {error}")
        ui_success("Clean completed.")

    def lint(self) -> None:
        r"""Install the linter if needed and lint the whole project.

        Raises
        ------
        ToolNotRunnableError
            If the linter fails its ``--version`` probe.
        LintFindingsError
            If the linter exits non-zero.
        """
        ui_rule("lint")
        name = self.config.linter.name
        linter = self.locator.ensure_available(name)

        try:
            probe = self._run([linter, "--version"], quiet=True)
        except OSError as error:
            raise ToolNotRunnableError(
                f"{name} exists but is not runnable: {error}",
                context={"path": str(linter)},
            ) from error
        if probe != 0:
            raise ToolNotRunnableError(
                f"{name} exists but is not runnable.",
                context={"path": str(linter), "returncode": probe},
            )

        ui_info(f"Running {name} check on current repository ...")
        returncode = self._run([linter, "--lint", "."])
        if returncode != 0:
            raise LintFindingsError(
                f"{name} reported problems (exit status {returncode}).",
                returncode=returncode,
            )
        ui_success("Lint completed.")


__all__ = ["SiteWorkflows"]
