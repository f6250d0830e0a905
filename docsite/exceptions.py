"""Central application exception hierarchy.

This module defines the base exception ``AppError`` and one subclass per
failure mode of the toolchain: provisioning the virtual environment,
downloading and installing external tools, running the site generator and
linter, and parsing the command line. Every error is fatal to the current
invocation; the dispatcher prints ``message`` and exits non-zero.
"""

from __future__ import annotations

from typing import Any, Mapping


class AppError(Exception):
    """Base exception for all application-level errors.

    Parameters
    ----------
    code : str
        Machine-readable error code (e.g., ``'TOOL_NOT_FOUND'``).
    message : str
        Human-readable message describing the error.
    context : Mapping[str, Any] | None, optional
        Optional structured context for logging.
    transient : bool, optional
        Whether the error is temporary and may succeed on a later attempt.

    Examples
    --------
    >>> e = AppError('CODE', 'message', context={'k': 'v'}, transient=True)
    >>> e.code
    'CODE'
    >>> str(e)
    'CODE: message'
    """

    __slots__ = ("code", "message", "context", "transient")

    def __init__(
        self,
        code: str,
        message: str,
        *,
        context: Mapping[str, Any] | None = None,
        transient: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.context = dict(context or {})
        self.transient = bool(transient)

    def __str__(self) -> str:
        """Return a compact string representation of the error."""
        return f"{self.code}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Return a log-safe dictionary representation of the error."""
        return {
            "error_code": self.code,
            "message": self.message,
            "context": self.context,
            "is_transient": self.transient,
        }


class MissingManifestError(AppError):
    """Raised when the dependency manifest (requirements file) is absent."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("MISSING_MANIFEST", message, context=context)


class EnvironmentCreationError(AppError):
    """Raised when the virtual environment cannot be created."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("ENVIRONMENT_CREATION_FAILED", message, context=context)


class DependencyInstallError(AppError):
    """Raised when pip fails while populating the virtual environment."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("DEPENDENCY_INSTALL_FAILED", message, context=context)


class ToolNotFoundError(AppError):
    """Raised when a required command cannot be resolved."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("TOOL_NOT_FOUND", message, context=context)


class DownloadUnavailableError(AppError):
    """Raised when no supported download transport is installed."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("DOWNLOAD_UNAVAILABLE", message, context=context)


class DownloadFailedError(AppError):
    """Raised when the download transport reports a failure."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("DOWNLOAD_FAILED", message, context=context, transient=True)


class ArchiveExtractionError(AppError):
    """Raised when a downloaded release archive cannot be unpacked."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("ARCHIVE_EXTRACTION_FAILED", message, context=context)


class BinaryNotFoundInArchiveError(AppError):
    """Raised when the expected executable is missing from an archive."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("BINARY_NOT_FOUND_IN_ARCHIVE", message, context=context)


class InstallationIncompleteError(AppError):
    """Raised when a tool is still unavailable after installing it."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("INSTALLATION_INCOMPLETE", message, context=context)


class ToolNotRunnableError(AppError):
    """Raised when an installed tool fails its ``--version`` probe."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("TOOL_NOT_RUNNABLE", message, context=context)


class ExternalCommandError(AppError):
    """Raised when an external command exits with a non-zero status.

    Parameters
    ----------
    code : str
        Machine-readable error code of the concrete subclass.
    message : str
        Human-readable message.
    returncode : int
        Exit status reported by the command.
    context : Mapping[str, Any] | None, optional
        Optional structured context for logging.
    """

    __slots__ = ("returncode",)

    def __init__(
        self,
        code: str,
        message: str,
        *,
        returncode: int,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        merged = {"returncode": returncode, **dict(context or {})}
        super().__init__(code, message, context=merged)
        self.returncode = returncode


class SiteGeneratorError(ExternalCommandError):
    """Raised when the static-site generator fails."""

    def __init__(
        self,
        message: str,
        *,
        returncode: int,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(
            "SITE_GENERATOR_FAILED", message, returncode=returncode, context=context
        )


class LintFindingsError(ExternalCommandError):
    """Raised when the linter reports findings or fails to run."""

    def __init__(
        self,
        message: str,
        *,
        returncode: int,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(
            "LINT_FINDINGS", message, returncode=returncode, context=context
        )


class UnknownCommandError(AppError):
    """Raised for a top-level command the dispatcher does not recognise."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("UNKNOWN_COMMAND", message, context=context)


class UnknownFlagError(AppError):
    """Raised for an option a command does not accept."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("UNKNOWN_FLAG", message, context=context)


__all__ = [
    "AppError",
    "ArchiveExtractionError",
    "BinaryNotFoundInArchiveError",
    "DependencyInstallError",
    "DownloadFailedError",
    "DownloadUnavailableError",
    "EnvironmentCreationError",
    "ExternalCommandError",
    "InstallationIncompleteError",
    "LintFindingsError",
    "MissingManifestError",
    "SiteGeneratorError",
    "ToolNotFoundError",
    "ToolNotRunnableError",
    "UnknownCommandError",
    "UnknownFlagError",
]
