"""Typed errors raised by the tvm core."""

from __future__ import annotations


class TvmError(Exception):
    """Base type for every failure surfaced by tvm."""


class ConfigurationError(TvmError):
    """A required external tool is missing or a setting is invalid."""


class ManagedPathPermissionError(TvmError, PermissionError):
    """Raised when a managed directory or link cannot be read or written."""

    def __init__(self, path: object, action: str = "write") -> None:
        super().__init__(f"permission denied: cannot {action} {path}")
        self.path = path
        self.action = action


class InvalidVersionError(TvmError, ValueError):
    """Raised when a token is not a canonical X.Y.Z version."""


class NotInstalledError(TvmError):
    """Raised when an operation references a version that is not installed."""


class PreviousVersionNotInstalledError(NotInstalledError):
    """Raised when the recorded previous version has been removed since."""


class NoPreviousVersionError(TvmError):
    """Raised by rollback when no previous activation was recorded."""


class InstallFailureError(TvmError):
    """The package manager reported a failed install."""

    def __init__(self, version: object, returncode: int | None = None, detail: str = "") -> None:
        message = f"failed to install {version}"
        if returncode is not None:
            message += f" (exit={returncode})"
        if detail:
            message += f": {detail}"
        super().__init__(message)
        self.version = version
        self.returncode = returncode


class RegistryError(TvmError):
    """Base exception for registry lookup failures."""


class VersionNotFoundRemotely(RegistryError):
    """The registry has no such package or version."""
