"""Wrapper around the external package manager CLI (npm by default)."""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path

from .errors import ConfigurationError, InstallFailureError
from .versions import Version

logger = logging.getLogger(__name__)


class PackageManagerClient:
    """Runs ``<executable> install --prefix <dir> <package>@<version>``."""

    def __init__(self, executable: str = "npm") -> None:
        self.executable = executable

    def install(self, package: str, version: Version, target: Path) -> None:
        command = [
            self._resolve_executable(),
            "install",
            "--prefix",
            str(target),
            "--no-save",
            "--no-fund",
            "--no-audit",
            f"{package}@{version}",
        ]
        logger.debug("package manager cmd=%s", " ".join(command))
        try:
            result = subprocess.run(command, check=False, capture_output=True, text=True)
        except FileNotFoundError as exc:
            raise ConfigurationError(
                f"{self.executable} not found. Install it and ensure it is available in PATH."
            ) from exc
        if result.returncode != 0:
            raise InstallFailureError(version, result.returncode, _last_line(result.stderr))
        logger.info("installed %s@%s into %s", package, version, target)

    def _resolve_executable(self) -> str:
        found = shutil.which(self.executable)
        if not found:
            raise ConfigurationError(
                f"{self.executable} not found. Install it and ensure it is available in PATH."
            )
        return found


def _last_line(text: str | None) -> str:
    lines = [line.strip() for line in (text or "").splitlines() if line.strip()]
    return lines[-1] if lines else ""
