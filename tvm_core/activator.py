"""Activation state: which installed version the bin-directory link points at."""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from .errors import (
    ManagedPathPermissionError,
    NoPreviousVersionError,
    NotInstalledError,
    PreviousVersionNotInstalledError,
)
from .store import VersionStore
from .versions import Version, find_version

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActivationResult:
    version: Version
    previous: Optional[Version]
    changed: bool


class Activator:
    """Swap the activation link between installed versions and keep history.

    The active version is never cached: every call asks the linked entry point
    to report its own version.
    """

    def __init__(
        self,
        store: VersionStore,
        link_path: Path | str,
        *,
        package: str,
        bin_name: str,
        legacy_entry: str,
    ) -> None:
        self.store = store
        self.link_path = Path(link_path)
        self.package = package
        self.bin_name = bin_name
        self.legacy_entry = legacy_entry

    def entry_point(self, version: Version) -> Path:
        base = self.store.path_for(version) / "node_modules"
        for candidate in (
            base / ".bin" / self.bin_name,
            base / Path(*self.package.split("/")) / self.legacy_entry,
        ):
            if candidate.is_file():
                return candidate
        raise NotInstalledError(f"{version} is not installed")

    def resolve_active_version(self) -> Optional[Version]:
        if not self.link_path.exists():
            return None
        try:
            result = subprocess.run(
                [str(self.link_path), "--version"],
                check=False,
                capture_output=True,
                text=True,
            )
        except OSError as exc:
            logger.debug("version probe failed for %s: %s", self.link_path, exc)
            return None
        if result.returncode != 0:
            logger.debug("version probe exited with %s", result.returncode)
            return None
        return find_version(result.stdout)

    def activate(self, version: Version) -> ActivationResult:
        entry = self.entry_point(version)
        current = self.resolve_active_version()
        if current == version:
            logger.debug("%s already active", version)
            return ActivationResult(version=version, previous=current, changed=False)

        self.store.write_previous(current)
        self._replace_link(entry)
        logger.info("activated %s (previous=%s)", version, current or "<none>")
        return ActivationResult(version=version, previous=current, changed=True)

    def rollback(self) -> ActivationResult:
        previous = self.store.read_previous()
        if previous is None:
            raise NoPreviousVersionError("no previous activation recorded")
        if not self.store.is_installed(previous):
            raise PreviousVersionNotInstalledError(f"previous version {previous} is not installed")
        return self.activate(previous)

    def run(self, version: Version, args: Sequence[str] = ()) -> int:
        self.activate(version)
        entry = self.entry_point(version)
        logger.debug("running %s %s", entry, " ".join(args))
        return subprocess.run([str(entry), *args], check=False).returncode

    def _replace_link(self, target: Path) -> None:
        link_dir = self.link_path.parent
        tmp_link = link_dir / f".{self.link_path.name}.{os.getpid()}.tmp"
        try:
            link_dir.mkdir(parents=True, exist_ok=True)
            if tmp_link.is_symlink() or tmp_link.exists():
                tmp_link.unlink()
            os.symlink(target.resolve(), tmp_link)
            os.replace(tmp_link, self.link_path)
        except OSError as exc:
            if tmp_link.is_symlink():
                tmp_link.unlink()
            if isinstance(exc, PermissionError):
                raise ManagedPathPermissionError(self.link_path) from exc
            raise
        logger.debug("linked %s -> %s", self.link_path, target)
