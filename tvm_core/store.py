"""Filesystem registry of installed versions and the previous-version pointer."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

from .errors import ManagedPathPermissionError
from .versions import Version, sort_version_names

logger = logging.getLogger(__name__)

PREVIOUS_FILE_NAME = ".previous"


@dataclass
class RemovalReport:
    removed: list[Version] = field(default_factory=list)
    missing: list[Version] = field(default_factory=list)
    failed: dict[Version, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


class VersionStore:
    """One directory per installed version under a fixed root."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)
        self.previous_file = self.root / PREVIOUS_FILE_NAME

    def list_installed(self) -> list[Version]:
        if not self.root.exists():
            return []
        try:
            names = [entry.name for entry in self.root.iterdir() if entry.is_dir()]
        except PermissionError as exc:
            raise ManagedPathPermissionError(self.root, "read") from exc
        return sort_version_names(names)

    def is_installed(self, version: Version) -> bool:
        return self.path_for(version).is_dir()

    def path_for(self, version: Version) -> Path:
        return self.root / str(version)

    # ------------------------ previous ------------------------

    def read_previous(self) -> Optional[Version]:
        try:
            text = self.previous_file.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        return Version.try_parse(text.strip())

    def write_previous(self, version: Optional[Version]) -> None:
        value = f"{version}\n" if version is not None else ""
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=".previous.", dir=self.root)
        except PermissionError as exc:
            raise ManagedPathPermissionError(self.previous_file) from exc
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value)
            os.replace(tmp_name, self.previous_file)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug("previous version set to %s", version or "<none>")

    # ------------------------ removal ------------------------

    def remove(self, version: Version) -> bool:
        path = self.path_for(version)
        if not path.exists():
            return False
        try:
            shutil.rmtree(path)
        except PermissionError as exc:
            raise ManagedPathPermissionError(path, "remove") from exc
        logger.info("removed %s", path)
        return True

    def remove_many(self, versions: Iterable[Version]) -> RemovalReport:
        report = RemovalReport()
        for version in versions:
            try:
                removed = self.remove(version)
            except OSError as exc:
                logger.warning("failed to remove %s: %s", version, exc)
                report.failed[version] = str(exc)
                continue
            if removed:
                report.removed.append(version)
            else:
                report.missing.append(version)
        return report
