"""Install a single version and hand it to the activator."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from typing import Optional

from .activator import Activator
from .errors import ManagedPathPermissionError
from .package_manager import PackageManagerClient
from .store import VersionStore
from .versions import Version, normalize_version_spec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InstallResult:
    version: Version
    active: Optional[Version]
    already_installed: bool = False


class Installer:
    def __init__(
        self,
        store: VersionStore,
        activator: Activator,
        package_manager: PackageManagerClient,
        package: str,
    ) -> None:
        self.store = store
        self.activator = activator
        self.package_manager = package_manager
        self.package = package

    def install(self, spec: str | Version) -> InstallResult:
        version = spec if isinstance(spec, Version) else normalize_version_spec(spec)
        target = self.store.path_for(version)

        if target.is_dir():
            logger.info("%s already installed at %s", version, target)
            self.activator.activate(version)
            return InstallResult(
                version=version,
                active=self.activator.resolve_active_version(),
                already_installed=True,
            )

        try:
            target.mkdir(parents=True)
        except PermissionError as exc:
            raise ManagedPathPermissionError(target, "create") from exc

        installed = False
        try:
            self.package_manager.install(self.package, version, target)
            installed = True
        finally:
            if not installed:
                shutil.rmtree(target, ignore_errors=True)
                logger.debug("removed partial install %s", target)

        self.activator.activate(version)
        return InstallResult(version=version, active=self.activator.resolve_active_version())
