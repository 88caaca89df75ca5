"""Application object that wires the tvm core services together."""

from __future__ import annotations

import logging
from typing import Mapping

from .activator import Activator
from .config import ConfigResolver, ToolConfig
from .installer import Installer
from .package_manager import PackageManagerClient
from .paths import UserDirs
from .registry import RegistryClient
from .store import RemovalReport, VersionStore


class TvmApp:
    """Entry point that builds the store, activator, installer and registry client."""

    def __init__(
        self,
        config: ToolConfig | None = None,
        *,
        cli_overrides: Mapping[str, str] | None = None,
        env: Mapping[str, str] | None = None,
        user_dirs: UserDirs | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.logger = logger or logging.getLogger("tvm_core.app")
        self.config = config or ConfigResolver(
            user_dirs=user_dirs,
            cli_overrides=cli_overrides,
            env=env,
        ).resolve()
        self.store = VersionStore(self.config.root)
        self.activator = Activator(
            self.store,
            self.config.link_path,
            package=self.config.package,
            bin_name=self.config.bin_name,
            legacy_entry=self.config.legacy_entry,
        )
        self.package_manager = PackageManagerClient(self.config.package_manager)
        self.installer = Installer(
            self.store,
            self.activator,
            self.package_manager,
            self.config.package,
        )
        self._registry: RegistryClient | None = None
        self.logger.debug(
            "tvm root=%s link=%s package=%s",
            self.config.root,
            self.config.link_path,
            self.config.package,
        )

    @property
    def registry(self) -> RegistryClient:
        if self._registry is None:
            self._registry = RegistryClient(
                self.config.registry_url,
                self.config.package,
                timeout=self.config.registry_timeout,
            )
        return self._registry

    def prune(self, *, keep: int = 1) -> RemovalReport:
        if keep < 1:
            raise ValueError("keep must be >= 1")
        versions = self.store.list_installed()
        keep_set = set(versions[-keep:])
        active = self.activator.resolve_active_version()
        if active:
            keep_set.add(active)
        return self.store.remove_many(v for v in versions if v not in keep_set)
