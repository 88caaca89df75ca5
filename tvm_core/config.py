"""Layered configuration for the managed tool and its directories."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

import tomllib

from .errors import ConfigurationError
from .paths import UserDirs, default_bin_dir

CONFIG_FILE_NAME = "config.toml"

_DEFAULTS: dict[str, str] = {
    "package": "typescript",
    "bin_name": "tsc",
    "legacy_entry": "bin/tsc",
    "package_manager": "npm",
    "registry_url": "https://registry.npmjs.org",
    "registry_timeout": "10",
    "log_level": "WARNING",
}
_ENV_KEY_MAP: dict[str, str] = {
    "root": "TVM_ROOT",
    "bin_dir": "TVM_BIN_DIR",
    "package": "TVM_PACKAGE",
    "bin_name": "TVM_BIN_NAME",
    "legacy_entry": "TVM_LEGACY_ENTRY",
    "link_name": "TVM_LINK_NAME",
    "package_manager": "TVM_PACKAGE_MANAGER",
    "registry_url": "TVM_REGISTRY",
    "registry_timeout": "TVM_REGISTRY_TIMEOUT",
    "log_level": "TVM_LOG_LEVEL",
}


def _load_config_from_file(path: Path) -> dict[str, str]:
    if not path.exists():
        return {}
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError):
        return {}
    return {key: str(value) for key, value in data.items() if not isinstance(value, dict)}


@dataclass(frozen=True)
class ToolConfig:
    """Resolved settings for one managed tool."""

    root: Path
    bin_dir: Path
    package: str
    bin_name: str
    legacy_entry: str
    link_name: str
    package_manager: str
    registry_url: str
    registry_timeout: float
    log_level: str

    @property
    def link_path(self) -> Path:
        return self.bin_dir / self.link_name


@dataclass
class ConfigResolver:
    """Resolve settings while honoring CLI, env, user file and default layers."""

    user_dirs: UserDirs | None = None
    cli_overrides: Mapping[str, str] | None = None
    env: Mapping[str, str] | None = None
    defaults: Mapping[str, str] | None = None

    def __post_init__(self) -> None:
        self.user_dirs = self.user_dirs or UserDirs()
        self.cli_overrides = {k: v for k, v in (self.cli_overrides or {}).items() if v}
        self.env = self.env if self.env is not None else os.environ
        base_defaults = dict(_DEFAULTS)
        if self.defaults:
            base_defaults.update(self.defaults)
        self.defaults = base_defaults
        self._user_layer: dict[str, str] | None = None

    @property
    def config_path(self) -> Path:
        return self.user_dirs.config_dir() / CONFIG_FILE_NAME

    def resolve_setting(self, key: str) -> str | None:
        """Return the value for `key` using CLI, env, user config, defaults order."""
        if value := self.cli_overrides.get(key):
            return value
        if value := self._env_value(key):
            return value
        if value := self._user_config_layer().get(key):
            return value
        return self.defaults.get(key)

    def resolve(self) -> ToolConfig:
        root = self.resolve_setting("root")
        bin_dir = self.resolve_setting("bin_dir")
        bin_name = self._required("bin_name")
        raw_timeout = self._required("registry_timeout")
        try:
            timeout = float(raw_timeout)
        except ValueError as exc:
            raise ConfigurationError(f"registry_timeout must be a number, got {raw_timeout!r}") from exc
        return ToolConfig(
            root=Path(root).expanduser() if root else self.user_dirs.versions_dir(),
            bin_dir=Path(bin_dir).expanduser() if bin_dir else default_bin_dir(),
            package=self._required("package"),
            bin_name=bin_name,
            legacy_entry=self._required("legacy_entry"),
            link_name=self.resolve_setting("link_name") or bin_name,
            package_manager=self._required("package_manager"),
            registry_url=self._required("registry_url"),
            registry_timeout=timeout,
            log_level=(self.resolve_setting("log_level") or "WARNING").upper(),
        )

    # ---------- Internal helpers ----------

    def _required(self, key: str) -> str:
        value = self.resolve_setting(key)
        if not value:
            raise ConfigurationError(f"missing required setting {key!r}")
        return value

    def _env_value(self, key: str) -> str | None:
        alias = _ENV_KEY_MAP.get(key)
        if alias:
            return self.env.get(alias) or None
        return None

    def _user_config_layer(self) -> dict[str, str]:
        if self._user_layer is None:
            self._user_layer = _load_config_from_file(self.config_path)
        return self._user_layer
