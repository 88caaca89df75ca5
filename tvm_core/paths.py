"""Platform-independent helpers for tvm paths."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir, user_data_dir

_DEFAULT_APP_NAME = "tvm"
VERSIONS_DIR_NAME = "versions"


@dataclass(frozen=True)
class UserDirs:
    """Expose the platform-configured locations for config and data trees."""

    app_name: str = _DEFAULT_APP_NAME
    config_dir_override: Path | None = None
    data_dir_override: Path | None = None

    def config_dir(self) -> Path:
        return (
            self.config_dir_override
            if self.config_dir_override
            else Path(user_config_dir(self.app_name, appauthor=False))
        )

    def data_dir(self) -> Path:
        return (
            self.data_dir_override
            if self.data_dir_override
            else Path(user_data_dir(self.app_name, appauthor=False))
        )

    def versions_dir(self) -> Path:
        return self.data_dir() / VERSIONS_DIR_NAME


def default_bin_dir() -> Path:
    return Path.home() / ".local" / "bin"
