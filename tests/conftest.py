"""Shared fixtures: a throwaway tool layout with fake, executable entry points."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from tvm_core.app import TvmApp
from tvm_core.config import ToolConfig
from tvm_core.errors import InstallFailureError
from tvm_core.versions import Version


def write_entry_point(version_dir: Path, version: str, *, legacy: bool = False) -> Path:
    base = version_dir / "node_modules"
    path = base / "typescript" / "bin" / "tsc" if legacy else base / ".bin" / "tsc"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        "#!/bin/sh\n"
        'if [ "$1" = "--version" ]; then\n'
        f'  echo "Version {version}"\n'
        "  exit 0\n"
        "fi\n"
        'exit "${TVM_FAKE_EXIT:-0}"\n'
    )
    path.chmod(0o755)
    return path


class FakePackageManager:
    """Stands in for npm: writes an entry point or fails."""

    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.calls: list[tuple[str, Version, Path]] = []

    def install(self, package: str, version: Version, target: Path) -> None:
        self.calls.append((package, version, target))
        (target / "node_modules").mkdir(parents=True, exist_ok=True)
        if self.fail:
            raise InstallFailureError(version, 1, "npm ERR! 404")
        write_entry_point(target, str(version))


@pytest.fixture
def tool_config(tmp_path: Path) -> ToolConfig:
    return ToolConfig(
        root=tmp_path / "versions",
        bin_dir=tmp_path / "bin",
        package="typescript",
        bin_name="tsc",
        legacy_entry="bin/tsc",
        link_name="tsc",
        package_manager="npm",
        registry_url="https://registry.example.test",
        registry_timeout=5.0,
        log_level="WARNING",
    )


@pytest.fixture
def app(tool_config: ToolConfig) -> TvmApp:
    return TvmApp(tool_config)


@pytest.fixture
def install_fake(tool_config: ToolConfig) -> Callable[..., Path]:
    def _install(version: str, *, legacy: bool = False) -> Path:
        return write_entry_point(tool_config.root / version, version, legacy=legacy)

    return _install


@pytest.fixture
def fake_package_manager(app: TvmApp) -> FakePackageManager:
    fake = FakePackageManager()
    app.installer.package_manager = fake
    return fake
