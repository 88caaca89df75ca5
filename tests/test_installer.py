"""Tests for installing versions through the package manager."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from tvm_core.app import TvmApp
from tvm_core.errors import (
    ConfigurationError,
    InstallFailureError,
    InvalidVersionError,
    ManagedPathPermissionError,
)
from tvm_core.versions import Version

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="entry points are shell scripts")


def test_install_new_version_activates_it(app: TvmApp, fake_package_manager) -> None:
    result = app.installer.install("v5.4.2")

    assert result.version == Version(5, 4, 2)
    assert result.active == Version(5, 4, 2)
    assert not result.already_installed
    assert fake_package_manager.calls == [
        ("typescript", Version(5, 4, 2), app.store.path_for(Version(5, 4, 2)))
    ]
    assert app.store.list_installed() == [Version(5, 4, 2)]


def test_install_existing_directory_skips_package_manager(
    app: TvmApp, fake_package_manager, install_fake
) -> None:
    install_fake("5.0.0")

    result = app.installer.install("5.0.0")

    assert result.already_installed
    assert result.active == Version(5, 0, 0)
    assert fake_package_manager.calls == []


def test_install_failure_removes_directory(app: TvmApp, fake_package_manager) -> None:
    fake_package_manager.fail = True

    with pytest.raises(InstallFailureError, match="9.9.9"):
        app.installer.install("9.9.9")

    assert not app.store.path_for(Version(9, 9, 9)).exists()
    assert app.activator.resolve_active_version() is None


def test_install_missing_package_manager_cleans_up(app: TvmApp) -> None:
    app.package_manager.executable = "tvm-no-such-package-manager"

    with pytest.raises(ConfigurationError):
        app.installer.install("1.0.0")

    assert not app.store.path_for(Version(1, 0, 0)).exists()


def test_install_rejects_invalid_spec(app: TvmApp, fake_package_manager) -> None:
    with pytest.raises(InvalidVersionError):
        app.installer.install("1.x")
    assert fake_package_manager.calls == []


def test_install_directory_permission_denied(
    app: TvmApp, fake_package_manager, monkeypatch: pytest.MonkeyPatch
) -> None:
    def denied(self: Path, *args, **kwargs) -> None:
        raise PermissionError(13, "Permission denied", str(self))

    monkeypatch.setattr(Path, "mkdir", denied)

    with pytest.raises(ManagedPathPermissionError, match="cannot create"):
        app.installer.install("1.0.0")

    assert fake_package_manager.calls == []
