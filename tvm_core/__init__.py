"""Core services for tvm, the tool version manager."""

from .activator import ActivationResult, Activator
from .app import TvmApp
from .config import ConfigResolver, ToolConfig
from .installer import InstallResult, Installer
from .store import RemovalReport, VersionStore
from .versions import Version, normalize_version_spec, sort_version_names

__all__ = [
    "ActivationResult",
    "Activator",
    "ConfigResolver",
    "InstallResult",
    "Installer",
    "RemovalReport",
    "ToolConfig",
    "TvmApp",
    "Version",
    "VersionStore",
    "normalize_version_spec",
    "sort_version_names",
]
