"""Bootstrap installer for .NET runtimes: local probe, download and silent install."""

from .probe import find_installed, is_installed
from .resolver import InstallLayout, PlatformTarget, check_architecture, detect_target, resolve_target
from .service import (
    InstallPlan,
    InstallResult,
    download_and_run,
    ensure_prerequisite,
    install_runtime,
    plan_install,
    run_installer,
)

__all__ = [
    "InstallLayout",
    "InstallPlan",
    "InstallResult",
    "PlatformTarget",
    "check_architecture",
    "detect_target",
    "download_and_run",
    "ensure_prerequisite",
    "find_installed",
    "install_runtime",
    "is_installed",
    "plan_install",
    "resolve_target",
    "run_installer",
]
