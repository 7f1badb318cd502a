"""Host platform detection and local install locations per architecture."""

from __future__ import annotations

import os
import platform
import sys
from dataclasses import dataclass, replace
from pathlib import Path

from webinst_core.config import InstallConfig
from webinst_core.errors import ConfigurationError
from webinst_core.models import Architecture, Channel


PREREQUISITE_DLL = "vcruntime140.dll"


@dataclass(frozen=True)
class PlatformTarget:
    os_name: str
    os_is_64bit: bool
    interpreter_is_64bit: bool = True

    @property
    def native_arch(self) -> Architecture:
        return Architecture.X64 if self.os_is_64bit else Architecture.X86


def _normalize_os(system: str) -> str:
    s = system.lower()
    if s.startswith("win"):
        return "windows"
    if s.startswith("darwin") or s.startswith("mac"):
        return "macos"
    return "linux"


def _is_64bit_machine(machine: str) -> bool:
    return machine.lower() in ("x86_64", "amd64", "x64", "aarch64", "arm64", "ia64")


def resolve_target(system: str, machine: str) -> PlatformTarget:
    return PlatformTarget(os_name=_normalize_os(system), os_is_64bit=_is_64bit_machine(machine))


def detect_target() -> PlatformTarget:
    # A 32-bit interpreter on 64-bit Windows reports x86 in PROCESSOR_ARCHITECTURE.
    machine = os.environ.get("PROCESSOR_ARCHITEW6432") or platform.machine()
    target = resolve_target(platform.system(), machine)
    return replace(target, interpreter_is_64bit=sys.maxsize > 2**32)


def check_architecture(target: PlatformTarget, arch: Architecture) -> None:
    if target.os_name != "windows":
        raise ConfigurationError(f"runtime installers are only published for Windows, not {target.os_name}")
    if arch.info.is_64bit and not target.os_is_64bit:
        raise ConfigurationError(f"cannot install a {arch.value} runtime on a 32-bit operating system")


class InstallLayout:
    """Where runtimes and the VC++ runtime live for each architecture on this host."""

    def __init__(self, target: PlatformTarget, config: InstallConfig | None = None) -> None:
        self.target = target
        self.config = config or InstallConfig()

    def install_root(self, arch: Architecture) -> Path:
        if not self.target.os_is_64bit:
            return Path(self.config.program_files) / "dotnet"
        return Path(getattr(self.config, arch.info.program_files_key)) / "dotnet"

    def runtime_dir(self, arch: Architecture, channel: Channel) -> Path:
        return self.install_root(arch).joinpath(*channel.info.install_subdir)

    def prerequisite_path(self, arch: Architecture) -> Path:
        if not self.target.os_is_64bit:
            system_dir = "System32"
        elif arch.info.is_64bit and not self.target.interpreter_is_64bit:
            # WOW64 redirects System32 to SysWOW64 for 32-bit processes.
            system_dir = "Sysnative"
        else:
            system_dir = arch.info.system_dir_key
        return Path(self.config.system_root) / system_dir / PREREQUISITE_DLL

    def vc_redist_url(self, arch: Architecture) -> str:
        return self.config.vc_redist_url.format(arch=arch.info.file_suffix)
