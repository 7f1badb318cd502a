"""Installer bootstrap service: resolve, download and silently run runtime installers."""

from __future__ import annotations

import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from webinst_core.config import WebInstConfig
from webinst_core.errors import DownloadFailed, PrerequisiteFailed, VersionNotFound
from webinst_core.logging_setup import get_logger
from webinst_core.models import Architecture, Channel, SemVer, VersionRequest
from webinst_index import HttpTransport, ProductVersionResolver, Transport, VersionSelector, download_url

from .probe import is_installed
from .resolver import InstallLayout, PlatformTarget, check_architecture, detect_target


ProgressCallback = Callable[[str], None]

log = get_logger("service")

RUNTIME_INSTALLER_ARGS = ("/install", "/quiet", "/norestart")
VC_REDIST_ARGS = ("/install", "/quiet", "/norestart")
NOT_FOUND = 404


@dataclass(frozen=True)
class InstallPlan:
    arch: Architecture
    channel: Channel
    version: SemVer
    product_version: str
    url: str

    @property
    def file_name(self) -> str:
        return self.url.rsplit("/", 1)[-1]


@dataclass(frozen=True)
class InstallResult:
    already_installed: bool
    plan: InstallPlan | None = None
    exit_code: int | None = None
    prerequisite_installed: bool = False


def build_transport(config: WebInstConfig) -> HttpTransport:
    return HttpTransport(
        tls=config.tls,
        timeout_s=config.index.timeout_s,
        download_timeout_s=config.index.download_timeout_s,
    )


def download_file(transport: Transport, url: str, dest: Path) -> int:
    log.info(f"downloading {url}", extra={"event": "download_started", "url": url, "path": str(dest)})
    return transport.download(url, dest)


def run_installer(installer_path: Path, args: tuple[str, ...] = RUNTIME_INSTALLER_ARGS) -> int:
    code = subprocess.call([str(installer_path), *args])
    log.info(
        f"{installer_path.name} exited with code {code}",
        extra={"event": "installer_exited", "path": str(installer_path), "exit_code": code},
    )
    return code


def ensure_prerequisite(
    transport: Transport,
    layout: InstallLayout,
    arch: Architecture,
    progress: ProgressCallback | None = None,
) -> bool:
    """Install the VC++ runtime the .NET installers depend on if it is missing.

    Returns True when an installer was run.
    """
    progress = progress or (lambda _msg: None)
    dll = layout.prerequisite_path(arch)
    if dll.exists():
        return False

    url = layout.vc_redist_url(arch)
    progress(f"Installing Visual C++ runtime ({arch.value})")
    with tempfile.TemporaryDirectory(prefix="dotnet-webinst-") as tmp:
        installer_path = Path(tmp) / url.rsplit("/", 1)[-1]
        status = download_file(transport, url, installer_path)
        if status != 200:
            raise PrerequisiteFailed(installer_path.name, status)
        run_installer(installer_path, VC_REDIST_ARGS)
    return True


def plan_install(
    transport: Transport,
    config: WebInstConfig,
    arch: Architecture,
    channel: Channel,
    request: VersionRequest,
) -> InstallPlan:
    version = VersionSelector(transport, config.index).resolve(channel, request)
    product_version = ProductVersionResolver(transport, config.index).resolve(channel, version)
    url = download_url(config.index, channel, version, product_version, arch.info.file_suffix)
    return InstallPlan(arch=arch, channel=channel, version=version, product_version=product_version, url=url)


def download_and_run(transport: Transport, plan: InstallPlan, progress: ProgressCallback | None = None) -> int:
    progress = progress or (lambda _msg: None)
    with tempfile.TemporaryDirectory(prefix="dotnet-webinst-") as tmp:
        installer_path = Path(tmp) / plan.file_name
        progress(f"Downloading {plan.file_name}")
        status = download_file(transport, plan.url, installer_path)

        if status == NOT_FOUND:
            raise VersionNotFound(str(plan.version))
        if status != 200:
            raise DownloadFailed(plan.product_version, status)

        progress(f"Running {plan.file_name}")
        return run_installer(installer_path)


def install_runtime(
    arch: Architecture,
    channel: Channel,
    request: VersionRequest,
    config: WebInstConfig | None = None,
    transport: Transport | None = None,
    target: PlatformTarget | None = None,
    progress: ProgressCallback | None = None,
) -> InstallResult:
    config = config or WebInstConfig()
    transport = transport or build_transport(config)
    target = target or detect_target()
    progress = progress or (lambda _msg: None)

    check_architecture(target, arch)
    layout = InstallLayout(target, config.install)

    prerequisite_installed = False
    if config.install.install_prerequisites:
        prerequisite_installed = ensure_prerequisite(transport, layout, arch, progress)

    if is_installed(layout, arch, channel, request):
        progress(f"{channel.value} {request} is already installed")
        return InstallResult(already_installed=True, prerequisite_installed=prerequisite_installed)

    progress(f"Resolving {channel.value} {request}")
    plan = plan_install(transport, config, arch, channel, request)
    code = download_and_run(transport, plan, progress)
    return InstallResult(
        already_installed=False,
        plan=plan,
        exit_code=code,
        prerequisite_installed=prerequisite_installed,
    )
