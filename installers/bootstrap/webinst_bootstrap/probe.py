"""Detect runtimes that are already installed on this machine."""

from __future__ import annotations

from pathlib import Path

from webinst_core.errors import VersionParseError
from webinst_core.logging_setup import get_logger
from webinst_core.models import Architecture, Channel, SemVer, VersionRequest

from .resolver import InstallLayout


log = get_logger("probe")


def find_installed(runtime_dir: Path, request: VersionRequest) -> SemVer | None:
    """Return the first installed version under ``runtime_dir`` matching ``request``."""
    if not runtime_dir.is_dir():
        return None

    for entry in runtime_dir.iterdir():
        if not entry.is_dir():
            continue
        try:
            version = SemVer.parse(entry.name)
        except VersionParseError:
            log.debug(
                f"skipping non-version directory {entry.name!r}",
                extra={"event": "probe_skip", "path": str(entry)},
            )
            continue
        if request.matches(version):
            return version
    return None


def is_installed(layout: InstallLayout, arch: Architecture, channel: Channel, request: VersionRequest) -> bool:
    runtime_dir = layout.runtime_dir(arch, channel)
    found = find_installed(runtime_dir, request)
    if found is None:
        return False
    log.info(
        f"{channel.value} {found} ({arch.value}) already installed in {runtime_dir}",
        extra={
            "event": "already_installed",
            "channel": channel.value,
            "arch": arch.value,
            "version": str(found),
            "path": str(runtime_dir),
        },
    )
    return True
