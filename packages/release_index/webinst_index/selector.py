"""Resolve a partial version request to a concrete published runtime release.

The release index has no listing endpoint. Each ``{major}.{minor}`` line
publishes a ``latest.version`` marker whose last non-empty line is the newest
patch release of that line, so the newest minor is found by probing minors
upwards from 0 until the first one that is missing.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Iterable, Iterator

from webinst_core.config import IndexConfig
from webinst_core.errors import NoVersionsAvailable, ResolutionError, VersionParseError
from webinst_core.logging_setup import get_logger
from webinst_core.models import Channel, SemVer, VersionRequest

from .transport import Transport


log = get_logger("selector")

NOT_FOUND = 404


@dataclass(frozen=True)
class MinorProbe:
    minor: int
    found: bool


def newest_before_gap(probes: Iterable[MinorProbe], major: int) -> int:
    """Return the newest minor before the first missing one.

    ``probes`` must be ascending and contiguous from minor 0. The scan stops at
    the first probe that was not found; if the iterable runs out first the last
    found minor is the answer.
    """
    newest: int | None = None
    for probe in probes:
        if not probe.found:
            break
        newest = probe.minor
    if newest is None:
        raise NoVersionsAvailable(major)
    return newest


def parse_latest_version(text: str) -> SemVer:
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    if not lines:
        raise ResolutionError("version file did not contain expected version text")
    try:
        return SemVer.parse(lines[-1])
    except VersionParseError as exc:
        raise ResolutionError(f"version file contained an invalid version: {lines[-1]!r}") from exc


class VersionSelector:
    def __init__(self, transport: Transport, config: IndexConfig | None = None) -> None:
        self.transport = transport
        self.config = config or IndexConfig()

    def index_url(self, channel: Channel) -> str:
        return f"{self.config.base_url}/{channel.info.index_path}"

    def latest_version_url(self, channel: Channel, major: int, minor: int) -> str:
        return f"{self.index_url(channel)}/{major}.{minor}/latest.version"

    def probe_minor(self, channel: Channel, major: int, minor: int) -> MinorProbe:
        url = self.latest_version_url(channel, major, minor)
        response = self.transport.get_text(url)
        log.debug(
            f"probed {major}.{minor} status={response.status}",
            extra={"event": "probe_minor", "channel": channel.value, "url": url, "status": response.status},
        )
        if response.status == NOT_FOUND:
            return MinorProbe(minor=minor, found=False)
        if not response.ok:
            raise ResolutionError(f"release index returned HTTP {response.status} for {url}")
        return MinorProbe(minor=minor, found=True)

    def iter_minor_probes(self, channel: Channel, major: int) -> Iterator[MinorProbe]:
        limit = self.config.minor_probe_limit
        candidates = itertools.count() if limit is None else range(limit)
        for minor in candidates:
            probe = self.probe_minor(channel, major, minor)
            yield probe
            if not probe.found:
                return

    def newest_minor(self, channel: Channel, major: int) -> int:
        return newest_before_gap(self.iter_minor_probes(channel, major), major)

    def latest_patch(self, channel: Channel, major: int, minor: int) -> SemVer:
        url = self.latest_version_url(channel, major, minor)
        response = self.transport.get_text(url)
        if not response.ok:
            raise ResolutionError(f"release index returned HTTP {response.status} for {url}")

        version = parse_latest_version(response.text)
        if version.major != major or version.minor != minor:
            raise ResolutionError(f"{url} advertises {version}, expected a {major}.{minor}.x release")
        log.info(
            f"latest {channel.value} {major}.{minor} release is {version}",
            extra={"event": "latest_version", "channel": channel.value, "version": str(version), "url": url},
        )
        return version

    def resolve(self, channel: Channel, request: VersionRequest) -> SemVer:
        if request.is_complete:
            return request.as_version()

        if request.minor is not None:
            minor = request.minor
        else:
            minor = self.newest_minor(channel, request.major)
            log.info(
                f"newest {channel.value} minor for {request.major} is {minor}",
                extra={"event": "newest_minor", "channel": channel.value, "version": f"{request.major}.{minor}"},
            )

        return self.latest_patch(channel, request.major, minor)
