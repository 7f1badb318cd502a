from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "core"))
sys.path.insert(0, str(ROOT / "packages" / "release_index"))

from webinst_core.config import IndexConfig
from webinst_core.errors import NoVersionsAvailable, ResolutionError, TransportError
from webinst_core.models import Channel, SemVer, VersionRequest
from webinst_index.selector import MinorProbe, VersionSelector, newest_before_gap, parse_latest_version
from webinst_index.transport import TextResponse

BASE = "https://index.test/dotnet"


class FakeIndex:
    """In-memory release index; unknown URLs are 404."""

    def __init__(self, pages: dict[str, object] | None = None) -> None:
        self.pages = dict(pages or {})
        self.requests: list[str] = []

    def get_text(self, url: str) -> TextResponse:
        self.requests.append(url)
        page = self.pages.get(url)
        if page is None:
            return TextResponse(status=404, text="")
        if isinstance(page, int):
            return TextResponse(status=page, text="")
        if isinstance(page, Exception):
            raise page
        return TextResponse(status=200, text=str(page))

    def download(self, url: str, dest: Path) -> int:
        raise AssertionError("selector must not download")


def _latest(major: int, minor: int, version: str, prefix: str = "Runtime") -> dict[str, str]:
    return {f"{BASE}/{prefix}/{major}.{minor}/latest.version": f"0a1b2c3d4e5f\n{version}\n"}


def _selector(pages: dict[str, object], **config) -> tuple[VersionSelector, FakeIndex]:
    index = FakeIndex(pages)
    return VersionSelector(index, IndexConfig(base_url=BASE, **config)), index


def test_full_request_needs_no_network() -> None:
    selector, index = _selector({})
    version = selector.resolve(Channel.DOTNET, VersionRequest(5, 1, 3))
    assert version == SemVer(5, 1, 3)
    assert index.requests == []


def test_newest_minor_stops_at_first_gap() -> None:
    pages: dict[str, object] = {}
    for minor in range(3):
        pages.update(_latest(5, minor, f"5.{minor}.4"))
    selector, index = _selector(pages)

    assert selector.newest_minor(Channel.DOTNET, 5) == 2
    assert index.requests[-1] == f"{BASE}/Runtime/5.3/latest.version"
    assert len(index.requests) == 4


def test_newest_minor_without_any_release_fails() -> None:
    selector, _ = _selector({})
    with pytest.raises(NoVersionsAvailable):
        selector.newest_minor(Channel.DOTNET, 9)


def test_partial_major_resolves_newest_minor_then_patch() -> None:
    pages: dict[str, object] = {}
    pages.update(_latest(5, 0, "5.0.17"))
    pages.update(_latest(5, 1, "5.1.9"))
    selector, index = _selector(pages)

    version = selector.resolve(Channel.DOTNET, VersionRequest(5))
    assert version == SemVer(5, 1, 9)
    assert index.requests == [
        f"{BASE}/Runtime/5.0/latest.version",
        f"{BASE}/Runtime/5.1/latest.version",
        f"{BASE}/Runtime/5.2/latest.version",
        f"{BASE}/Runtime/5.1/latest.version",
    ]


def test_partial_major_minor_skips_probe() -> None:
    selector, index = _selector(_latest(3, 1, "3.1.32"))
    version = selector.resolve(Channel.WINDOWSDESKTOP, VersionRequest(3, 1))
    assert version == SemVer(3, 1, 32)
    assert index.requests == [f"{BASE}/Runtime/3.1/latest.version"]


def test_aspcore_uses_its_own_index_path() -> None:
    selector, index = _selector(_latest(6, 0, "6.0.25", prefix="aspnetcore/Runtime"))
    version = selector.resolve(Channel.ASPCORE, VersionRequest(6, 0))
    assert version == SemVer(6, 0, 25)
    assert index.requests == [f"{BASE}/aspnetcore/Runtime/6.0/latest.version"]


def test_latest_version_missing_is_resolution_error() -> None:
    selector, _ = _selector({})
    with pytest.raises(ResolutionError):
        selector.resolve(Channel.DOTNET, VersionRequest(5, 7))


def test_latest_version_server_error_is_resolution_error() -> None:
    selector, _ = _selector({f"{BASE}/Runtime/5.0/latest.version": 500})
    with pytest.raises(ResolutionError):
        selector.resolve(Channel.DOTNET, VersionRequest(5, 0))


def test_probe_server_error_aborts_scan() -> None:
    pages: dict[str, object] = dict(_latest(5, 0, "5.0.17"))
    pages[f"{BASE}/Runtime/5.1/latest.version"] = 503
    selector, _ = _selector(pages)
    with pytest.raises(ResolutionError):
        selector.resolve(Channel.DOTNET, VersionRequest(5))


def test_transport_failure_propagates() -> None:
    selector, _ = _selector({f"{BASE}/Runtime/5.0/latest.version": TransportError("x", "down")})
    with pytest.raises(TransportError):
        selector.resolve(Channel.DOTNET, VersionRequest(5))


def test_unparseable_latest_version_is_resolution_error() -> None:
    selector, _ = _selector({f"{BASE}/Runtime/5.0/latest.version": "abc\nnot-a-version\n"})
    with pytest.raises(ResolutionError):
        selector.resolve(Channel.DOTNET, VersionRequest(5, 0))


def test_latest_version_for_other_line_is_rejected() -> None:
    selector, _ = _selector(_latest(5, 0, "6.0.1"))
    with pytest.raises(ResolutionError):
        selector.resolve(Channel.DOTNET, VersionRequest(5, 0))


def test_probe_limit_returns_last_found_minor() -> None:
    pages: dict[str, object] = {}
    for minor in range(5):
        pages.update(_latest(7, minor, f"7.{minor}.0"))
    selector, index = _selector(pages, minor_probe_limit=2)

    assert selector.newest_minor(Channel.DOTNET, 7) == 1
    assert len(index.requests) == 2


def test_newest_before_gap_policy() -> None:
    probes = [MinorProbe(0, True), MinorProbe(1, True), MinorProbe(2, True), MinorProbe(3, False), MinorProbe(4, True)]
    assert newest_before_gap(probes, 5) == 2
    assert newest_before_gap([MinorProbe(0, True)], 5) == 0
    with pytest.raises(NoVersionsAvailable):
        newest_before_gap([MinorProbe(0, False)], 5)
    with pytest.raises(NoVersionsAvailable):
        newest_before_gap([], 5)


def test_parse_latest_version_uses_last_non_empty_line() -> None:
    text = "d7b3e5c2a1\r\n6.0.0-rc.2.21480.5\r\n\r\n"
    assert str(parse_latest_version(text)) == "6.0.0-rc.2.21480.5"
    with pytest.raises(ResolutionError):
        parse_latest_version("\n \n")
