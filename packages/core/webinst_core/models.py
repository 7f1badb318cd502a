"""Version, channel and architecture models shared by the resolver and the installer."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from .errors import VersionParseError


# https://semver.org/#is-there-a-suggested-regular-expression-regex-to-check-a-semver-string
_SEMVER_RE = re.compile(
    r"^(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    r"(?:-(?P<prerelease>(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
    r"(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+(?P<build>[0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$",
    re.ASCII,
)


@dataclass(frozen=True)
class SemVer:
    major: int
    minor: int
    patch: int
    prerelease: str | None = None
    build: str | None = None

    @classmethod
    def parse(cls, text: str) -> "SemVer":
        match = _SEMVER_RE.match(text.strip())
        if match is None:
            raise VersionParseError(f"not a semantic version: {text!r}")
        return cls(
            major=int(match.group("major")),
            minor=int(match.group("minor")),
            patch=int(match.group("patch")),
            prerelease=match.group("prerelease"),
            build=match.group("build"),
        )

    @property
    def is_prerelease(self) -> bool:
        return self.prerelease is not None

    def __str__(self) -> str:
        out = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            out += f"-{self.prerelease}"
        if self.build:
            out += f"+{self.build}"
        return out


@dataclass(frozen=True)
class VersionRequest:
    """A user supplied ``major[.minor[.patch]]`` version.

    Only trailing components may be omitted. The request doubles as a version
    range: given components must match exactly, omitted ones match anything.
    """

    major: int
    minor: int | None = None
    patch: int | None = None

    def __post_init__(self) -> None:
        if self.patch is not None and self.minor is None:
            raise VersionParseError("a patch version requires a minor version")
        for part in (self.major, self.minor, self.patch):
            if part is not None and part < 0:
                raise VersionParseError("version components must be non-negative")

    @classmethod
    def parse(cls, text: str) -> "VersionRequest":
        raw = text.strip()
        pieces = raw.split(".")
        if not 1 <= len(pieces) <= 3 or not all(p.isascii() and p.isdigit() for p in pieces):
            raise VersionParseError(f"invalid version number: {text!r} (expected major[.minor[.patch]])")
        numbers = [int(p) for p in pieces] + [None] * (3 - len(pieces))
        return cls(major=numbers[0], minor=numbers[1], patch=numbers[2])

    @property
    def is_complete(self) -> bool:
        return self.minor is not None and self.patch is not None

    def as_version(self) -> SemVer:
        if not self.is_complete:
            raise ValueError(f"version request {self} is partial")
        return SemVer(self.major, self.minor, self.patch)  # type: ignore[arg-type]

    def matches(self, version: SemVer) -> bool:
        # Requests cannot name a pre-release, so pre-releases never satisfy one.
        if version.is_prerelease:
            return False
        if version.major != self.major:
            return False
        if self.minor is not None and version.minor != self.minor:
            return False
        if self.patch is not None and version.patch != self.patch:
            return False
        return True

    def __str__(self) -> str:
        out = str(self.major)
        if self.minor is not None:
            out += f".{self.minor}"
            if self.patch is not None:
                out += f".{self.patch}"
        return out


class Channel(str, Enum):
    DOTNET = "dotnet"
    ASPCORE = "aspcore"
    WINDOWSDESKTOP = "windowsdesktop"

    @property
    def info(self) -> "ChannelInfo":
        return CHANNELS[self]


class Architecture(str, Enum):
    X86 = "x86"
    X64 = "x64"

    @property
    def info(self) -> "ArchitectureInfo":
        return ARCHITECTURES[self]


@dataclass(frozen=True)
class ChannelInfo:
    index_path: str
    install_subdir: tuple[str, ...]
    file_prefix: str
    product_version_on_cdn: bool


@dataclass(frozen=True)
class ArchitectureInfo:
    file_suffix: str
    program_files_key: str
    system_dir_key: str
    is_64bit: bool


CHANNELS: dict[Channel, ChannelInfo] = {
    Channel.DOTNET: ChannelInfo(
        index_path="Runtime",
        install_subdir=("shared", "Microsoft.NETCore.App"),
        file_prefix="dotnet-runtime",
        product_version_on_cdn=True,
    ),
    Channel.ASPCORE: ChannelInfo(
        index_path="aspnetcore/Runtime",
        install_subdir=("shared", "Microsoft.AspNetCore.App"),
        file_prefix="aspnetcore-runtime",
        product_version_on_cdn=False,
    ),
    Channel.WINDOWSDESKTOP: ChannelInfo(
        index_path="Runtime",
        install_subdir=("shared", "Microsoft.WindowsDesktop.App"),
        file_prefix="windowsdesktop-runtime",
        product_version_on_cdn=True,
    ),
}

# program_files_key / system_dir_key name the entries used on a 64-bit OS;
# a 32-bit OS only has the native locations.
ARCHITECTURES: dict[Architecture, ArchitectureInfo] = {
    Architecture.X86: ArchitectureInfo(
        file_suffix="x86",
        program_files_key="program_files_x86",
        system_dir_key="SysWOW64",
        is_64bit=False,
    ),
    Architecture.X64: ArchitectureInfo(
        file_suffix="x64",
        program_files_key="program_files",
        system_dir_key="System32",
        is_64bit=True,
    ),
}
