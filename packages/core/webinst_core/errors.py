"""Error types raised while resolving, downloading and installing a runtime."""

from __future__ import annotations


class WebInstError(Exception):
    """Base class for every failure the installer reports to the user."""


class VersionParseError(WebInstError, ValueError):
    pass


class ResolutionError(WebInstError):
    pass


class NoVersionsAvailable(WebInstError):
    def __init__(self, major: int) -> None:
        super().__init__(f"No available versions found for major version {major}")
        self.major = major


class VersionNotFound(WebInstError):
    def __init__(self, version: str) -> None:
        super().__init__(f"requested runtime version {version} does not exist")
        self.version = version


class DownloadFailed(WebInstError):
    def __init__(self, product_version: str, status: int | None = None) -> None:
        detail = f" (HTTP {status})" if status is not None else ""
        super().__init__(f"failed to download runtime version {product_version}{detail}")
        self.product_version = product_version
        self.status = status


class PrerequisiteFailed(WebInstError):
    def __init__(self, installer: str, status: int | None = None) -> None:
        detail = f" (HTTP {status})" if status is not None else ""
        super().__init__(f"failed to download Visual C++ runtime installer {installer}{detail}")
        self.installer = installer
        self.status = status


class ConfigurationError(WebInstError):
    pass


class TransportError(WebInstError):
    def __init__(self, url: str, reason: object) -> None:
        super().__init__(f"request to {url} failed: {reason}")
        self.url = url
        self.reason = reason
