"""Product version lookup for installer file names."""

from __future__ import annotations

from webinst_core.config import IndexConfig
from webinst_core.logging_setup import get_logger
from webinst_core.models import Channel, SemVer

from .transport import Transport


log = get_logger("product")


class ProductVersionResolver:
    """Resolves the version string embedded in an installer's file name.

    Patch builds are sometimes renumbered, so the file name can differ from the
    release version. Releases without a ``productVersion.txt`` use the release
    version as is.
    """

    def __init__(self, transport: Transport, config: IndexConfig | None = None) -> None:
        self.transport = transport
        self.config = config or IndexConfig()

    def product_version_url(self, channel: Channel, version: SemVer) -> str:
        info = channel.info
        host = self.config.cdn_url if info.product_version_on_cdn else self.config.base_url
        return f"{host}/{info.index_path}/{version}/productVersion.txt"

    def resolve(self, channel: Channel, version: SemVer) -> str:
        url = self.product_version_url(channel, version)
        response = self.transport.get_text(url)
        product_version = response.text.strip() if response.ok else ""
        if product_version:
            return product_version

        log.info(
            f"no product version for {channel.value} {version} (HTTP {response.status}), using release version",
            extra={
                "event": "product_version_fallback",
                "url": url,
                "status": response.status,
                "version": str(version),
            },
        )
        return str(version)


def download_url(config: IndexConfig, channel: Channel, version: SemVer, product_version: str, file_suffix: str) -> str:
    info = channel.info
    return f"{config.base_url}/{info.index_path}/{version}/{info.file_prefix}-{product_version}-win-{file_suffix}.exe"
