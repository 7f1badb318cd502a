import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "core"))
sys.path.insert(0, str(ROOT / "packages" / "release_index"))

from webinst_core.config import IndexConfig
from webinst_core.models import Channel, SemVer
from webinst_index.product import ProductVersionResolver, download_url
from webinst_index.transport import TextResponse

BASE = "https://base.test/dotnet"
CDN = "https://cdn.test/dotnet"


class _FakeTransport:
    def __init__(self, responses: dict[str, TextResponse]):
        self.responses = responses
        self.requests: list[str] = []

    def get_text(self, url: str) -> TextResponse:
        self.requests.append(url)
        return self.responses.get(url, TextResponse(status=404, text=""))

    def download(self, url, dest):
        raise AssertionError("unexpected download")


class ProductVersionTests(unittest.TestCase):
    def setUp(self):
        self.config = IndexConfig(base_url=BASE, cdn_url=CDN)

    def test_uses_trimmed_product_version_from_cdn(self):
        url = f"{CDN}/Runtime/3.1.5/productVersion.txt"
        transport = _FakeTransport({url: TextResponse(status=200, text="3.1.5.29016\r\n")})
        resolver = ProductVersionResolver(transport, self.config)

        self.assertEqual(resolver.resolve(Channel.DOTNET, SemVer(3, 1, 5)), "3.1.5.29016")
        self.assertEqual(transport.requests, [url])

    def test_falls_back_to_release_version_when_missing(self):
        resolver = ProductVersionResolver(_FakeTransport({}), self.config)
        self.assertEqual(resolver.resolve(Channel.WINDOWSDESKTOP, SemVer(5, 0, 17)), "5.0.17")

    def test_falls_back_on_server_error(self):
        url = f"{CDN}/Runtime/6.0.1/productVersion.txt"
        resolver = ProductVersionResolver(_FakeTransport({url: TextResponse(status=500, text="oops")}), self.config)
        self.assertEqual(resolver.resolve(Channel.DOTNET, SemVer(6, 0, 1)), "6.0.1")

    def test_falls_back_on_empty_body(self):
        url = f"{CDN}/Runtime/6.0.1/productVersion.txt"
        resolver = ProductVersionResolver(_FakeTransport({url: TextResponse(status=200, text="  \n")}), self.config)
        self.assertEqual(resolver.resolve(Channel.DOTNET, SemVer(6, 0, 1)), "6.0.1")

    def test_aspcore_reads_from_base_aspnetcore_path(self):
        url = f"{BASE}/aspnetcore/Runtime/6.0.25/productVersion.txt"
        transport = _FakeTransport({url: TextResponse(status=200, text="6.0.25")})
        resolver = ProductVersionResolver(transport, self.config)

        self.assertEqual(resolver.resolve(Channel.ASPCORE, SemVer(6, 0, 25)), "6.0.25")
        self.assertEqual(transport.requests, [url])

    def test_prerelease_version_in_url(self):
        version = SemVer.parse("6.0.0-rc.2.21480.5")
        resolver = ProductVersionResolver(_FakeTransport({}), self.config)
        self.assertEqual(
            resolver.product_version_url(Channel.DOTNET, version),
            f"{CDN}/Runtime/6.0.0-rc.2.21480.5/productVersion.txt",
        )


class DownloadUrlTests(unittest.TestCase):
    def test_channel_specific_file_names(self):
        cfg = IndexConfig(base_url=BASE, cdn_url=CDN)
        version = SemVer(5, 0, 17)
        self.assertEqual(
            download_url(cfg, Channel.DOTNET, version, "5.0.17", "x64"),
            f"{BASE}/Runtime/5.0.17/dotnet-runtime-5.0.17-win-x64.exe",
        )
        self.assertEqual(
            download_url(cfg, Channel.ASPCORE, version, "5.0.17", "x86"),
            f"{BASE}/aspnetcore/Runtime/5.0.17/aspnetcore-runtime-5.0.17-win-x86.exe",
        )
        self.assertEqual(
            download_url(cfg, Channel.WINDOWSDESKTOP, version, "5.0.17.1", "x64"),
            f"{BASE}/Runtime/5.0.17/windowsdesktop-runtime-5.0.17.1-win-x64.exe",
        )


if __name__ == "__main__":
    unittest.main()
