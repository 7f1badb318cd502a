"""HTTP access to the runtime release index."""

from __future__ import annotations

import http.client
import shutil
import ssl
import urllib.error
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import certifi

from webinst_core.config import TlsConfig
from webinst_core.errors import TransportError


USER_AGENT = "dotnet-webinst/0.1"
CHUNK_SIZE = 1024 * 1024


@dataclass(frozen=True)
class TextResponse:
    status: int
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class Transport(Protocol):
    def get_text(self, url: str) -> TextResponse: ...

    def download(self, url: str, dest: Path) -> int: ...


def build_ssl_context(tls: TlsConfig | None = None) -> ssl.SSLContext:
    """Create TLS context for index and installer downloads with explicit CA handling."""
    tls = tls or TlsConfig()
    if tls.allow_insecure:
        return ssl._create_unverified_context()

    if tls.ca_bundle:
        return ssl.create_default_context(cafile=tls.ca_bundle)

    return ssl.create_default_context(cafile=certifi.where())


class HttpTransport:
    """Plain GET requests; error statuses are returned, connection failures raised."""

    def __init__(
        self,
        tls: TlsConfig | None = None,
        timeout_s: float = 120.0,
        download_timeout_s: float = 600.0,
    ) -> None:
        self.timeout_s = timeout_s
        self.download_timeout_s = download_timeout_s
        self._context = build_ssl_context(tls)

    def _urlopen(self, url: str, timeout: float):
        request = urllib.request.Request(url, headers={"User-Agent": USER_AGENT, "Accept": "*/*"})
        return urllib.request.urlopen(request, timeout=timeout, context=self._context)

    def get_text(self, url: str) -> TextResponse:
        try:
            with self._urlopen(url, self.timeout_s) as response:
                body = response.read().decode("utf-8-sig", errors="replace")
                return TextResponse(status=int(response.status), text=body)
        except urllib.error.HTTPError as exc:
            exc.close()
            return TextResponse(status=int(exc.code), text="")
        except urllib.error.URLError as exc:
            raise TransportError(url, exc.reason) from exc
        except (http.client.HTTPException, OSError) as exc:
            raise TransportError(url, exc) from exc

    def download(self, url: str, dest: Path) -> int:
        """Stream ``url`` into ``dest``; the file is only created on a success status."""
        try:
            with self._urlopen(url, self.download_timeout_s) as response:
                with dest.open("wb") as fh:
                    shutil.copyfileobj(response, fh, CHUNK_SIZE)
                    fh.flush()
                return int(response.status)
        except urllib.error.HTTPError as exc:
            exc.close()
            return int(exc.code)
        except urllib.error.URLError as exc:
            raise TransportError(url, exc.reason) from exc
        except (http.client.HTTPException, OSError) as exc:
            raise TransportError(url, exc) from exc
