"""Release index access: version selection and product version lookup."""

from .product import ProductVersionResolver, download_url
from .selector import MinorProbe, VersionSelector, newest_before_gap, parse_latest_version
from .transport import HttpTransport, TextResponse, Transport, build_ssl_context

__all__ = [
    "HttpTransport",
    "MinorProbe",
    "ProductVersionResolver",
    "TextResponse",
    "Transport",
    "VersionSelector",
    "build_ssl_context",
    "download_url",
    "newest_before_gap",
    "parse_latest_version",
]
