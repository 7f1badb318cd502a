"""Core models, settings, errors and logging for the runtime web installer."""

from .config import IndexConfig, InstallConfig, LoggingConfig, TlsConfig, WebInstConfig, load_config
from .errors import (
    ConfigurationError,
    DownloadFailed,
    NoVersionsAvailable,
    PrerequisiteFailed,
    ResolutionError,
    TransportError,
    VersionNotFound,
    VersionParseError,
    WebInstError,
)
from .models import ARCHITECTURES, CHANNELS, Architecture, ArchitectureInfo, Channel, ChannelInfo, SemVer, VersionRequest

__all__ = [
    "ARCHITECTURES",
    "Architecture",
    "ArchitectureInfo",
    "CHANNELS",
    "Channel",
    "ChannelInfo",
    "ConfigurationError",
    "DownloadFailed",
    "IndexConfig",
    "InstallConfig",
    "LoggingConfig",
    "NoVersionsAvailable",
    "PrerequisiteFailed",
    "ResolutionError",
    "SemVer",
    "TlsConfig",
    "TransportError",
    "VersionNotFound",
    "VersionParseError",
    "VersionRequest",
    "WebInstConfig",
    "WebInstError",
    "load_config",
]
