"""Installer settings schema and load helpers."""

from __future__ import annotations

import json
import os
import platform
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


DEFAULT_BASE_URL = "https://dotnetcli.blob.core.windows.net/dotnet"
DEFAULT_CDN_URL = "https://dotnetcli.azureedge.net/dotnet"
DEFAULT_VC_REDIST_URL = "https://aka.ms/vs/17/release/vc_redist.{arch}.exe"


@dataclass
class IndexConfig:
    base_url: str = DEFAULT_BASE_URL
    cdn_url: str = DEFAULT_CDN_URL
    timeout_s: float = 120.0
    download_timeout_s: float = 600.0
    minor_probe_limit: int | None = None


@dataclass
class TlsConfig:
    ca_bundle: str | None = None
    allow_insecure: bool = False


@dataclass
class InstallConfig:
    # ProgramW6432 survives WOW64, where ProgramFiles points at the x86 directory.
    program_files: str = field(
        default_factory=lambda: os.environ.get("ProgramW6432") or os.environ.get("ProgramFiles", r"C:\Program Files")
    )
    program_files_x86: str = field(
        default_factory=lambda: os.environ.get("ProgramFiles(x86)", r"C:\Program Files (x86)")
    )
    system_root: str = field(default_factory=lambda: os.environ.get("SystemRoot", r"C:\Windows"))
    install_prerequisites: bool = True
    vc_redist_url: str = DEFAULT_VC_REDIST_URL


@dataclass
class LoggingConfig:
    keep_files: int = 7
    level: str = "INFO"


@dataclass
class WebInstConfig:
    index: IndexConfig = field(default_factory=IndexConfig)
    tls: TlsConfig = field(default_factory=TlsConfig)
    install: InstallConfig = field(default_factory=InstallConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def config_path() -> Path:
    if platform.system() == "Windows":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        return base / "dotnet-webinst" / "config.json"
    return Path.home() / ".config" / "dotnet-webinst" / "config.json"


def _merge(dataclass_type, raw: dict[str, Any]):
    defaults = dataclass_type()  # type: ignore[misc]
    if not isinstance(raw, dict):
        return defaults
    for k, v in raw.items():
        if hasattr(defaults, k):
            setattr(defaults, k, v)
    return defaults


def _normalize_index(cfg: WebInstConfig) -> None:
    cfg.index.base_url = str(cfg.index.base_url).rstrip("/")
    cfg.index.cdn_url = str(cfg.index.cdn_url).rstrip("/")
    cfg.index.timeout_s = float(max(1.0, float(cfg.index.timeout_s)))
    cfg.index.download_timeout_s = float(max(cfg.index.timeout_s, float(cfg.index.download_timeout_s)))
    if cfg.index.minor_probe_limit is not None:
        cfg.index.minor_probe_limit = max(1, int(cfg.index.minor_probe_limit))


def _normalize_logging(cfg: WebInstConfig) -> None:
    cfg.logging.keep_files = max(2, int(cfg.logging.keep_files))
    level = str(cfg.logging.level).upper()
    cfg.logging.level = level if level in ("DEBUG", "INFO", "WARNING", "ERROR") else "INFO"


def _apply_env(cfg: WebInstConfig) -> None:
    base_url = os.environ.get("WEBINST_BASE_URL", "").strip()
    if base_url:
        cfg.index.base_url = base_url
    cdn_url = os.environ.get("WEBINST_CDN_URL", "").strip()
    if cdn_url:
        cfg.index.cdn_url = cdn_url
    ca_bundle = os.environ.get("WEBINST_CA_BUNDLE", "").strip()
    if ca_bundle:
        cfg.tls.ca_bundle = ca_bundle
    if os.environ.get("WEBINST_ALLOW_INSECURE_TLS", "").strip() == "1":
        cfg.tls.allow_insecure = True


def load_config(path: Path | None = None) -> WebInstConfig:
    path = path or config_path()
    data: dict[str, Any] = {}
    if path.exists():
        try:
            loaded = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            loaded = {}
        if isinstance(loaded, dict):
            data = loaded

    cfg = WebInstConfig(
        index=_merge(IndexConfig, data.get("index", {})),
        tls=_merge(TlsConfig, data.get("tls", {})),
        install=_merge(InstallConfig, data.get("install", {})),
        logging=_merge(LoggingConfig, data.get("logging", {})),
    )

    _apply_env(cfg)
    _normalize_index(cfg)
    _normalize_logging(cfg)
    return cfg
