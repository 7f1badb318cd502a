"""CLI bootstrap installer that resolves, downloads and launches a .NET runtime installer."""

from __future__ import annotations

import argparse
import http.client
import json
import sys
from pathlib import Path

from webinst_core.config import load_config
from webinst_core.errors import VersionParseError, WebInstError
from webinst_core.logging_setup import configure_logging, get_logger
from webinst_core.models import Architecture, Channel, VersionRequest

from .resolver import check_architecture, detect_target
from .service import build_transport, install_runtime, plan_install


def _version_arg(value: str) -> VersionRequest:
    try:
        return VersionRequest.parse(value)
    except VersionParseError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, sort_keys=True, default=str))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dotnet-webinst", description=".NET runtime web installer")
    parser.add_argument(
        "-v",
        "--version",
        required=True,
        type=_version_arg,
        help="Runtime version as major[.minor[.patch]]",
    )
    parser.add_argument(
        "-r",
        "--runtime",
        required=True,
        type=str.lower,
        choices=[c.value for c in Channel],
        help="Runtime flavor to install",
    )
    parser.add_argument(
        "-a",
        "--arch",
        type=str.lower,
        choices=[a.value for a in Architecture],
        default=None,
        help="Installer architecture (defaults to the operating system's)",
    )
    parser.add_argument("--config", default=None, help="Optional path to a JSON settings file")
    parser.add_argument("--dry-run", action="store_true", help="Resolve the installer and print it without downloading")
    parser.add_argument("--verbose", action="store_true", help="Log debug output to the console")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    cfg = load_config(Path(args.config).expanduser() if args.config else None)
    level = "DEBUG" if args.verbose else cfg.logging.level
    configure_logging(keep_files=cfg.logging.keep_files, console=args.verbose, level=level)
    log = get_logger("cli")

    target = detect_target()
    arch = Architecture(args.arch) if args.arch else target.native_arch
    channel = Channel(args.runtime)
    request: VersionRequest = args.version

    try:
        if args.dry_run:
            check_architecture(target, arch)
            plan = plan_install(build_transport(cfg), cfg, arch, channel, request)
            _print_json({
                "arch": plan.arch.value,
                "runtime": plan.channel.value,
                "version": str(plan.version),
                "product_version": plan.product_version,
                "url": plan.url,
            })
            return 0

        result = install_runtime(arch, channel, request, config=cfg, target=target, progress=print)
    except (WebInstError, http.client.HTTPException, OSError) as exc:
        log.error(str(exc), extra={"event": "run_failed"})
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if result.already_installed:
        print(f"{channel.value} {request} ({arch.value}) is already installed")
    elif result.plan is not None:
        print(f"Installer for {channel.value} {result.plan.version} exited with code {result.exit_code}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
