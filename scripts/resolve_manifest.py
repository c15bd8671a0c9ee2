#!/usr/bin/env python3
"""
CLI script for resolving an install specification against a channel manifest.

Prints the packages an install needs and the artifacts to download with
their expected digests.

Usage:
    # From a local manifest file:
    python scripts/resolve_manifest.py channel-rust-nightly.toml \
        --host x86_64-unknown-linux-gnu --profile minimal \
        --component clippy --target wasm32-unknown-unknown

    # Fetch the manifest for a toolchain (host taken from the name):
    python scripts/resolve_manifest.py --toolchain nightly-2022-11-30-x86_64-unknown-linux-gnu --json
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

import aiohttp
import orjson

from toolchain_manifest.config import DistConfig
from toolchain_manifest.connectors.dist_client import DistClient
from toolchain_manifest.errors import ManifestError
from toolchain_manifest.install import InstallSpec, PackageDownload, PackageRef, package_ref_sort_key
from toolchain_manifest.logging_config import setup_logging
from toolchain_manifest.manifest import Manifest
from toolchain_manifest.target import TargetTriple, parse_target_triple
from toolchain_manifest.toolchain import Toolchain, parse_toolchain

logger = logging.getLogger(__name__)


def format_resolution(
    host: TargetTriple,
    spec: InstallSpec,
    packages: set[PackageRef],
    downloads: list[PackageDownload] | None,
) -> str:
    """Render a resolution result as text."""
    lines = [f"Host: {host}", f"Profile: {spec.profile}"]
    if spec.components:
        lines.append(f"Components: {', '.join(sorted(spec.components))}")
    if spec.targets:
        lines.append(f"Targets: {', '.join(sorted(spec.targets))}")

    lines.append("")
    lines.append(f"Packages ({len(packages)}):")
    for ref in sorted(packages, key=package_ref_sort_key):
        lines.append(f"  {ref}")

    if downloads is not None:
        lines.append("")
        lines.append(f"Downloads ({len(downloads)}):")
        for download in downloads:
            lines.append(f"  {download.name} {download.version} ({download.target})")
            for artifact in download.artifacts:
                sha256 = artifact.digests.get("sha256")
                lines.append(f"    [{artifact.compression.value}] {artifact.url}")
                if sha256 is not None:
                    lines.append(f"         sha256 {sha256}")
    return "\n".join(lines)


def resolution_to_json(
    host: TargetTriple,
    spec: InstallSpec,
    packages: set[PackageRef],
    downloads: list[PackageDownload] | None,
) -> bytes:
    """Render a resolution result as JSON."""
    data = {
        "host": str(host),
        "profile": spec.profile,
        "components": sorted(spec.components),
        "targets": sorted(spec.targets),
        "packages": [
            {"name": ref.name, "target": str(ref.target)}
            for ref in sorted(packages, key=package_ref_sort_key)
        ],
        "downloads": None if downloads is None else [d.to_dict() for d in downloads],
    }
    return orjson.dumps(data, option=orjson.OPT_INDENT_2)


async def fetch_manifest(toolchain: Toolchain, config: DistConfig) -> Manifest:
    """Fetch a toolchain's manifest from the distribution server."""
    async with DistClient(config) as client:
        return await client.fetch_manifest(toolchain)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Resolve an install specification against a channel manifest.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "input",
        type=Path,
        nargs="?",
        default=None,
        help="Path to a channel manifest (.toml); omit to fetch with --toolchain",
    )
    parser.add_argument(
        "--toolchain",
        type=str,
        default=None,
        help="Toolchain to fetch the manifest for (e.g. nightly-2022-11-30-x86_64-unknown-linux-gnu)",
    )
    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Host triple (default: host of --toolchain)",
    )
    parser.add_argument(
        "--profile",
        type=str,
        default="default",
        help="Profile to install (default: default)",
    )
    parser.add_argument(
        "--component",
        "-c",
        action="append",
        default=[],
        help="Extra component (repeatable)",
    )
    parser.add_argument(
        "--target",
        "-t",
        action="append",
        default=[],
        help="Extra target to install the standard library for (repeatable)",
    )
    parser.add_argument(
        "--packages-only",
        action="store_true",
        help="Resolve packages but not downloads",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON",
    )
    parser.add_argument(
        "--log-format",
        choices=("text", "json"),
        default="text",
        help="Log output format (default: text)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args(argv)

    setup_logging(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        json_format=args.log_format == "json",
    )

    if args.input is None and args.toolchain is None:
        parser.error("either a manifest file or --toolchain is required")

    try:
        toolchain = parse_toolchain(args.toolchain) if args.toolchain else None

        host_text = args.host
        if host_text is None and toolchain is not None and toolchain.host is not None:
            host_text = str(toolchain.host)
        if host_text is None:
            logger.error("No host given: pass --host or a toolchain name with a host")
            return 1
        host = parse_target_triple(host_text)

        if toolchain is not None and args.input is None:
            manifest = asyncio.run(fetch_manifest(toolchain, DistConfig.from_env()))
        else:
            manifest = Manifest.from_toml(args.input.read_text(encoding="utf-8"))

        spec = InstallSpec(
            profile=args.profile,
            components=frozenset(args.component),
            targets=frozenset(args.target),
        )
        packages = manifest.find_packages_for_install(host, spec)
        downloads = None if args.packages_only else manifest.find_downloads_for_install(host, spec)
    except (ManifestError, ValueError, OSError, aiohttp.ClientError) as e:
        logger.error("Failed to resolve install: %s", e)
        return 1

    if args.json:
        print(resolution_to_json(host, spec, packages, downloads).decode())
    else:
        print(format_resolution(host, spec, packages, downloads))
    return 0


if __name__ == "__main__":
    sys.exit(main())
