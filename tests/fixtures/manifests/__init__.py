"""Builders for manifest documents used across tests.

Digests are derived from a seed string so the same seed always yields the
same value, which keeps expected orderings stable.
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Any

NIGHTLY_FIXTURE = Path(__file__).parent.parent / "channel-rust-nightly.toml"

LINUX = "x86_64-unknown-linux-gnu"
AARCH64 = "aarch64-unknown-linux-gnu"
WINDOWS_GNU = "x86_64-pc-windows-gnu"
WASM = "wasm32-unknown-unknown"

DIST = "https://static.rust-lang.org/dist/2022-11-30"


def sha256_hex(seed: str) -> str:
    """Deterministic SHA-256 hex digest of a seed."""
    return hashlib.sha256(seed.encode()).hexdigest()


def sha1_hex(seed: str) -> str:
    """Deterministic 160-bit hex digest of a seed."""
    return hashlib.sha1(seed.encode()).hexdigest()  # noqa: S324


def load_nightly_text() -> str:
    """Text of the bundled nightly channel manifest."""
    return NIGHTLY_FIXTURE.read_text(encoding="utf-8")


def build(
    package: str,
    target: str,
    *,
    gz: bool = True,
    xz: bool = True,
    **extra: Any,
) -> dict[str, Any]:
    """Available build record with gz and/or xz artifacts."""
    stem = f"{package}-nightly" if target == "*" else f"{package}-nightly-{target}"
    record: dict[str, Any] = {"available": True}
    if gz:
        record["url"] = f"{DIST}/{stem}.tar.gz"
        record["hash"] = sha256_hex(f"{package}-{target}-gz")
    if xz:
        record["xz_url"] = f"{DIST}/{stem}.tar.xz"
        record["xz_hash"] = sha256_hex(f"{package}-{target}-xz")
    record.update(extra)
    return record


def unavailable() -> dict[str, Any]:
    """Build record declared but not available."""
    return {"available": False}


def package(name: str, targets: dict[str, dict[str, Any]], *, versioned: bool = True) -> dict[str, Any]:
    """Package record with version metadata."""
    record: dict[str, Any] = {"target": targets}
    if versioned:
        record["version"] = "1.67.0-nightly (c5d82ed7a 2022-11-29)"
        record["git_commit_hash"] = sha1_hex(name)
    return record


def component(pkg: str, target: str) -> dict[str, str]:
    """Component or extension entry of the rust package."""
    return {"pkg": pkg, "target": target}


def rust_package(hosts: dict[str, dict[str, list[dict[str, str]]]]) -> dict[str, Any]:
    """The "rust" package, one available build per host with its components."""
    targets = {}
    for host, declared in hosts.items():
        targets[host] = build("rust", host, **declared)
    return package("rust", targets)


def manifest_document(
    packages: dict[str, dict[str, Any]],
    *,
    profiles: dict[str, list[str]] | None = None,
    renames: dict[str, str] | None = None,
    manifest_version: str = "2",
) -> dict[str, Any]:
    """Decoded manifest document."""
    document: dict[str, Any] = {
        "manifest-version": manifest_version,
        "date": "2022-11-30",
        "pkg": packages,
    }
    if profiles is not None:
        document["profiles"] = profiles
    if renames is not None:
        document["renames"] = {old: {"to": new} for old, new in renames.items()}
    return document


def rustc_only_document() -> dict[str, Any]:
    """Smallest useful manifest: rustc on x86_64 Linux, nothing on aarch64."""
    return manifest_document(
        {
            "rust": rust_package(
                {
                    LINUX: {"components": [component("rustc", LINUX)]},
                    AARCH64: {},
                }
            ),
            "rustc": package("rustc", {LINUX: build("rustc", LINUX)}),
        },
        profiles={"minimal": ["rustc"]},
    )
