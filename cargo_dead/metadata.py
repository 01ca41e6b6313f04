"""Workspace metadata provider backed by ``cargo metadata``."""

from __future__ import annotations

import json
import os
import subprocess
from pathlib import Path

import structlog

from cargo_dead.exceptions import MetadataError
from cargo_dead.models import Dependency, DependencyKind, Package

log = structlog.get_logger("cargo_dead.metadata")

# cargo metadata reports regular dependencies with ``"kind": null``
_KINDS: dict[str | None, DependencyKind] = {
    None: DependencyKind.REGULAR,
    "normal": DependencyKind.REGULAR,
    "dev": DependencyKind.DEVELOPMENT,
    "build": DependencyKind.BUILD,
}


def cargo_command() -> str:
    """Cargo binary; cargo exports ``CARGO`` when running a subcommand."""
    return os.environ.get("CARGO", "cargo")


def run_cargo_metadata(manifest_path: Path | None = None) -> dict:
    """Run ``cargo metadata`` and return the decoded JSON document.

    Raises ``MetadataError`` if cargo is missing, exits non-zero, or prints
    something that is not JSON.
    """
    cmd = [cargo_command(), "metadata", "--format-version", "1", "--no-deps"]
    if manifest_path is not None:
        cmd += ["--manifest-path", str(manifest_path)]

    try:
        proc = subprocess.run(cmd, capture_output=True, text=True, check=False)
    except OSError as exc:
        raise MetadataError(f"cannot run {cmd[0]}: {exc}", command=cmd) from exc
    if proc.returncode != 0:
        raise MetadataError(
            f"cargo metadata failed (exit {proc.returncode}): {proc.stderr.strip()}",
            command=cmd,
        )
    try:
        return json.loads(proc.stdout)
    except json.JSONDecodeError as exc:
        raise MetadataError(f"cargo metadata printed invalid JSON: {exc}", command=cmd) from exc


def parse_metadata(data: dict) -> list[Package]:
    """Build the ordered list of workspace member packages from metadata JSON."""
    members = set(data.get("workspace_members") or [])
    packages: list[Package] = []
    for pkg in data.get("packages") or []:
        if pkg.get("id") not in members:
            continue
        dependencies = []
        for dep in pkg.get("dependencies") or []:
            kind = _KINDS.get(dep.get("kind"))
            if kind is None:
                log.debug("metadata.unknown_kind", package=pkg["name"], kind=dep.get("kind"))
                continue
            dependencies.append(Dependency(name=dep["name"], kind=kind))
        packages.append(
            Package(
                name=pkg["name"],
                manifest_path=Path(pkg["manifest_path"]),
                dependencies=tuple(dependencies),
            )
        )
    return packages


def load_workspace(manifest_path: Path | None = None) -> list[Package]:
    """Return the workspace members, in the order cargo lists them."""
    packages = parse_metadata(run_cargo_metadata(manifest_path))
    log.debug("metadata.loaded", packages=[p.name for p in packages])
    return packages
