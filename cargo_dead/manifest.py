"""Format-preserving removal of dependency entries from Cargo.toml."""

from __future__ import annotations

from collections.abc import MutableMapping
from pathlib import Path

import structlog
import tomlkit
from tomlkit.exceptions import TOMLKitError
from tomlkit.toml_document import TOMLDocument

from cargo_dead.exceptions import ManifestError
from cargo_dead.models import DependencyKind

log = structlog.get_logger("cargo_dead.manifest")


def load_manifest(manifest_path: Path) -> TOMLDocument:
    """Parse a manifest into an editable document."""
    try:
        raw = manifest_path.read_bytes()
    except OSError as exc:
        raise ManifestError(manifest_path, f"cannot read manifest: {exc}") from exc
    try:
        return tomlkit.parse(raw.decode("utf-8"))
    except (UnicodeDecodeError, TOMLKitError) as exc:
        raise ManifestError(manifest_path, f"invalid manifest: {exc}") from exc


def save_manifest(manifest_path: Path, doc: TOMLDocument) -> None:
    try:
        manifest_path.write_bytes(tomlkit.dumps(doc).encode("utf-8"))
    except OSError as exc:
        raise ManifestError(manifest_path, f"cannot write manifest: {exc}") from exc


def remove_entries(
    doc: TOMLDocument, unused: dict[DependencyKind, list[str]]
) -> dict[DependencyKind, list[str]]:
    """Delete unused keys from the dependency tables of *doc* in place.

    Returns the names actually removed per kind. A missing table, or one that
    is not table-shaped, is left alone.
    """
    removed: dict[DependencyKind, list[str]] = {}
    for kind, names in unused.items():
        if not names:
            continue
        table = doc.get(kind.table)
        if not isinstance(table, MutableMapping):
            log.debug("manifest.table_skipped", table=kind.table)
            continue
        gone = [name for name in names if name in table]
        for name in gone:
            del table[name]
        if gone:
            removed[kind] = gone
    return removed


def remove_unused_dependencies(
    manifest_path: Path,
    unused: dict[DependencyKind, list[str]],
    doc: TOMLDocument | None = None,
) -> dict[DependencyKind, list[str]]:
    """Strip *unused* names from the manifest on disk.

    *doc* is the already-parsed manifest, if the caller has one. The file is
    rewritten only when at least one entry was removed; all other content
    keeps its original formatting.
    """
    if not any(unused.values()):
        return {}

    if doc is None:
        doc = load_manifest(manifest_path)
    removed = remove_entries(doc, unused)
    if removed:
        save_manifest(manifest_path, doc)
        log.info(
            "manifest.updated",
            path=str(manifest_path),
            removed={kind.table: names for kind, names in removed.items()},
        )
    return removed
