"""Source tree scanning and per-package usage aggregation."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Iterator

import structlog

from cargo_dead.extractor import ReferenceExtractor, RustReferenceExtractor

log = structlog.get_logger("cargo_dead.sources")

SOURCE_SUFFIX = ".rs"

# Package subdirectories always scanned, in order
SOURCE_DIRS: tuple[str, ...] = ("src", "tests")

BUILD_SCRIPT = "build.rs"


def iter_source_files(root: Path) -> Iterator[Path]:
    """Lazily yield every Rust source file under *root*.

    Directories that cannot be listed are skipped.
    """
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for name in sorted(filenames):
            if name.endswith(SOURCE_SUFFIX):
                yield Path(dirpath) / name


def iter_package_sources(package_root: Path, extra_dirs: Iterable[str] = ()) -> Iterator[Path]:
    """Yield the source files of one package: ``src/``, ``tests/``, then ``build.rs``."""
    for dirname in (*SOURCE_DIRS, *extra_dirs):
        directory = package_root / dirname
        if directory.is_dir():
            yield from iter_source_files(directory)

    build_script = package_root / BUILD_SCRIPT
    if build_script.is_file():
        yield build_script


def collect_used_identifiers(
    package_root: Path,
    extractor: ReferenceExtractor | None = None,
    extra_dirs: Iterable[str] = (),
) -> set[str]:
    """Union the path roots referenced anywhere in a package's sources."""
    extractor = extractor or RustReferenceExtractor()
    used: set[str] = set()
    file_count = 0
    for path in iter_package_sources(package_root, extra_dirs):
        try:
            content = path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            log.debug("sources.file_skipped", path=str(path), error=str(exc))
            continue
        roots = extractor.extract(content)
        if roots is None:
            log.debug("sources.file_unparsable", path=str(path))
            continue
        used.update(roots)
        file_count += 1

    log.debug(
        "sources.collected",
        package_root=str(package_root),
        files=file_count,
        identifiers=len(used),
    )
    return used
