"""Per-package pipeline: scan -> extract -> aggregate -> classify -> resolve -> fix."""

from __future__ import annotations

from typing import Iterable, Iterator

import structlog

from cargo_dead.extractor import ReferenceExtractor, RustReferenceExtractor
from cargo_dead.manifest import load_manifest, remove_unused_dependencies
from cargo_dead.models import (
    DependencyKind,
    FilterSelection,
    Package,
    PackageReport,
    UnusedDependency,
)
from cargo_dead.resolver import classify_dependencies, resolve_unused
from cargo_dead.sources import collect_used_identifiers

log = structlog.get_logger("cargo_dead.analyzer")


class DependencyAnalyzer:
    """Find (and optionally remove) unused dependencies of workspace packages."""

    def __init__(
        self,
        selection: FilterSelection | None = None,
        extractor: ReferenceExtractor | None = None,
        extra_dirs: Iterable[str] = (),
    ) -> None:
        self._selection = selection or FilterSelection()
        self._extractor = extractor or RustReferenceExtractor()
        self._extra_dirs = tuple(extra_dirs)

    def analyze_package(self, package: Package, fix: bool = False) -> PackageReport:
        """Analyze one package; with *fix*, also rewrite its manifest.

        The manifest is parsed in both modes; errors propagate as
        ``ManifestError``.
        """
        doc = load_manifest(package.manifest_path)
        used = collect_used_identifiers(package.root, self._extractor, self._extra_dirs)
        declared = classify_dependencies(package.dependencies)
        unused = resolve_unused(declared, used, self._selection)

        report = PackageReport(package=package.name, manifest_path=package.manifest_path)
        for kind in DependencyKind:
            for name in unused[kind]:
                report.unused.append(UnusedDependency(package=package.name, name=name, kind=kind))

        log.debug(
            "analyzer.package_done",
            package=package.name,
            used=len(used),
            unused=len(report.unused),
        )

        if fix and report.unused:
            report.removed = remove_unused_dependencies(package.manifest_path, unused, doc)
            report.manifest_updated = bool(report.removed)
        return report

    def analyze_workspace(
        self, packages: Iterable[Package], fix: bool = False
    ) -> Iterator[PackageReport]:
        """Analyze packages one at a time, in the given order."""
        for package in packages:
            yield self.analyze_package(package, fix=fix)
