"""Data models for workspace packages, dependencies and reports."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class DependencyKind(str, Enum):
    """Kind of a declared dependency, as reported by ``cargo metadata``."""

    REGULAR = "normal"
    DEVELOPMENT = "dev"
    BUILD = "build"

    @property
    def table(self) -> str:
        """Top-level Cargo.toml table holding dependencies of this kind."""
        return _TABLES[self]

    @property
    def label(self) -> str:
        return _LABELS[self]


_TABLES = {
    DependencyKind.REGULAR: "dependencies",
    DependencyKind.DEVELOPMENT: "dev-dependencies",
    DependencyKind.BUILD: "build-dependencies",
}

_LABELS = {
    DependencyKind.REGULAR: "dependency",
    DependencyKind.DEVELOPMENT: "dev-dependency",
    DependencyKind.BUILD: "build-dependency",
}


@dataclass(frozen=True)
class Dependency:
    """A single dependency declared in a package manifest."""

    name: str
    kind: DependencyKind = DependencyKind.REGULAR


@dataclass(frozen=True)
class Package:
    """A workspace member package."""

    name: str
    manifest_path: Path
    dependencies: tuple[Dependency, ...] = ()

    @property
    def root(self) -> Path:
        return self.manifest_path.parent


@dataclass(frozen=True)
class FilterSelection:
    """Which dependency kinds to analyze.

    Each flag narrows analysis to its kind; several flags select the union of
    their kinds. With no flag set, every kind is active.
    """

    only_regular: bool = False
    only_dev: bool = False
    only_build: bool = False

    def active_kinds(self) -> tuple[DependencyKind, ...]:
        flags = {
            DependencyKind.REGULAR: self.only_regular,
            DependencyKind.DEVELOPMENT: self.only_dev,
            DependencyKind.BUILD: self.only_build,
        }
        if not any(flags.values()):
            return tuple(DependencyKind)
        return tuple(kind for kind, selected in flags.items() if selected)


@dataclass(frozen=True)
class UnusedDependency:
    """A declared dependency never referenced from the package's source."""

    package: str
    name: str
    kind: DependencyKind


@dataclass
class PackageReport:
    """Result of analyzing (and optionally fixing) one package."""

    package: str
    manifest_path: Path
    unused: list[UnusedDependency] = field(default_factory=list)
    removed: dict[DependencyKind, list[str]] = field(default_factory=dict)
    manifest_updated: bool = False

    def to_dict(self) -> dict:
        return {
            "package": self.package,
            "manifest_path": str(self.manifest_path),
            "unused": [{"name": u.name, "kind": u.kind.table} for u in self.unused],
            "removed": {kind.table: names for kind, names in self.removed.items() if names},
            "manifest_updated": self.manifest_updated,
        }
