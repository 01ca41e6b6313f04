"""cargo-dead: find and remove unused dependencies in Cargo workspaces."""

__version__ = "0.1.0"

from cargo_dead.analyzer import DependencyAnalyzer
from cargo_dead.exceptions import CargoDeadError, ManifestError, MetadataError
from cargo_dead.extractor import ReferenceExtractor, RustReferenceExtractor
from cargo_dead.models import (
    Dependency,
    DependencyKind,
    FilterSelection,
    Package,
    PackageReport,
    UnusedDependency,
)

__all__ = [
    "CargoDeadError",
    "Dependency",
    "DependencyAnalyzer",
    "DependencyKind",
    "FilterSelection",
    "ManifestError",
    "MetadataError",
    "Package",
    "PackageReport",
    "ReferenceExtractor",
    "RustReferenceExtractor",
    "UnusedDependency",
]
