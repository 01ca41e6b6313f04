"""Reconcile declared dependencies against the identifiers used in source."""

from __future__ import annotations

from typing import Iterable

from cargo_dead.models import Dependency, DependencyKind, FilterSelection


def crate_identifier(name: str) -> str:
    """Name under which a dependency is referenced from Rust source.

    Cargo turns hyphens in a package name into underscores for its library
    target, so ``serde-json`` is written ``serde_json`` in code.
    """
    return name.replace("-", "_")


def classify_dependencies(
    dependencies: Iterable[Dependency],
) -> dict[DependencyKind, list[str]]:
    """Split declared dependencies into name lists per kind.

    Order of declaration is kept; a name repeated within one kind (e.g. for
    several targets) is listed once. A name declared under several kinds
    appears under each of them.
    """
    declared: dict[DependencyKind, list[str]] = {kind: [] for kind in DependencyKind}
    for dep in dependencies:
        names = declared[dep.kind]
        if dep.name not in names:
            names.append(dep.name)
    return declared


def resolve_unused(
    declared: dict[DependencyKind, list[str]],
    used: set[str],
    selection: FilterSelection | None = None,
) -> dict[DependencyKind, list[str]]:
    """Return, per kind, the declared names that never appear in *used*.

    Kinds outside *selection* map to an empty list.
    """
    selection = selection or FilterSelection()
    active = selection.active_kinds()
    unused: dict[DependencyKind, list[str]] = {}
    for kind in DependencyKind:
        if kind not in active:
            unused[kind] = []
            continue
        unused[kind] = [
            name for name in declared.get(kind, []) if crate_identifier(name) not in used
        ]
    return unused
