"""Shared pytest fixtures for cargo-dead tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from cargo_dead.models import Dependency, DependencyKind, Package

SCENARIO_MANIFEST = """\
[package]
name = "app"
version = "0.1.0"
edition = "2021"

[dependencies]
serde_json = "1.0"  # json support
log = { version = "0.4", features = ["std"] }

[dev-dependencies]
once_cell = "1.19"
"""


@pytest.fixture
def make_package(tmp_path: Path):
    """Factory: lay out a package directory and return its ``Package``.

    *files* maps paths relative to the package root to their content.
    *deps* is a list of ``(name, kind)`` pairs.
    """

    def _make(
        manifest: str,
        files: dict[str, str],
        deps: list[tuple[str, DependencyKind]],
        name: str = "app",
    ) -> Package:
        root = tmp_path / name
        root.mkdir()
        manifest_path = root / "Cargo.toml"
        manifest_path.write_text(manifest)
        for rel, content in files.items():
            target = root / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content)
        return Package(
            name=name,
            manifest_path=manifest_path,
            dependencies=tuple(Dependency(n, k) for n, k in deps),
        )

    return _make


@pytest.fixture
def scenario_manifest() -> str:
    return SCENARIO_MANIFEST


@pytest.fixture
def scenario_package(make_package) -> Package:
    """serde_json unused, log and once_cell used."""
    return make_package(
        SCENARIO_MANIFEST,
        {
            "src/lib.rs": (
                "use once_cell::sync::Lazy;\n"
                "\n"
                "static NAME: Lazy<String> = Lazy::new(|| String::from(\"x\"));\n"
                "\n"
                "pub fn hello() {\n"
                "    log::info!(\"hello {}\", *NAME);\n"
                "}\n"
            ),
        },
        [
            ("serde_json", DependencyKind.REGULAR),
            ("log", DependencyKind.REGULAR),
            ("once_cell", DependencyKind.DEVELOPMENT),
        ],
    )
