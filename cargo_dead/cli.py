"""CLI entry point: cargo-dead.

Subcommands:
    cargo dead check               # Report unused dependencies
    cargo dead fix                 # Report and remove them from Cargo.toml
    cargo dead check --only-dev    # Restrict to one dependency kind
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Callable

import click

from cargo_dead.analyzer import DependencyAnalyzer
from cargo_dead.core.logging import setup_logging
from cargo_dead.exceptions import CargoDeadError
from cargo_dead.metadata import load_workspace
from cargo_dead.models import FilterSelection, Package, PackageReport

# Name cargo passes as the first argument to ``cargo-dead`` when run as ``cargo dead``
_CARGO_SUBCOMMAND = "dead"


_FILTER_OPTIONS = [
    click.option("--only-regular", is_flag=True, help="Only check [dependencies]"),
    click.option("--only-dev", is_flag=True, help="Only check [dev-dependencies]"),
    click.option("--only-build", is_flag=True, help="Only check [build-dependencies]"),
    click.option(
        "-p", "--package", "package_names", multiple=True, help="Workspace member to analyze"
    ),
    click.option(
        "--extra-dir",
        "extra_dirs",
        multiple=True,
        help="Extra package subdirectory to scan (e.g. benches, examples)",
    ),
    click.option(
        "--format",
        "output_format",
        type=click.Choice(["text", "json"]),
        default="text",
        show_default=True,
        help="Report format",
    ),
]


def _filter_options(func: Callable) -> Callable:
    """Options shared by ``check`` and ``fix``."""
    for option in reversed(_FILTER_OPTIONS):
        func = option(func)
    return func


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
@click.option(
    "--manifest-path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to the workspace Cargo.toml",
)
@click.pass_context
def main(ctx: click.Context, verbose: bool, manifest_path: Path | None) -> None:
    """Detect and optionally remove unused dependencies in a Rust project or workspace."""
    setup_logging("DEBUG" if verbose else None)
    ctx.obj = {"manifest_path": manifest_path}


@main.command("check")
@_filter_options
@click.pass_context
def check(ctx: click.Context, **options) -> None:
    """Report dependencies never referenced from source."""
    _run_analysis(ctx, fix=False, **options)


@main.command("fix")
@_filter_options
@click.pass_context
def fix(ctx: click.Context, **options) -> None:
    """Report unused dependencies and remove them from Cargo.toml."""
    _run_analysis(ctx, fix=True, **options)


def _run_analysis(
    ctx: click.Context,
    fix: bool,
    only_regular: bool,
    only_dev: bool,
    only_build: bool,
    package_names: tuple[str, ...],
    extra_dirs: tuple[str, ...],
    output_format: str,
) -> None:
    selection = FilterSelection(only_regular=only_regular, only_dev=only_dev, only_build=only_build)
    analyzer = DependencyAnalyzer(selection=selection, extra_dirs=extra_dirs)

    # Reports gathered so far; JSON output still lists them if a later package fails.
    done: list[PackageReport] = []
    try:
        packages = _select_packages(load_workspace(ctx.obj["manifest_path"]), package_names)
        for report in analyzer.analyze_workspace(packages, fix=fix):
            done.append(report)
            if output_format == "text":
                _print_report(report)
    except CargoDeadError as e:
        if output_format == "json":
            _print_json(done, error=str(e))
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if output_format == "json":
        _print_json(done)


def _print_json(reports: list[PackageReport], error: str | None = None) -> None:
    payload: dict = {"reports": [r.to_dict() for r in reports], "error": error}
    click.echo(json.dumps(payload, indent=2))


def _select_packages(packages: list[Package], names: tuple[str, ...]) -> list[Package]:
    if not names:
        return packages
    known = {p.name for p in packages}
    missing = [n for n in names if n not in known]
    if missing:
        raise CargoDeadError(f"package(s) not found in workspace: {', '.join(missing)}")
    return [p for p in packages if p.name in names]


def _print_report(report: PackageReport) -> None:
    click.echo(f"\nAnalyzing package: {report.package}")
    for dep in report.unused:
        click.echo(f"Unused {dep.kind.label}: {dep.name} (package: {report.package})")
    if report.manifest_updated:
        click.echo(f"Updated {report.manifest_path}")


def _strip_cargo_subcommand(argv: list[str]) -> list[str]:
    """Drop the ``dead`` argument cargo inserts when invoked as ``cargo dead``."""
    if argv and argv[0] == _CARGO_SUBCOMMAND:
        return argv[1:]
    return argv


def run() -> None:
    """Console-script entry point."""
    main(args=_strip_cargo_subcommand(sys.argv[1:]), prog_name="cargo-dead")


if __name__ == "__main__":
    run()
