"""Tests for CLI commands — cargo metadata is mocked."""

from __future__ import annotations

import json
from unittest.mock import patch

import tomlkit
from click.testing import CliRunner

from cargo_dead.cli import _strip_cargo_subcommand, main
from cargo_dead.exceptions import MetadataError
from cargo_dead.models import DependencyKind


def _invoke(args, packages=None, side_effect=None):
    runner = CliRunner()
    with patch("cargo_dead.cli.load_workspace", return_value=packages, side_effect=side_effect):
        return runner.invoke(main, args)


# ── check ──


class TestCheck:
    def test_reports_unused(self, scenario_package, scenario_manifest):
        result = _invoke(["check"], [scenario_package])
        assert result.exit_code == 0
        assert "Analyzing package: app" in result.output
        assert "Unused dependency: serde_json (package: app)" in result.output
        assert "once_cell" not in result.output
        assert "Updated" not in result.output
        assert scenario_package.manifest_path.read_text() == scenario_manifest

    def test_only_dev_filter(self, scenario_package):
        result = _invoke(["check", "--only-dev"], [scenario_package])
        assert result.exit_code == 0
        assert "Unused" not in result.output

    def test_json_format(self, scenario_package):
        result = _invoke(["check", "--format", "json"], [scenario_package])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["error"] is None
        report = data["reports"][0]
        assert report["package"] == "app"
        assert report["unused"] == [{"name": "serde_json", "kind": "dependencies"}]
        assert report["manifest_updated"] is False

    def test_manifest_path_forwarded(self, scenario_package, tmp_path):
        manifest = tmp_path / "Cargo.toml"
        runner = CliRunner()
        with patch("cargo_dead.cli.load_workspace", return_value=[scenario_package]) as load:
            result = runner.invoke(main, ["--manifest-path", str(manifest), "check"])
        assert result.exit_code == 0
        load.assert_called_once_with(manifest)

    def test_package_selection(self, make_package):
        first = make_package('[package]\nname = "first"\n', {}, [], name="first")
        second = make_package('[package]\nname = "second"\n', {}, [], name="second")
        result = _invoke(["check", "-p", "second"], [first, second])
        assert result.exit_code == 0
        assert "Analyzing package: second" in result.output
        assert "Analyzing package: first" not in result.output

    def test_unknown_package(self, scenario_package):
        result = _invoke(["check", "-p", "ghost"], [scenario_package])
        assert result.exit_code == 1
        assert "ghost" in result.output


# ── fix ──


class TestFix:
    def test_removes_and_reports_update(self, scenario_package):
        result = _invoke(["fix"], [scenario_package])
        assert result.exit_code == 0
        assert "Unused dependency: serde_json (package: app)" in result.output
        assert f"Updated {scenario_package.manifest_path}" in result.output
        doc = tomlkit.parse(scenario_package.manifest_path.read_text())
        assert "serde_json" not in doc["dependencies"]
        assert "once_cell" in doc["dev-dependencies"]

    def test_only_build_leaves_regular(self, scenario_package, scenario_manifest):
        result = _invoke(["fix", "--only-build"], [scenario_package])
        assert result.exit_code == 0
        assert "Updated" not in result.output
        assert scenario_package.manifest_path.read_text() == scenario_manifest


# ── errors ──


class TestErrors:
    def test_metadata_failure(self):
        result = _invoke(["check"], side_effect=MetadataError("cargo metadata failed (exit 101)"))
        assert result.exit_code == 1
        assert "Error: cargo metadata failed" in result.output

    def test_broken_manifest_aborts(self, make_package):
        pkg = make_package("[dependencies\n", {}, [("rand", DependencyKind.REGULAR)])
        result = _invoke(["fix"], [pkg])
        assert result.exit_code == 1
        assert "invalid manifest" in result.output

    def test_broken_manifest_in_check(self, make_package):
        pkg = make_package("[dependencies\n", {}, [("rand", DependencyKind.REGULAR)])
        result = _invoke(["check"], [pkg])
        assert result.exit_code == 1
        assert "invalid manifest" in result.output

    def test_json_keeps_reports_before_failure(self, scenario_package, make_package):
        broken = make_package(
            "[dependencies\n", {}, [("rand", DependencyKind.REGULAR)], name="broken"
        )
        result = _invoke(["fix", "--format", "json"], [scenario_package, broken])
        assert result.exit_code == 1

        # stderr may be mixed into output after the JSON document
        data = json.loads(result.output[: result.output.rindex("Error:")])
        assert [r["package"] for r in data["reports"]] == ["app"]
        assert data["reports"][0]["manifest_updated"] is True
        assert data["reports"][0]["removed"] == {"dependencies": ["serde_json"]}
        assert "invalid manifest" in data["error"]
        doc = tomlkit.parse(scenario_package.manifest_path.read_text())
        assert "serde_json" not in doc["dependencies"]


# ── cargo subcommand ──


class TestCargoSubcommand:
    def test_strips_dead(self):
        assert _strip_cargo_subcommand(["dead", "check", "--only-dev"]) == ["check", "--only-dev"]

    def test_direct_invocation_untouched(self):
        assert _strip_cargo_subcommand(["check"]) == ["check"]
        assert _strip_cargo_subcommand([]) == []

    def test_help_lists_commands(self):
        result = CliRunner().invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "check" in result.output
        assert "fix" in result.output
