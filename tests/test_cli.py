"""Tests for the CLI entry point using Click's CliRunner."""

import json

import pytest
from click.testing import CliRunner

from fontshelf.cli import cli
from tests.conftest import make_corrupt_font


@pytest.fixture()
def runner():
    return CliRunner()


@pytest.fixture()
def db_args(tmp_path):
    return ["--db", str(tmp_path / "db" / "fonts.db")]


@pytest.fixture()
def scanned(runner, db_args, font_dir):
    result = runner.invoke(cli, [*db_args, "scan", "--root", str(font_dir)])
    assert result.exit_code == 0, result.output
    return db_args


class TestCLIBasics:
    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Index local font files" in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_unknown_command(self, runner):
        result = runner.invoke(cli, ["nonexistent"])
        assert result.exit_code != 0

    def test_db_from_environment(self, runner, tmp_path, font_dir):
        db = tmp_path / "env.db"
        result = runner.invoke(cli, ["scan", "--root", str(font_dir)], env={"FONTSHELF_DB": str(db)})
        assert result.exit_code == 0
        assert db.exists()


class TestScanCommand:
    def test_scan_reports_counts(self, runner, db_args, font_dir):
        result = runner.invoke(cli, [*db_args, "scan", "--root", str(font_dir)])
        assert result.exit_code == 0
        assert "Scanning 1 directory..." in result.output
        assert "Done: 4 indexed, 0 skipped, 0 pruned (2 families)." in result.output

    def test_scan_counts_skipped(self, runner, db_args, font_dir):
        make_corrupt_font(font_dir / "broken.ttf")
        result = runner.invoke(cli, [*db_args, "scan", "--root", str(font_dir)])
        assert result.exit_code == 0
        assert "4 indexed, 1 skipped" in result.output

    def test_invalid_workers(self, runner, db_args, font_dir):
        result = runner.invoke(cli, [*db_args, "scan", "--root", str(font_dir), "--workers", "0"])
        assert result.exit_code != 0


class TestBrowseCommands:
    def test_families_empty(self, runner, db_args):
        result = runner.invoke(cli, [*db_args, "families"])
        assert result.exit_code == 0
        assert "No fonts indexed yet" in result.output

    def test_families(self, runner, scanned):
        result = runner.invoke(cli, [*scanned, "families"])
        assert result.exit_code == 0
        assert "Inter  (3 variant(s))" in result.output
        assert "Fira Code  (1 variant(s))  [Monospace / Code]" in result.output
        assert "2 families" in result.output

    def test_families_json(self, runner, scanned):
        result = runner.invoke(cli, [*scanned, "families", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert {row["family"] for row in data} == {"Inter", "Fira Code"}

    def test_families_category_filter(self, runner, scanned):
        result = runner.invoke(cli, [*scanned, "families", "--category", "monospace", "--json"])
        assert [row["family"] for row in json.loads(result.output)] == ["Fira Code"]

    def test_variants_ordered(self, runner, scanned):
        result = runner.invoke(cli, [*scanned, "variants", "Inter", "--json"])
        assert result.exit_code == 0
        assert [row["subfamily"] for row in json.loads(result.output)] == ["Regular", "Bold", "Italic"]

    def test_variants_unknown_family(self, runner, scanned):
        result = runner.invoke(cli, [*scanned, "variants", "Nope"])
        assert result.exit_code == 1
        assert "No variants found" in result.output

    def test_recent(self, runner, scanned):
        result = runner.invoke(cli, [*scanned, "recent"])
        assert result.exit_code == 0
        assert "4 font file(s)" in result.output


class TestFavoriteCommands:
    def test_favorite_round_trip(self, runner, scanned):
        result = runner.invoke(cli, [*scanned, "favorite", "Inter"])
        assert result.exit_code == 0
        assert "Inter added to favorites (3 variant(s))" in result.output

        listed = runner.invoke(cli, [*scanned, "favorites", "--json"])
        assert [row["family"] for row in json.loads(listed.output)] == ["Inter"]

        runner.invoke(cli, [*scanned, "favorite", "Inter", "--off"])
        listed = runner.invoke(cli, [*scanned, "favorites", "--json"])
        assert json.loads(listed.output) == []

    def test_favorite_survives_rescan(self, runner, scanned, font_dir):
        runner.invoke(cli, [*scanned, "favorite", "Fira Code"])
        runner.invoke(cli, [*scanned, "scan", "--root", str(font_dir)])
        listed = runner.invoke(cli, [*scanned, "favorites", "--json"])
        assert [row["family"] for row in json.loads(listed.output)] == ["Fira Code"]

    def test_favorite_unknown_family(self, runner, scanned):
        result = runner.invoke(cli, [*scanned, "favorite", "Nope"])
        assert result.exit_code == 1


class TestInspectCommand:
    def test_inspect_font(self, runner, feature_font):
        result = runner.invoke(cli, ["inspect", str(feature_font)])
        assert result.exit_code == 0
        assert "Family:     Featured Sans" in result.output
        assert "kern, liga" in result.output

    def test_inspect_corrupt_font(self, runner, tmp_path):
        path = make_corrupt_font(tmp_path / "broken.ttf")
        result = runner.invoke(cli, ["inspect", str(path)])
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_inspect_missing_file(self, runner, tmp_path):
        result = runner.invoke(cli, ["inspect", str(tmp_path / "nope.ttf")])
        assert result.exit_code != 0


class TestMigrateCommand:
    def test_migrate_nothing_to_do(self, runner, scanned):
        result = runner.invoke(cli, [*scanned, "migrate"])
        assert result.exit_code == 0
        assert "Category migration complete: 0 font(s) updated" in result.output
