"""Tests for the command line interface."""

from __future__ import annotations

import json

from click.testing import CliRunner

from hound.cli import main


def run(*args: str):
    return CliRunner().invoke(main, list(args))


class TestFind:
    def test_lists_matching_files(self, fixture_dir, qualify):
        result = run("find", str(fixture_dir / "justFiles"), "--ext", "json")
        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == qualify("justFiles/a.json", "justFiles/b.json")

    def test_json_output(self, fixture_dir, qualify):
        result = run("find", str(fixture_dir / "sizes"), "--size", ">=1k", "--json")
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == qualify("sizes/1k.txt", "sizes/2k.txt")

    def test_size_range(self, fixture_dir, qualify):
        result = run("find", str(fixture_dir / "sizes"), "-s", ">1", "-s", "<1k")
        assert result.output.splitlines() == qualify("sizes/10b.txt")

    def test_discard_with_not(self, fixture_dir, qualify):
        result = run("find", str(fixture_dir / "mixed"), "--discard", "json", "--not")
        assert result.output.splitlines() == qualify(
            "mixed/aabbcc.json", "mixed/ab.json", "mixed/ba.json"
        )

    def test_depth_and_hidden(self, fixture_dir, qualify):
        result = run("find", str(fixture_dir / "visibility"), "--ignore-hidden", "--depth", "0")
        assert result.output.splitlines() == qualify("visibility/visible.json")

    def test_directories(self, fixture_dir, qualify):
        result = run("find", str(fixture_dir / "nested"), "--directories")
        assert result.output.splitlines() == qualify("nested/mydir")

    def test_long_format_shows_sizes(self, fixture_dir):
        result = run("find", str(fixture_dir / "sizes"), "--match", "2k*", "--long")
        assert result.exit_code == 0, result.output
        assert "2.0 KB" in result.output

    def test_missing_root_exits_with_error(self, tmp_path):
        result = run("find", str(tmp_path / "does-not-exist"))
        assert result.exit_code == 1
        assert "Error:" in result.output
        assert "does-not-exist" in result.output

    def test_bad_size_is_a_usage_error(self, fixture_dir):
        result = run("find", str(fixture_dir), "--size", "huge")
        assert result.exit_code == 2
        assert "Invalid size criterion" in result.output

    def test_bad_regex_is_a_usage_error(self, fixture_dir):
        result = run("find", str(fixture_dir), "--discard", "(")
        assert result.exit_code == 2

    def test_concurrency_option(self, fixture_dir, qualify):
        result = run("find", str(fixture_dir / "justFiles"), "--concurrency", "1", "--empty")
        assert result.output.splitlines() == qualify("justFiles/a.json", "justFiles/dummy.txt")


class TestConfig:
    def test_set_then_get(self, isolate_settings):
        result = run("config", "set", "walker.concurrency", "8")
        assert result.exit_code == 0
        assert result.output.strip() == "walker.concurrency = 8"
        assert json.loads(isolate_settings.read_text()) == {"walker": {"concurrency": 8}}

    def test_get(self, isolate_settings):
        isolate_settings.parent.mkdir(parents=True)
        isolate_settings.write_text(json.dumps({"walker": {"concurrency": 3}}))
        result = run("config", "get", "walker.concurrency")
        assert result.exit_code == 0
        assert result.output.strip() == "3"

    def test_get_unset_key(self):
        result = run("config", "get", "nope")
        assert result.exit_code == 1
        assert "not set" in result.output

    def test_set_plain_string(self):
        result = run("config", "set", "ui.theme", "dark")
        assert result.output.strip() == 'ui.theme = "dark"'


def test_version():
    result = run("--version")
    assert result.exit_code == 0
    assert "1.0.0" in result.output
