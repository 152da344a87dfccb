"""Tests for search root normalization."""

from __future__ import annotations

import os

from hound.core.path_set import PathSet, normalize_path


class TestPathSet:
    def test_adding_the_same_path_twice_is_idempotent(self, tmp_path):
        paths = PathSet()
        paths.add(tmp_path, tmp_path)
        paths.add(tmp_path)
        assert paths.get() == [str(tmp_path)]

    def test_ancestors_subsume_descendants(self, tmp_path):
        paths = PathSet()
        paths.add(tmp_path / "a" / "b", tmp_path / "a")
        assert paths.get() == [str(tmp_path / "a")]

    def test_subsumption_across_calls(self, tmp_path):
        paths = PathSet()
        paths.add(tmp_path / "a" / "b")
        paths.add(tmp_path / "a")
        assert paths.get() == [str(tmp_path / "a")]

    def test_shared_name_prefix_is_not_an_ancestor(self, tmp_path):
        paths = PathSet()
        paths.add(tmp_path / "a", tmp_path / "ab", tmp_path / "a-b")
        assert paths.get() == sorted([str(tmp_path / "a"), str(tmp_path / "ab"), str(tmp_path / "a-b")])

    def test_relative_paths_are_made_absolute(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        paths = PathSet()
        paths.add("x", "./y/", "x/../z")
        assert paths.get() == [os.path.join(os.getcwd(), name) for name in ("x", "y", "z")]

    def test_get_returns_a_copy(self, tmp_path):
        paths = PathSet()
        paths.add(tmp_path)
        paths.get().append("/elsewhere")
        assert len(paths) == 1
        assert list(paths) == [str(tmp_path)]

    def test_empty(self):
        paths = PathSet()
        assert not paths
        assert paths.get() == []

    def test_normalize_path_strips_trailing_separators(self, tmp_path):
        assert normalize_path(f"{tmp_path}{os.sep}{os.sep}") == str(tmp_path)
