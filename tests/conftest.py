"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from hound.settings import Settings

FIXTURE_FILES: dict[str, int] = {
    "justFiles/a.json": 0,
    "justFiles/b.json": 20,
    "justFiles/dummy.txt": 0,
    "nested/c.json": 0,
    "nested/d.json": 0,
    "nested/mydir/e.json": 0,
    "deeplyNested/c.json": 0,
    "deeplyNested/d.json": 0,
    "deeplyNested/mydir/e.json": 0,
    "deeplyNested/mydir/mydir2/f.json": 0,
    "deeplyNested/mydir/mydir2/y.json": 0,
    "deeplyNested/mydir/mydir2/mydir3/z.json": 0,
    "mixed/aabbcc.json": 0,
    "mixed/ab.json": 0,
    "mixed/ab.txt": 0,
    "mixed/ba.json": 0,
    "sizes/1b.txt": 1,
    "sizes/10b.txt": 10,
    "sizes/1k.txt": 1024,
    "sizes/2k.txt": 2048,
    "visibility/.hidden/visible.json": 0,
    "visibility/.invisible.json": 0,
    "visibility/visible.json": 0,
    "custom/passed.txt": 1024,
    "custom/failed.txt": 10,
}


@pytest.fixture(autouse=True)
def isolate_settings(tmp_path, monkeypatch):
    """Point settings at a temp config dir and drop the cached singleton."""
    config_home = tmp_path / "config"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    monkeypatch.setattr(Settings, "_instance", None)
    return config_home / "hound" / "settings.json"


@pytest.fixture
def fixture_dir(tmp_path) -> Path:
    """Build the on-disk fixture trees used across the suite."""
    root = tmp_path / "fixtures"
    for relative, size in FIXTURE_FILES.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"x" * size)
    return root


@pytest.fixture
def qualify(fixture_dir) -> Callable[..., list[str]]:
    """Turn fixture-relative names into the absolute strings find() returns."""

    def _qualify(*names: str) -> list[str]:
        return [str(fixture_dir / name) for name in names]

    return _qualify
