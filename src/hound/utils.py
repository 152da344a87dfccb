"""Shared utility functions."""

from __future__ import annotations

import os
from pathlib import Path


def xdg_config_home() -> Path:
    """Return XDG_CONFIG_HOME, defaulting to ~/.config."""
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))


def bytes_to_human(size_bytes: int) -> str:
    """Convert byte count to a human-readable string."""
    if size_bytes < 0:
        return f"-{bytes_to_human(-size_bytes)}"
    if size_bytes == 0:
        return "0 B"

    units = ("B", "KB", "MB", "GB", "TB")
    value = float(size_bytes)
    for unit in units[:-1]:
        if abs(value) < 1024:
            return f"{value:.1f} {unit}" if unit != "B" else f"{int(value)} B"
        value /= 1024
    return f"{value:.1f} {units[-1]}"


def is_hidden_name(name: str) -> bool:
    """Dotfiles are hidden; ``.`` and ``..`` never reach us from scandir."""
    return name.startswith(".")


def is_ancestor(ancestor: str, path: str) -> bool:
    """True if *ancestor* is a proper parent directory of *path*."""
    if ancestor == path:
        return False
    prefix = ancestor if ancestor.endswith(os.sep) else ancestor + os.sep
    return path.startswith(prefix)
