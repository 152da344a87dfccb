"""CLI interface for Hound."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click

from hound import __version__
from hound.core.engine import FileHound
from hound.errors import ConfigurationError, EntryIOError, HoundError
from hound.settings import Settings
from hound.utils import bytes_to_human

log = logging.getLogger(__name__)


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


@click.group()
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug)")
@click.version_option(version=__version__, prog_name="hound")
def main(verbose: int) -> None:
    """Hound: find files the easy way."""
    _setup_logging(verbose)


# ── find ─────────────────────────────────────────────────────────────────

@main.command()
@click.argument("paths", nargs=-1, type=click.Path(file_okay=False, path_type=str))
@click.option("--ext", "-e", "extensions", multiple=True, help="Keep files with this extension")
@click.option("--match", "-m", "globs", multiple=True, help="Keep names matching this shell glob")
@click.option("--discard", "-x", "discards", multiple=True, help="Skip names matching this regex (prunes directories)")
@click.option("--not", "negate", is_flag=True, help="Invert --match/--discard")
@click.option("--size", "-s", "sizes", multiple=True, help="Size criterion, e.g. '>1k' (repeatable)")
@click.option("--empty", is_flag=True, help="Only zero-length entries")
@click.option("--modified", default=None, help="Modification age, e.g. '<10 days'")
@click.option("--accessed", default=None, help="Access age, e.g. '>2 weeks'")
@click.option("--changed", default=None, help="Status change age, e.g. '<3 hours'")
@click.option("--depth", "-d", type=click.IntRange(min=0), default=None, help="Maximum recursion depth")
@click.option("--ignore-hidden", is_flag=True, help="Skip hidden files")
@click.option("--ignore-hidden-dirs", is_flag=True, help="Skip hidden files and hidden directories")
@click.option("--directories", is_flag=True, help="List directories instead of files")
@click.option("--full-path", is_flag=True, help="Apply --match/--discard to absolute paths")
@click.option("--concurrency", type=click.IntRange(min=1), default=None, help="Parallel filesystem calls")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--long", "-l", "long_format", is_flag=True, help="Show sizes next to paths")
def find(
    paths: tuple[str, ...],
    extensions: tuple[str, ...],
    globs: tuple[str, ...],
    discards: tuple[str, ...],
    negate: bool,
    sizes: tuple[str, ...],
    empty: bool,
    modified: str | None,
    accessed: str | None,
    changed: str | None,
    depth: int | None,
    ignore_hidden: bool,
    ignore_hidden_dirs: bool,
    directories: bool,
    full_path: bool,
    concurrency: int | None,
    as_json: bool,
    long_format: bool,
) -> None:
    """Find files under PATHS (default: current directory)."""
    hound = FileHound(concurrency=concurrency) if concurrency else FileHound.create()
    skipped: list[EntryIOError] = []

    try:
        hound.paths(*paths)
        if extensions:
            hound.ext(*extensions)
        if globs:
            hound.match(*globs)
        if discards:
            hound.discard(*discards)
        if negate:
            hound.not_()
        for criterion in sizes:
            hound.size(criterion)
        if empty:
            hound.is_empty()
        if modified:
            hound.modified(modified)
        if accessed:
            hound.accessed(accessed)
        if changed:
            hound.changed(changed)
        if depth is not None:
            hound.depth(depth)
        if ignore_hidden or ignore_hidden_dirs:
            hound.ignore_hidden_files(include_hidden_dirs=ignore_hidden_dirs)
        if directories:
            hound.directory()
        if full_path:
            hound.use_full_path()
    except ConfigurationError as exc:
        raise click.UsageError(str(exc)) from exc

    try:
        results = hound.find_sync(on_error=skipped.append)
    except HoundError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(results, indent=2))
    elif long_format:
        for path in results:
            click.echo(f"{_human_size(path):>10s}  {path}")
    else:
        for path in results:
            click.echo(path)

    if skipped:
        log.info("%d entries could not be read", len(skipped))


def _human_size(path: str) -> str:
    try:
        return bytes_to_human(Path(path).stat().st_size)
    except OSError:
        return "?"


# ── config ───────────────────────────────────────────────────────────────

@main.group()
def config() -> None:
    """Read and write settings."""


@config.command("get")
@click.argument("key")
def config_get(key: str) -> None:
    """Print a setting by dot-notation KEY."""
    value = Settings.instance().get(key)
    if value is None:
        click.echo(f"Setting '{key}' is not set.", err=True)
        sys.exit(1)
    click.echo(json.dumps(value))


@config.command("set")
@click.argument("key")
@click.argument("value")
def config_set(key: str, value: str) -> None:
    """Store VALUE (parsed as JSON when possible) under KEY."""
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError:
        parsed = value
    settings = Settings.instance()
    settings.set(key, parsed)
    click.echo(f"{key} = {json.dumps(parsed)}")
