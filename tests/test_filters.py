"""Tests for the filter pipeline."""

from __future__ import annotations

from pathlib import Path

import pytest

from hound.core.filters import FilterGroup, FilterPipeline
from hound.models.descriptor import EntryKind, FileDescriptor, StatInfo


def descriptor(name: str, size: int = 0, kind: EntryKind = EntryKind.FILE) -> FileDescriptor:
    return FileDescriptor(
        path=Path("/root", name),
        root="/root",
        kind=kind,
        depth=0,
        stat=StatInfo(size_bytes=size, is_directory=kind is EntryKind.DIRECTORY, is_hidden=name.startswith(".")),
    )


def ends_with(suffix: str):
    return lambda subject: subject.endswith(suffix)


class TestFilterPipeline:
    @pytest.mark.asyncio
    async def test_empty_pipeline_accepts_everything(self):
        assert await FilterPipeline().evaluate(descriptor("anything"))

    @pytest.mark.asyncio
    async def test_groups_are_anded(self):
        pipeline = FilterPipeline()
        pipeline.add_pattern(ends_with(".json"))
        pipeline.add_attribute(lambda d: d.size_bytes > 10)

        assert await pipeline.evaluate(descriptor("big.json", size=20))
        assert not await pipeline.evaluate(descriptor("small.json", size=5))
        assert not await pipeline.evaluate(descriptor("big.txt", size=20))

    @pytest.mark.asyncio
    async def test_negation_only_inverts_the_pattern_group(self):
        pipeline = FilterPipeline()
        pipeline.add_pattern(ends_with(".json"))
        pipeline.add_attribute(lambda d: d.size_bytes > 10)
        pipeline.set_negate_pattern(True)

        assert await pipeline.evaluate(descriptor("big.txt", size=20))
        assert not await pipeline.evaluate(descriptor("small.txt", size=5))
        assert not await pipeline.evaluate(descriptor("big.json", size=20))

    def test_negation_without_pattern_filters_rejects(self):
        pipeline = FilterPipeline()
        pipeline.set_negate_pattern(True)
        assert not pipeline.match_pattern(descriptor("a.txt"))

    def test_only_pruning_filters_prune(self):
        pipeline = FilterPipeline()
        pipeline.add_pattern(ends_with(".json"))
        pipeline.add_pattern(lambda subject: subject != "vendor", prunes=True)

        assert pipeline.should_prune(descriptor("vendor", kind=EntryKind.DIRECTORY))
        assert not pipeline.should_prune(descriptor("src", kind=EntryKind.DIRECTORY))

    def test_negated_pipelines_never_prune(self):
        pipeline = FilterPipeline()
        pipeline.add_pattern(lambda subject: False, prunes=True)
        pipeline.set_negate_pattern(True)
        assert not pipeline.should_prune(descriptor("anything", kind=EntryKind.DIRECTORY))

    def test_full_path_subject(self):
        pipeline = FilterPipeline()
        pipeline.add_pattern(lambda subject: subject.startswith("/root/"))
        assert not pipeline.match_pattern(descriptor("a.txt"))
        pipeline.set_full_path(True)
        assert pipeline.match_pattern(descriptor("a.txt"))

    @pytest.mark.asyncio
    async def test_custom_filters_run_last(self):
        calls: list[str] = []
        pipeline = FilterPipeline()
        pipeline.add_attribute(lambda d: d.size_bytes > 0)
        pipeline.add_custom(lambda d: calls.append(d.name) or True)

        assert not await pipeline.evaluate(descriptor("empty.txt"))
        assert await pipeline.evaluate(descriptor("full.txt", size=3))
        assert calls == ["full.txt"]

    @pytest.mark.asyncio
    async def test_async_custom_filters(self):
        async def never(d):
            return False

        pipeline = FilterPipeline()
        pipeline.add_custom(never)
        assert not await pipeline.match_custom(descriptor("a.txt"))

    def test_needs_stat(self):
        pipeline = FilterPipeline()
        pipeline.add_pattern(ends_with(".txt"))
        pipeline.add_attribute(lambda d: d.name.endswith(".txt"), needs_stat=False)
        assert not pipeline.needs_stat

        pipeline.add_attribute(lambda d: d.size_bytes == 0)
        assert pipeline.needs_stat

    def test_copy_is_independent(self):
        pipeline = FilterPipeline()
        pipeline.add_pattern(ends_with(".txt"))
        clone = pipeline.copy()

        pipeline.add_pattern(ends_with(".md"))
        pipeline.set_negate_pattern(True)

        assert len(clone.filters(FilterGroup.PATTERN)) == 1
        assert not clone.negated
        assert len(pipeline) == 2
