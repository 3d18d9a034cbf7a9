"""Tests for concurrent gallery assembly."""
import asyncio

import pytest
from gallery_bridge.core.errors import SignedUrlError
from gallery_bridge.core.gallery import assemble_gallery, filter_placeholders
from gallery_bridge.core.generation_types import PLACEHOLDER_NAME, GalleryEntry


@pytest.mark.asyncio
async def test_failed_entry_yields_empty_url_in_place():
    async def resolve(name):
        if name == "b":
            raise SignedUrlError("no access")
        return f"https://signed/{name}"

    entries = await assemble_gallery(["a", "b", "c"], resolve)

    assert entries == [
        GalleryEntry("a", "https://signed/a"),
        GalleryEntry("b", ""),
        GalleryEntry("c", "https://signed/c"),
    ]
    assert [entry.is_renderable for entry in entries] == [True, False, True]


@pytest.mark.asyncio
async def test_lookups_run_concurrently_and_failure_does_not_block_others():
    """`b` only fails after `a` and `c` have both started, which needs concurrency."""
    started: list[str] = []
    others_started = asyncio.Event()

    async def resolve(name):
        started.append(name)
        if {"a", "c"} <= set(started):
            others_started.set()
        if name == "b":
            await others_started.wait()
            raise RuntimeError("boom")
        await asyncio.sleep(0)
        return f"url-{name}"

    entries = await asyncio.wait_for(assemble_gallery(["a", "b", "c"], resolve), timeout=1)

    assert [entry.url for entry in entries] == ["url-a", "", "url-c"]


@pytest.mark.asyncio
async def test_output_order_follows_input_not_completion():
    delays = {"first": 0.03, "second": 0.0, "third": 0.01}

    async def resolve(name):
        await asyncio.sleep(delays[name])
        return name.upper()

    entries = await assemble_gallery(["first", "second", "third"], resolve)

    assert [entry.key for entry in entries] == ["first", "second", "third"]
    assert [entry.url for entry in entries] == ["FIRST", "SECOND", "THIRD"]


@pytest.mark.asyncio
async def test_placeholder_is_excluded_not_resolved():
    resolved = []

    async def resolve(name):
        resolved.append(name)
        return "url"

    names = ["a", PLACEHOLDER_NAME, "b"]
    entries = await assemble_gallery(names, resolve)

    assert len(entries) == len(names) - 1
    assert PLACEHOLDER_NAME not in resolved
    assert [entry.key for entry in entries] == ["a", "b"]


@pytest.mark.asyncio
async def test_empty_listing():
    async def resolve(name):
        raise AssertionError("should not be called")

    assert await assemble_gallery([], resolve) == []
    assert await assemble_gallery([PLACEHOLDER_NAME], resolve) == []


@pytest.mark.asyncio
async def test_all_failures_still_return_full_gallery():
    async def resolve(name):
        raise SignedUrlError(name)

    entries = await assemble_gallery(["x", "y"], resolve)

    assert entries == [GalleryEntry("x", ""), GalleryEntry("y", "")]


def test_filter_placeholders_keeps_order():
    assert filter_placeholders(["b", PLACEHOLDER_NAME, "a"]) == ["b", "a"]
