"""Concurrent gallery reconstruction from a bucket listing."""
import asyncio
import logging
from typing import Awaitable, Callable, Iterable

from .generation_types import PLACEHOLDER_NAME, GalleryEntry

logger = logging.getLogger(__name__)

UrlResolver = Callable[[str], Awaitable[str]]


def filter_placeholders(names: Iterable[str]) -> list[str]:
    """Drop empty-folder placeholder names, keeping listing order."""
    return [name for name in names if name != PLACEHOLDER_NAME]


async def assemble_gallery(names: Iterable[str], resolve: UrlResolver) -> list[GalleryEntry]:
    """Resolve a signed URL for every object name concurrently.

    All lookups are started together and awaited together. A failed lookup is
    logged and yields an entry with an empty URL; it never cancels the other
    lookups or raises to the caller. Output order follows `names`.

    Args:
        names: Object names in listing order.
        resolve: Coroutine function returning the signed URL for one name.

    Returns:
        One GalleryEntry per non-placeholder name.
    """
    keys = filter_placeholders(names)
    urls: list[str] = [""] * len(keys)

    async def resolve_slot(index: int, key: str):
        try:
            urls[index] = await resolve(key) or ""
        except Exception as e:
            logger.error(f"Error creating signed URL for {key}: {e}")

    await asyncio.gather(*(resolve_slot(i, key) for i, key in enumerate(keys)))
    return [GalleryEntry(key=key, url=url) for key, url in zip(keys, urls)]
