"""Asset loader collaborator.

The interpreter only passes background references through. When a screen
becomes active its background is handed to an AssetLoader as a
fire-and-forget task; the result is cached and drawn by the renderer, never
inspected here.

    async def __call__(self, ref: str) -> object: ...
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Protocol

logger = logging.getLogger(__name__)

# Strong references to in-flight preloads; asyncio only keeps weak ones.
_inflight: set[asyncio.Task] = set()


class AssetLoader(Protocol):
    async def __call__(self, ref: str) -> Any: ...


class NullAssetLoader:
    """Resolves every reference to itself. Used when no renderer is attached."""

    async def __call__(self, ref: str) -> Any:
        return ref


def preload(loader: AssetLoader, ref: str) -> asyncio.Task | None:
    """Start loading `ref` in the background. Returns None outside an event loop."""
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        logger.debug("no event loop, skipping preload of %s", ref)
        return None

    task = loop.create_task(loader(ref))
    _inflight.add(task)
    task.add_done_callback(_preload_done(ref))
    return task


def _preload_done(ref: str) -> Callable[[asyncio.Task], None]:
    def done(task: asyncio.Task) -> None:
        _inflight.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.warning("Failed to preload asset %s: %s", ref, error)
    return done
