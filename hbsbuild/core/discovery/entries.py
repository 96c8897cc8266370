# hbsbuild/core/discovery/entries.py
import asyncio
from typing import List

from .pattern_matching import expand_pattern


async def expand_pattern_async(pattern: str) -> List[str]:
    # glob walks block on the filesystem, so they run off the event loop.
    return await asyncio.to_thread(expand_pattern, pattern)
