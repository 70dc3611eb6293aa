"""In-memory fan-out of server-sent-event chunks, one stream per session."""
from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from typing import AsyncIterator, Dict, Hashable, Set

logger = logging.getLogger(__name__)

_CLOSE = object()


class EventStreamHub:
    """Process-wide pub/sub.  Publishing to a stream nobody listens to is a no-op."""

    def __init__(self, max_queue: int = 256) -> None:
        self._consumers: Dict[Hashable, Set[asyncio.Queue]] = defaultdict(set)
        self._max_queue = max_queue

    async def publish(self, stream_id: Hashable, chunk: str) -> None:
        for queue in list(self._consumers.get(stream_id, ())):
            try:
                queue.put_nowait(chunk)
            except asyncio.QueueFull:
                # a stalled browser tab must not block the controller
                logger.warning(f"Dropping event for slow consumer on stream {stream_id}")

    async def register_consumer(self, stream_id: Hashable) -> AsyncIterator[str]:
        queue: asyncio.Queue = asyncio.Queue(maxsize=self._max_queue)
        self._consumers[stream_id].add(queue)
        logger.debug(f"Consumer registered on stream {stream_id}")
        try:
            while True:
                chunk = await queue.get()
                if chunk is _CLOSE:
                    return
                yield chunk
        finally:
            consumers = self._consumers.get(stream_id)
            if consumers is not None:
                consumers.discard(queue)
                if not consumers:
                    del self._consumers[stream_id]

    async def close(self, stream_id: Hashable) -> None:
        """End every consumer of *stream_id*."""
        for queue in list(self._consumers.get(stream_id, ())):
            try:
                queue.put_nowait(_CLOSE)
            except asyncio.QueueFull:
                queue.get_nowait()
                queue.put_nowait(_CLOSE)

    def consumer_count(self, stream_id: Hashable) -> int:
        return len(self._consumers.get(stream_id, ()))
