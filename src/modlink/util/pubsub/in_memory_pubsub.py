import asyncio
import logging
from typing import Any, AsyncGenerator

from modlink.model.attribute_ref import AttributeRef
from modlink.model.attribute_update import AttributeUpdate
from modlink.model.enum.overflow_policy_enum import OverflowPolicy
from modlink.schema.pubsub_config_schema import PubSubConfig
from modlink.util.pubsub.base import AttributeUpdateSink

logger = logging.getLogger("InMemoryPubSub")


class InMemoryPubSub(AttributeUpdateSink):
    """
    In-memory attribute-update fan-out with per-subscriber bounded queues.

    Design goals:
    - publish must be non-blocking (put_nowait), so a slow consumer never stalls polling
    - overflow behavior is controlled by PubSubConfig.overflow_policy
    - dropped counts are tracked for observability
    """

    def __init__(self, config: PubSubConfig | None = None) -> None:
        self._config: PubSubConfig = config or PubSubConfig()
        self._subscribers: list[tuple[asyncio.Queue, AttributeRef | None]] = []
        self._latest: dict[AttributeRef, AttributeUpdate] = {}
        self._dropped: int = 0

    # ----------------------------
    # Stats
    # ----------------------------

    def get_dropped_count(self) -> int:
        return self._dropped

    def reset_dropped_count(self) -> int:
        count, self._dropped = self._dropped, 0
        return count

    def get_queue_stats(self) -> dict[str, Any]:
        return {
            "subscriber_count": len(self._subscribers),
            "max_queue_size": self._config.queue_maxsize,
            "overflow_policy": self._config.overflow_policy.value,
            "current_queue_sizes": [q.qsize() for q, _ in self._subscribers],
            "total_dropped": self._dropped,
        }

    def latest(self, ref: AttributeRef) -> AttributeUpdate | None:
        """Last update published for `ref`, if any."""
        return self._latest.get(ref)

    # ----------------------------
    # Sink / subscribe interface
    # ----------------------------

    async def publish(self, ref: AttributeRef, value: Any) -> None:
        update = AttributeUpdate(ref=ref, value=value)
        if self._config.keep_latest:
            self._latest[ref] = update

        for queue, ref_filter in list(self._subscribers):
            if ref_filter is not None and ref_filter != ref:
                continue
            self._offer(queue, update)

    async def subscribe(self, ref: AttributeRef | None = None) -> AsyncGenerator[AttributeUpdate, None]:
        """Yield updates as they are published; restrict to one attribute with `ref`."""
        queue: asyncio.Queue = asyncio.Queue(maxsize=self._config.queue_maxsize)
        entry = (queue, ref)
        self._subscribers.append(entry)

        try:
            while True:
                yield await queue.get()
        finally:
            if entry in self._subscribers:
                self._subscribers.remove(entry)

    async def close(self) -> None:
        self._subscribers.clear()
        self._latest.clear()
        self._dropped = 0

    def _offer(self, queue: asyncio.Queue, update: AttributeUpdate) -> None:
        try:
            queue.put_nowait(update)
            return
        except asyncio.QueueFull:
            pass

        if self._config.overflow_policy is OverflowPolicy.DROP_NEWEST:
            self._dropped += 1
            return

        # DROP_OLDEST: remove oldest, then add new
        removed = True
        try:
            queue.get_nowait()
        except asyncio.QueueEmpty:
            removed = False
        try:
            queue.put_nowait(update)
        except asyncio.QueueFull:
            self._dropped += 1
            logger.warning(f"[PubSub] Unexpected QueueFull after get_nowait, dropping update for {update.ref}")
            return
        if removed:
            self._dropped += 1
