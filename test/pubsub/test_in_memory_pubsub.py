import asyncio

import pytest

from modlink.model.attribute_ref import AttributeRef
from modlink.model.enum.overflow_policy_enum import OverflowPolicy
from modlink.schema.pubsub_config_schema import PubSubConfig
from modlink.util.pubsub.in_memory_pubsub import InMemoryPubSub

VOLTAGE = AttributeRef("meter1", "voltage")
CURRENT = AttributeRef("meter1", "current")


async def _start_subscriber(gen):
    task = asyncio.create_task(gen.__anext__())
    await asyncio.sleep(0)
    return task


class TestInMemoryPubSub:
    @pytest.mark.asyncio
    async def test_subscriber_receives_published_update(self):
        pubsub = InMemoryPubSub()
        gen = pubsub.subscribe()
        pending = await _start_subscriber(gen)

        await pubsub.publish(VOLTAGE, 230.5)
        update = await asyncio.wait_for(pending, timeout=1)

        assert update.ref == VOLTAGE
        assert update.value == 230.5
        await gen.aclose()

    @pytest.mark.asyncio
    async def test_ref_filter(self):
        pubsub = InMemoryPubSub()
        gen = pubsub.subscribe(CURRENT)
        pending = await _start_subscriber(gen)

        await pubsub.publish(VOLTAGE, 1)
        await pubsub.publish(CURRENT, 2)
        update = await asyncio.wait_for(pending, timeout=1)

        assert update.ref == CURRENT
        assert update.value == 2
        await gen.aclose()

    @pytest.mark.asyncio
    async def test_latest_tracks_last_value(self):
        pubsub = InMemoryPubSub()

        await pubsub.publish(VOLTAGE, 1)
        await pubsub.publish(VOLTAGE, 2)

        assert pubsub.latest(VOLTAGE).value == 2
        assert pubsub.latest(CURRENT) is None

    @pytest.mark.asyncio
    async def test_drop_oldest_keeps_newest_updates(self):
        pubsub = InMemoryPubSub(PubSubConfig(queue_maxsize=2, overflow_policy="drop_oldest"))
        gen = pubsub.subscribe()
        pending = await _start_subscriber(gen)

        for value in (1, 2, 3):
            await pubsub.publish(VOLTAGE, value)

        assert (await asyncio.wait_for(pending, timeout=1)).value == 2
        assert (await gen.__anext__()).value == 3
        assert pubsub.get_dropped_count() == 1
        await gen.aclose()

    @pytest.mark.asyncio
    async def test_drop_newest_discards_incoming(self):
        pubsub = InMemoryPubSub(PubSubConfig(queue_maxsize=2, overflow_policy=OverflowPolicy.DROP_NEWEST))
        gen = pubsub.subscribe()
        pending = await _start_subscriber(gen)

        for value in (1, 2, 3):
            await pubsub.publish(VOLTAGE, value)

        assert (await asyncio.wait_for(pending, timeout=1)).value == 1
        assert (await gen.__anext__()).value == 2
        assert pubsub.reset_dropped_count() == 1
        assert pubsub.get_dropped_count() == 0
        await gen.aclose()

    @pytest.mark.asyncio
    async def test_closing_subscription_unregisters_queue(self):
        pubsub = InMemoryPubSub()
        gen = pubsub.subscribe()
        pending = await _start_subscriber(gen)
        await pubsub.publish(VOLTAGE, 1)
        await pending

        assert pubsub.get_queue_stats()["subscriber_count"] == 1
        await gen.aclose()
        assert pubsub.get_queue_stats()["subscriber_count"] == 0

    @pytest.mark.asyncio
    async def test_keep_latest_disabled(self):
        pubsub = InMemoryPubSub(PubSubConfig(keep_latest=False))

        await pubsub.publish(VOLTAGE, 1)

        assert pubsub.latest(VOLTAGE) is None


def test_config_accepts_short_policy_names():
    config = PubSubConfig.model_validate({"maxsize": 5, "drop_policy": "Newest"})

    assert config.queue_maxsize == 5
    assert config.overflow_policy is OverflowPolicy.DROP_NEWEST
