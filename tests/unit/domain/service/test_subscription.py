"""Unit tests for Subscription and Replica."""

import asyncio

import pytest

from skillconnect.domain.service import Replica, Subscription
from tests.conftest import make_profile


class TestSubscription:
    """Tests for the cancellable snapshot stream."""

    @pytest.mark.asyncio
    async def test_delivers_snapshots_in_order(self):
        """Snapshots arrive in the order the producer emits them."""

        async def produce(emit):
            for i in range(3):
                emit(i)
            await asyncio.Event().wait()

        sub = Subscription("numbers", produce)
        received = [await sub.__anext__() for _ in range(3)]
        await sub.cancel()

        assert received == [0, 1, 2]

    @pytest.mark.asyncio
    async def test_cancel_stops_iteration_and_runs_producer_cleanup(self):
        """Cancelling ends iteration and lets the producer release resources."""
        released = asyncio.Event()

        async def produce(emit):
            try:
                emit("first")
                await asyncio.Event().wait()
            finally:
                released.set()

        sub = Subscription("cleanup", produce)
        assert await sub.__anext__() == "first"

        await sub.cancel()

        assert released.is_set()
        assert not sub.active
        with pytest.raises(StopAsyncIteration):
            await sub.__anext__()

    @pytest.mark.asyncio
    async def test_cancel_is_idempotent(self):
        """A second cancel is a no-op."""

        async def produce(emit):
            await asyncio.Event().wait()

        sub = Subscription("idle", produce)
        await sub.cancel()
        await sub.cancel()

        assert not sub.active

    @pytest.mark.asyncio
    async def test_cancel_wakes_blocked_consumer(self):
        """A consumer waiting for the next snapshot is released by cancel."""

        async def produce(emit):
            await asyncio.Event().wait()

        sub = Subscription("blocked", produce)

        async def consume():
            return [item async for item in sub]

        consumer = asyncio.create_task(consume())
        await asyncio.sleep(0)
        await sub.cancel()

        assert await asyncio.wait_for(consumer, 1.0) == []

    @pytest.mark.asyncio
    async def test_producer_error_surfaces_to_consumer(self):
        """A failing producer raises its error from the consumer's next read."""

        async def produce(emit):
            emit("ok")
            raise RuntimeError("listener broke")

        sub = Subscription("failing", produce)

        assert await sub.__anext__() == "ok"
        with pytest.raises(RuntimeError, match="listener broke"):
            await sub.__anext__()
        with pytest.raises(StopAsyncIteration):
            await sub.__anext__()

    @pytest.mark.asyncio
    async def test_finite_producer_ends_iteration(self):
        """A producer that returns closes the stream."""

        async def produce(emit):
            emit("only")

        sub = Subscription("finite", produce)

        assert [item async for item in sub] == ["only"]

    @pytest.mark.asyncio
    async def test_context_manager_cancels_on_exit(self):
        """Leaving an ``async with`` block cancels the subscription."""

        async def produce(emit):
            emit(1)
            await asyncio.Event().wait()

        async with Subscription("scoped", produce) as sub:
            assert await sub.__anext__() == 1

        assert not sub.active


class TestReplica:
    """Tests for the upsert-by-id consumer cache."""

    def test_upsert_replaces_in_place(self):
        """Patching an entity keeps its position."""
        alice = make_profile("alice")
        bob = make_profile("bob")
        carol = make_profile("carol")
        replica = Replica([alice, bob, carol])

        replica.upsert(bob.model_copy(update={"bio": "patched"}))

        snapshot = replica.snapshot()
        assert [p.id for p in snapshot] == [alice.id, bob.id, carol.id]
        assert snapshot[1].bio == "patched"

    def test_upsert_appends_unknown_entity(self):
        """An entity with a new id goes to the end."""
        alice = make_profile("alice")
        bob = make_profile("bob")
        replica = Replica([alice])

        replica.upsert(bob)

        assert [p.id for p in replica.snapshot()] == [alice.id, bob.id]
        assert len(replica) == 2
        assert bob.id in replica
        assert replica.get(bob.id) == bob
