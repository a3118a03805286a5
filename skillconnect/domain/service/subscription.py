"""Realtime streams.

A ``Subscription`` wraps a background producer task that pushes snapshots
into a queue; the owner iterates it with ``async for`` and must cancel it
when the data is no longer displayed. Cancelling stops the producer, which
in turn closes its change-feed listener.

Snapshots may be followed by patched snapshots for the same entities (for
example once a comment's author resolves). Consumers that cache entities
should key them by id; ``Replica`` does exactly that.
"""

import asyncio
from typing import (
    Awaitable,
    Callable,
    Generic,
    Hashable,
    Iterable,
    Optional,
    Protocol,
    TypeVar,
)

import logfire

T = TypeVar("T")

Emit = Callable[[T], None]

_CLOSED = object()


class _Failed:
    """Queue marker carrying the producer's exception to the consumer."""

    def __init__(self, error: BaseException) -> None:
        self.error = error


class Subscription(Generic[T]):
    """Cancellable, infinite stream of snapshots.

    Usage:
        async with discussion_service.subscribe_threads() as threads:
            async for snapshot in threads:
                render(snapshot)
    """

    def __init__(
        self, name: str, producer: Callable[[Emit[T]], Awaitable[None]]
    ) -> None:
        """Start the producer.

        Must be called from a running event loop.

        Args:
            name: Label used in logs
            producer: Coroutine function receiving an ``emit`` callback; it
                normally runs until cancelled
        """
        self.name = name
        self._queue: asyncio.Queue = asyncio.Queue()
        self._closed = False
        self._task = asyncio.create_task(
            self._run(producer), name=f"subscription:{name}"
        )

    async def _run(self, producer: Callable[[Emit[T]], Awaitable[None]]) -> None:
        try:
            await producer(self._queue.put_nowait)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logfire.error(
                "Subscription producer failed",
                subscription=self.name,
                error=str(e),
                error_type=type(e).__name__,
            )
            self._queue.put_nowait(_Failed(e))
        else:
            self._queue.put_nowait(_CLOSED)

    @property
    def active(self) -> bool:
        """Whether the subscription still delivers snapshots."""
        return not self._closed and not self._task.done()

    async def cancel(self) -> None:
        """Stop the producer and release its listener.

        Pending snapshots are discarded. Idempotent.
        """
        if self._closed:
            return
        self._closed = True
        self._task.cancel()
        await asyncio.gather(self._task, return_exceptions=True)

        while not self._queue.empty():
            self._queue.get_nowait()
        self._queue.put_nowait(_CLOSED)
        logfire.info("Subscription cancelled", subscription=self.name)

    def __aiter__(self) -> "Subscription[T]":
        return self

    async def __anext__(self) -> T:
        if self._closed and self._queue.empty():
            raise StopAsyncIteration

        item = await self._queue.get()
        if item is _CLOSED:
            self._closed = True
            raise StopAsyncIteration
        if isinstance(item, _Failed):
            self._closed = True
            raise item.error
        return item

    async def __aenter__(self) -> "Subscription[T]":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.cancel()


class Identified(Protocol):
    """Anything with a hashable ``id``."""

    @property
    def id(self) -> Hashable: ...


E = TypeVar("E", bound=Identified)


class Replica(Generic[E]):
    """Ordered local copy of a snapshot, keyed by entity id.

    ``upsert`` replaces an entity in place when its id is present and
    appends it otherwise, so patches never reorder the list.
    """

    def __init__(self, items: Iterable[E] = ()) -> None:
        self._items: dict[Hashable, E] = {}
        for item in items:
            self.upsert(item)

    def upsert(self, item: E) -> None:
        """Replace the entity with the same id, or append it."""
        self._items[item.id] = item

    def get(self, entity_id: Hashable) -> Optional[E]:
        """Return the entity with the given id, if present."""
        return self._items.get(entity_id)

    def snapshot(self) -> list[E]:
        """Current contents in order."""
        return list(self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._items
