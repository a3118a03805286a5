"""Change feed implementations.

``LocalChangeFeed`` fans notifications out to in-process listeners. The
in-memory store publishes to it directly on commit. ``PostgresChangeFeed``
feeds it from a single ``LISTEN`` connection: every write transaction calls
``pg_notify`` with the topics it touched, and PostgreSQL delivers them only
once the transaction commits.

When the ``LISTEN`` connection drops, ``PostgresChangeFeed`` reconnects with
exponential backoff and jitter, then wakes every open listener so
subscribers re-read whatever they missed. Once the reconnect budget is
spent, every pending and future ``wait`` raises ``ExternalServiceError``.
"""

import asyncio
from collections import defaultdict
import random
from typing import Iterable, Optional

import logfire
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, AsyncSession

from skillconnect.config import ChangeFeedSettings
from skillconnect.domain.error import ExternalServiceError
from skillconnect.domain.repository import ChangeFeed, ChangeListener

CHANNEL = "skillconnect_changes"


class _TopicListener(ChangeListener):
    def __init__(self, feed: "LocalChangeFeed", topic: str) -> None:
        self._feed = feed
        self.topic = topic
        self._changed = asyncio.Event()
        self._error: Optional[Exception] = None
        self._closed = False

    def notify(self) -> None:
        self._changed.set()

    def fail(self, error: Exception) -> None:
        self._error = error
        self._changed.set()

    async def wait(self) -> None:
        await self._changed.wait()
        if self._error is not None:
            raise self._error
        self._changed.clear()

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._feed._remove(self)


class LocalChangeFeed(ChangeFeed):
    """In-process fan-out of topic notifications."""

    def __init__(self) -> None:
        self._listeners: dict[str, set[_TopicListener]] = defaultdict(set)
        self._error: Optional[Exception] = None

    async def listen(self, topic: str) -> ChangeListener:
        listener = _TopicListener(self, topic)
        if self._error is not None:
            listener.fail(self._error)
        self._listeners[topic].add(listener)
        return listener

    def publish(self, topic: str) -> None:
        """Wake every listener of a topic."""
        for listener in list(self._listeners.get(topic, ())):
            listener.notify()

    def publish_all(self, topics: Iterable[str]) -> None:
        """Wake every listener of several topics."""
        for topic in topics:
            self.publish(topic)

    def fail(self, error: Exception) -> None:
        """Make every current and future ``wait`` raise ``error``."""
        self._error = error
        for listeners in list(self._listeners.values()):
            for listener in list(listeners):
                listener.fail(error)

    def listener_count(self, topic: Optional[str] = None) -> int:
        """Number of open listeners, for one topic or overall."""
        if topic is not None:
            return len(self._listeners.get(topic, ()))
        return sum(len(listeners) for listeners in self._listeners.values())

    def _remove(self, listener: _TopicListener) -> None:
        listeners = self._listeners.get(listener.topic)
        if listeners is None:
            return
        listeners.discard(listener)
        if not listeners:
            del self._listeners[listener.topic]


class PostgresChangeFeed(LocalChangeFeed):
    """Change feed driven by PostgreSQL ``NOTIFY``.

    Holds one dedicated connection from the engine's pool for as long as it
    is started.
    """

    def __init__(
        self, engine: AsyncEngine, settings: Optional[ChangeFeedSettings] = None
    ) -> None:
        super().__init__()
        self.engine = engine
        self.settings = settings or ChangeFeedSettings()
        self._connection: Optional[AsyncConnection] = None
        self._driver_connection = None
        self._reconnect_task: Optional[asyncio.Task] = None
        self._stopping = False
        self._healthy = False
        self._failed = False

    @property
    def healthy(self) -> bool:
        """Whether the LISTEN connection is up."""
        return self._healthy and not self._failed

    @property
    def failed(self) -> bool:
        """Whether reconnecting was abandoned."""
        return self._failed

    async def start(self) -> None:
        """Open the listening connection.

        Also restarts a feed whose reconnect budget ran out.
        """
        if self._connection is not None:
            return
        self._stopping = False
        await self._connect()
        self._failed = False
        self._error = None

    async def stop(self) -> None:
        """Close the listening connection."""
        self._stopping = True
        if self._reconnect_task is not None:
            self._reconnect_task.cancel()
            await asyncio.gather(self._reconnect_task, return_exceptions=True)
            self._reconnect_task = None
        if self._connection is None:
            return
        try:
            self._driver_connection.remove_termination_listener(self._on_termination)
            await self._driver_connection.remove_listener(
                CHANNEL, self._on_notification
            )
        finally:
            await self._connection.close()
            self._connection = None
            self._driver_connection = None
            self._healthy = False
            logfire.info("Change feed stopped", channel=CHANNEL)

    async def _connect(self) -> None:
        connection = await self.engine.connect()
        try:
            raw = await connection.get_raw_connection()
            driver_connection = raw.driver_connection
            await driver_connection.add_listener(CHANNEL, self._on_notification)
            driver_connection.add_termination_listener(self._on_termination)
        except BaseException:
            await connection.close()
            raise

        self._connection = connection
        self._driver_connection = driver_connection
        self._healthy = True
        logfire.info("Change feed listening", channel=CHANNEL)

    def _on_notification(self, connection, pid: int, channel: str, payload: str) -> None:
        self.publish(payload)

    def _on_termination(self, connection) -> None:
        if self._stopping or connection is not self._driver_connection:
            return
        self._healthy = False
        logfire.warn("Change feed connection lost", channel=CHANNEL)
        if self._reconnect_task is None or self._reconnect_task.done():
            self._reconnect_task = asyncio.create_task(
                self._reconnect(), name="change-feed-reconnect"
            )

    async def _discard_connection(self) -> None:
        connection = self._connection
        self._connection = None
        self._driver_connection = None
        if connection is None:
            return
        try:
            await connection.invalidate()
            await connection.close()
        except Exception as e:
            logfire.warn(
                "Closing dead change feed connection failed",
                error=str(e),
                error_type=type(e).__name__,
            )

    async def _reconnect(self) -> None:
        await self._discard_connection()
        settings = self.settings

        for attempt in range(1, settings.max_reconnect_attempts + 1):
            backoff = min(
                settings.backoff_max, settings.backoff_base * 2 ** (attempt - 1)
            )
            delay = backoff + random.uniform(0, backoff * 0.5)
            logfire.info(
                "Change feed reconnecting",
                attempt=attempt,
                max_attempts=settings.max_reconnect_attempts,
                delay=delay,
            )
            await asyncio.sleep(delay)
            if self._stopping:
                return

            try:
                await self._connect()
            except Exception as e:
                logfire.warn(
                    "Change feed reconnect failed",
                    attempt=attempt,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                continue

            # Commits made while disconnected were never delivered
            self.publish_all(list(self._listeners))
            return

        self._failed = True
        logfire.error(
            "Change feed reconnect attempts exhausted",
            channel=CHANNEL,
            attempts=settings.max_reconnect_attempts,
        )
        self.fail(ExternalServiceError("Lost connection to the change feed."))


async def notify(session: AsyncSession, topics: Iterable[str]) -> None:
    """Queue notifications for the topics inside the session's transaction."""
    for topic in sorted(set(topics)):
        await session.execute(select(func.pg_notify(CHANNEL, topic)))
