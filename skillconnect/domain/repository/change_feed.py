"""Change notification interface for realtime subscriptions.

Writers publish the topic of every document they touch once their
transaction commits. Subscribers hold a listener per topic and re-read
their query whenever it fires.
"""

from abc import ABC, abstractmethod

from skillconnect.domain.value import ThreadId, UserId

THREADS_TOPIC = "discussions"


def comments_topic(thread_id: ThreadId) -> str:
    """Topic fired when comments of a thread change."""
    return f"comments:{thread_id}"


def profile_topic(user_id: UserId) -> str:
    """Topic fired when a profile changes."""
    return f"users:{user_id}"


class ChangeListener(ABC):
    """Registration for one topic.

    Notifications coalesce: any number of changes between two ``wait``
    calls wake the listener once.
    """

    @abstractmethod
    async def wait(self) -> None:
        """Block until the topic changed since the previous wait."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Stop listening. Idempotent."""
        pass


class ChangeFeed(ABC):
    """Source of change notifications."""

    @abstractmethod
    async def listen(self, topic: str) -> ChangeListener:
        """Register a listener for a topic.

        Args:
            topic: Topic name (see ``THREADS_TOPIC``, ``comments_topic``,
                ``profile_topic``)

        Returns:
            Listener that must be closed by its owner
        """
        pass
