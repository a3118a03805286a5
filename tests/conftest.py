"""Test configuration and shared helpers."""

import asyncio
import os
from datetime import datetime, timedelta, timezone
from typing import Callable, TypeVar
from uuid import uuid4

import pytest

from skillconnect.domain.model import Comment, Profile, Thread
from skillconnect.domain.service import Subscription
from skillconnect.domain.value import CommentId, ThreadId, UserId, Username

T = TypeVar("T")

# PostgreSQL tests only run when explicitly requested
requires_postgres = pytest.mark.skipif(
    os.getenv("SKILLCONNECT_INTEGRATION") != "1",
    reason="set SKILLCONNECT_INTEGRATION=1 with a migrated database to run",
)


def make_profile(
    username: str = "alice",
    user_id: str | None = None,
    email: str | None = None,
    skill_points: int = 0,
) -> Profile:
    """Build a profile with sensible defaults."""
    return Profile(
        id=UserId(user_id or f"uid-{uuid4().hex[:12]}"),
        username=Username(username),
        bio="Tap Edit to add a bio!",
        email=email if email is not None else f"{username.lower()}@example.com",
        skill_points=skill_points,
    )


def make_thread(
    author_id: UserId,
    title: str = "Hello",
    body: str = "World",
    minutes_ago: int = 0,
) -> Thread:
    """Build a thread created ``minutes_ago`` minutes in the past."""
    return Thread(
        id=ThreadId(uuid4()),
        title=title,
        body=body,
        author_id=author_id,
        created_at=datetime.now(timezone.utc) - timedelta(minutes=minutes_ago),
    )


def make_comment(
    thread_id: ThreadId, author_id: UserId, text: str = "Nice post", minutes_ago: int = 0
) -> Comment:
    """Build a comment created ``minutes_ago`` minutes in the past."""
    return Comment(
        id=CommentId(uuid4()),
        thread_id=thread_id,
        text=text,
        author_id=author_id,
        created_at=datetime.now(timezone.utc) - timedelta(minutes=minutes_ago),
    )


async def next_matching(
    subscription: Subscription[T],
    predicate: Callable[[T], bool] = lambda _: True,
    timeout: float = 1.0,
) -> T:
    """Read snapshots until one satisfies ``predicate``.

    Raises:
        TimeoutError: If no matching snapshot arrives in time
    """

    async def _read() -> T:
        async for snapshot in subscription:
            if predicate(snapshot):
                return snapshot
        raise AssertionError(f"Subscription {subscription.name} ended")

    return await asyncio.wait_for(_read(), timeout)
