"""Unit tests for the in-memory store transactions and change feed."""

import pytest

from skillconnect.domain.error import UsernameInUseError, WriteConflictError
from skillconnect.domain.repository import THREADS_TOPIC, comments_topic
from skillconnect.domain.value import PLACEHOLDER_USERNAME
from skillconnect.persistence.repository.inmemory import (
    InMemoryDatabase,
    InMemoryProfileRepository,
    InMemoryThreadRepository,
    InMemoryTransactionManager,
)
from tests.conftest import make_comment, make_profile, make_thread


class TestInMemoryTransaction:
    """Tests for buffered, guarded commits."""

    @pytest.mark.asyncio
    async def test_stale_count_write_conflicts(self):
        """A count write based on an outdated read is rejected."""
        # Arrange
        db = InMemoryDatabase()
        manager = InMemoryTransactionManager(db)
        thread = await InMemoryThreadRepository(db).save(make_thread("u1"))

        # Act
        with pytest.raises(WriteConflictError):
            async with manager.begin() as slow:
                await slow.get_thread(thread.id)
                async with manager.begin() as fast:
                    await fast.get_thread(thread.id)
                    await fast.set_comment_count(thread.id, 1)
                await slow.set_comment_count(thread.id, 1)

        # Assert
        assert db.threads[thread.id].comment_count == 1

    @pytest.mark.asyncio
    async def test_increments_do_not_conflict(self):
        """Interleaved increments on the same documents both apply."""
        # Arrange
        db = InMemoryDatabase()
        manager = InMemoryTransactionManager(db)
        author = await InMemoryProfileRepository(db).save(make_profile("alice"))
        thread = await InMemoryThreadRepository(db).save(make_thread(author.id))
        comment = make_comment(thread.id, author.id)
        db.comments[thread.id][comment.id] = comment

        # Act
        async with manager.begin() as first:
            await first.get_comment(thread.id, comment.id)
            async with manager.begin() as second:
                await second.get_comment(thread.id, comment.id)
                await second.increment_comment_skill_points(thread.id, comment.id)
                await second.increment_profile_skill_points(author.id)
            await first.increment_comment_skill_points(thread.id, comment.id)
            await first.increment_profile_skill_points(author.id)

        # Assert
        assert db.comments[thread.id][comment.id].skill_points == 2
        assert db.profiles[author.id].skill_points == 2

    @pytest.mark.asyncio
    async def test_failed_body_commits_nothing(self):
        """An exception inside the transaction discards buffered writes."""
        # Arrange
        db = InMemoryDatabase()
        manager = InMemoryTransactionManager(db)
        thread = await InMemoryThreadRepository(db).save(make_thread("u1"))

        # Act
        with pytest.raises(RuntimeError):
            async with manager.begin() as tx:
                await tx.get_thread(thread.id)
                await tx.add_comment(make_comment(thread.id, "u2"))
                await tx.set_comment_count(thread.id, 1)
                raise RuntimeError("boom")

        # Assert
        assert db.threads[thread.id].comment_count == 0
        assert len(db.comments.get(thread.id, {})) == 0

    @pytest.mark.asyncio
    async def test_commit_wakes_listeners(self):
        """Committed comment writes notify the thread list and the comment topic."""
        # Arrange
        db = InMemoryDatabase()
        manager = InMemoryTransactionManager(db)
        thread = await InMemoryThreadRepository(db).save(make_thread("u1"))
        threads_listener = await db.change_feed.listen(THREADS_TOPIC)
        comments_listener = await db.change_feed.listen(comments_topic(thread.id))

        # Act
        async with manager.begin() as tx:
            await tx.get_thread(thread.id)
            await tx.add_comment(make_comment(thread.id, "u2"))
            await tx.set_comment_count(thread.id, 1)

        # Assert - both waits return immediately
        await threads_listener.wait()
        await comments_listener.wait()
        await threads_listener.close()
        await comments_listener.close()
        assert db.change_feed.listener_count() == 0


class TestInMemoryProfileRepository:
    """Tests for username uniqueness in the in-memory store."""

    @pytest.mark.asyncio
    async def test_rejects_claimed_username(self):
        """Two profiles cannot share a username."""
        repo = InMemoryProfileRepository(InMemoryDatabase())
        await repo.save(make_profile("alice"))

        with pytest.raises(UsernameInUseError):
            await repo.save(make_profile("Alice"))

    @pytest.mark.asyncio
    async def test_placeholder_may_repeat(self):
        """Any number of profiles may carry the placeholder username."""
        repo = InMemoryProfileRepository(InMemoryDatabase())

        await repo.save(make_profile(PLACEHOLDER_USERNAME.root))
        await repo.save(make_profile(PLACEHOLDER_USERNAME.root))

        assert len(await repo.find_by_username(PLACEHOLDER_USERNAME)) == 2

    @pytest.mark.asyncio
    async def test_create_if_absent_keeps_existing(self):
        """A second conditional create returns the first record."""
        repo = InMemoryProfileRepository(InMemoryDatabase())
        first = make_profile("alice", user_id="u1")
        await repo.create_if_absent(first)

        stored = await repo.create_if_absent(make_profile("other", user_id="u1"))

        assert stored == first
