"""Integration tests for the PostgreSQL store.

Requires a migrated database (``alembic upgrade head``) and
SKILLCONNECT_INTEGRATION=1.
"""

import asyncio
from uuid import uuid4

import pytest

from skillconnect.domain.error import UsernameInUseError
from skillconnect.domain.repository import (
    CommentRepository,
    ProfileRepository,
    ThreadRepository,
)
from skillconnect.domain.service import DiscussionService, ReputationService
from skillconnect.domain.value import PLACEHOLDER_USERNAME
from tests.conftest import make_profile, make_thread, next_matching, requires_postgres
from tests.harness import create_env_fixture

# Integration test fixture - real PostgreSQL, mock Firebase
integration_env = create_env_fixture(unmock={"persistence"})

pytestmark = requires_postgres


def unique(name: str) -> str:
    return f"{name}-{uuid4().hex[:8]}"


class TestPostgresReputation:
    """Counters under real transactions."""

    @pytest.mark.asyncio
    async def test_concurrent_adds_lose_no_increment(self, integration_env):
        """Should end with the comment count equal to the number of comments."""
        # Arrange
        thread_repo = await integration_env.get(ThreadRepository)
        comment_repo = await integration_env.get(CommentRepository)
        reputation = await integration_env.get(ReputationService)
        thread = await thread_repo.save(make_thread(unique("uid")))

        # Act
        await asyncio.gather(
            *(
                reputation.add_comment(thread.id, unique("uid"), f"Comment {i}")
                for i in range(5)
            )
        )

        # Assert
        assert (await thread_repo.find_by_id(thread.id)).comment_count == 5
        assert await comment_repo.count_by_thread(thread.id) == 5

    @pytest.mark.asyncio
    async def test_concurrent_awards(self, integration_env):
        """Should land every award on the comment and its author."""
        # Arrange
        profile_repo = await integration_env.get(ProfileRepository)
        thread_repo = await integration_env.get(ThreadRepository)
        comment_repo = await integration_env.get(CommentRepository)
        reputation = await integration_env.get(ReputationService)

        author = await profile_repo.save(make_profile(unique("author")))
        thread = await thread_repo.save(make_thread(author.id))
        comment_id = await reputation.add_comment(thread.id, author.id, "Helpful")

        # Act
        await asyncio.gather(
            *(reputation.award_skill_point(comment_id, thread.id) for _ in range(8))
        )

        # Assert
        comment = await comment_repo.find_by_id(thread.id, comment_id)
        assert comment.skill_points == 8
        assert (await profile_repo.find_by_id(author.id)).skill_points == 8


class TestPostgresProfiles:
    """Profile constraints enforced by the schema."""

    @pytest.mark.asyncio
    async def test_username_unique_except_placeholder(self, integration_env):
        """Should reject a claimed username but allow repeated placeholders."""
        profile_repo = await integration_env.get(ProfileRepository)
        name = unique("taken")
        await profile_repo.save(make_profile(name))

        with pytest.raises(UsernameInUseError):
            await profile_repo.save(make_profile(name))

        await profile_repo.save(make_profile(PLACEHOLDER_USERNAME.root))
        await profile_repo.save(make_profile(PLACEHOLDER_USERNAME.root))

    @pytest.mark.asyncio
    async def test_save_keeps_skill_points(self, integration_env):
        """Should not overwrite stored skill points on upsert."""
        profile_repo = await integration_env.get(ProfileRepository)
        stored = await profile_repo.save(make_profile(unique("kept"), skill_points=0))
        await profile_repo.save(stored.model_copy(update={"skill_points": 50}))

        assert (await profile_repo.find_by_id(stored.id)).skill_points == 0


class TestPostgresChangeFeed:
    """Notifications delivered through LISTEN/NOTIFY."""

    @pytest.mark.asyncio
    async def test_comment_subscription_sees_commit(self, integration_env):
        """Should emit a fresh snapshot after a committed comment."""
        # Arrange
        thread_repo = await integration_env.get(ThreadRepository)
        discussions = await integration_env.get(DiscussionService)
        reputation = await integration_env.get(ReputationService)
        thread = await thread_repo.save(make_thread(unique("uid")))

        async with discussions.subscribe_comments(thread.id) as comments:
            assert await next_matching(comments) == []

            # Act
            comment_id = await reputation.add_comment(thread.id, unique("uid"), "Hi")

            # Assert
            snapshot = await next_matching(comments, lambda s: len(s) == 1, timeout=5.0)
            assert snapshot[0].id == comment_id
