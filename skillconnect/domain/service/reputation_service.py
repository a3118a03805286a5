"""Reputation domain service.

Owns the two operations that keep counters consistent:

- ``add_comment`` inserts a comment and bumps its thread's comment count in
  one transaction. The count write is guarded by the thread version read in
  the same transaction, so concurrent adds collide and retry instead of
  losing an increment.
- ``award_skill_point`` adds one point to a comment and one to its author's
  profile in one transaction, using the store's atomic increment so
  concurrent awards never collide with each other.
"""

import asyncio
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional, TypeVar
from uuid import uuid4

import logfire
from pydantic import ValidationError as PydanticValidationError

from skillconnect.config import TransactionSettings
from skillconnect.domain.error import (
    NotAuthenticatedError,
    NotFoundError,
    ValidationError,
    WriteConflictError,
)
from skillconnect.domain.model import Comment
from skillconnect.domain.repository import Transaction, TransactionManager
from skillconnect.domain.value import CommentId, ThreadId, UserId

from .base import Service

R = TypeVar("R")


class ReputationService(Service):
    """Domain service for comment counts and skill points."""

    def __init__(
        self,
        transaction_manager: TransactionManager,
        transaction_settings: TransactionSettings,
    ) -> None:
        """Initialize reputation service.

        Args:
            transaction_manager: Opens store transactions
            transaction_settings: Retry policy for conflicting transactions
        """
        self.transaction_manager = transaction_manager
        self.transaction_settings = transaction_settings

    async def add_comment(
        self, thread_id: ThreadId, author_id: Optional[UserId], text: str
    ) -> CommentId:
        """Attach a comment to a thread and increment its comment count.

        Args:
            thread_id: Parent thread
            author_id: Signed-in principal id, None when signed out
            text: Comment text

        Returns:
            ID of the new comment

        Raises:
            NotAuthenticatedError: If nobody is signed in
            ValidationError: If the text is blank or too long
            NotFoundError: If the thread does not exist
            WriteConflictError: If every attempt collided
        """
        if author_id is None:
            raise NotAuthenticatedError("comment")

        text = text.strip()
        if not text:
            raise ValidationError("Comment cannot be empty.")

        comment_id = CommentId(uuid4())
        try:
            comment = Comment(
                id=comment_id,
                thread_id=thread_id,
                text=text,
                author_id=author_id,
                skill_points=0,
            )
        except PydanticValidationError as e:
            raise ValidationError(str(e.errors()[0]["msg"]))

        async def attempt(tx: Transaction) -> CommentId:
            thread = await tx.get_thread(thread_id)
            if thread is None:
                raise NotFoundError("Thread", str(thread_id))

            await tx.add_comment(
                comment.model_copy(update={"created_at": datetime.now(timezone.utc)})
            )
            await tx.set_comment_count(thread_id, thread.comment_count + 1)
            return comment_id

        with logfire.span(
            "reputation_service.add_comment",
            thread_id=str(thread_id),
            comment_id=str(comment_id),
            author_id=author_id,
        ):
            result = await self._run_transaction("Thread", str(thread_id), attempt)
            logfire.info(
                "Comment added",
                thread_id=str(thread_id),
                comment_id=str(comment_id),
                author_id=author_id,
            )
            return result

    async def award_skill_point(
        self, comment_id: CommentId, thread_id: ThreadId
    ) -> None:
        """Give one skill point to a comment and to its author.

        Args:
            comment_id: Comment receiving the point
            thread_id: The comment's thread

        Raises:
            NotFoundError: If the comment or its author's profile is missing
            WriteConflictError: If every attempt collided
        """

        async def attempt(tx: Transaction) -> None:
            comment = await tx.get_comment(thread_id, comment_id)
            if comment is None:
                raise NotFoundError("Comment", str(comment_id))

            author = await tx.get_profile(comment.author_id)
            if author is None:
                raise NotFoundError("Profile", comment.author_id)

            await tx.increment_comment_skill_points(thread_id, comment_id)
            await tx.increment_profile_skill_points(author.id)

        with logfire.span(
            "reputation_service.award_skill_point",
            thread_id=str(thread_id),
            comment_id=str(comment_id),
        ):
            await self._run_transaction("Comment", str(comment_id), attempt)
            logfire.info(
                "Skill point awarded",
                thread_id=str(thread_id),
                comment_id=str(comment_id),
            )

    async def _run_transaction(
        self,
        resource: str,
        identifier: str,
        body: Callable[[Transaction], Awaitable[R]],
    ) -> R:
        """Run ``body`` in a transaction, retrying the whole unit on conflict.

        Raises:
            WriteConflictError: Once ``max_attempts`` attempts have collided
        """
        settings = self.transaction_settings
        attempts = max(1, settings.max_attempts)

        for attempt in range(1, attempts + 1):
            try:
                async with self.transaction_manager.begin() as tx:
                    result = await body(tx)
                return result
            except WriteConflictError as e:
                if attempt == attempts:
                    logfire.error(
                        "Transaction retries exhausted",
                        resource=resource,
                        identifier=identifier,
                        attempts=attempt,
                    )
                    raise WriteConflictError(resource, identifier, attempts=attempt) from e

                delay = min(
                    settings.backoff_max, settings.backoff_base * 2 ** (attempt - 1)
                )
                logfire.info(
                    "Transaction conflict, retrying",
                    resource=resource,
                    identifier=identifier,
                    attempt=attempt,
                    delay=delay,
                )
                await asyncio.sleep(delay)

        raise AssertionError("unreachable")
