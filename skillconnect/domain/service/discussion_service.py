"""Discussion domain service."""

import asyncio
from typing import Awaitable, Callable, List, Optional
from uuid import uuid4

import logfire
from pydantic import ValidationError as PydanticValidationError

from skillconnect.domain.error import NotAuthenticatedError, NotFoundError, ValidationError
from skillconnect.domain.model import Comment, Profile, Thread
from skillconnect.domain.repository import (
    THREADS_TOPIC,
    ChangeFeed,
    CommentRepository,
    ProfileRepository,
    ThreadRepository,
    comments_topic,
)
from skillconnect.domain.value import ThreadId, UserId

from .base import Service
from .subscription import Replica, Subscription


class DiscussionService(Service):
    """Domain service for threads and their comment streams."""

    def __init__(
        self,
        thread_repository: ThreadRepository,
        comment_repository: CommentRepository,
        profile_repository: ProfileRepository,
        change_feed: ChangeFeed,
    ) -> None:
        """Initialize discussion service.

        Args:
            thread_repository: Thread repository
            comment_repository: Comment repository
            profile_repository: Profile repository, for author resolution
            change_feed: Change notifications for subscriptions
        """
        self.thread_repository = thread_repository
        self.comment_repository = comment_repository
        self.profile_repository = profile_repository
        self.change_feed = change_feed

    async def create_thread(
        self, author_id: Optional[UserId], title: str, body: str
    ) -> ThreadId:
        """Start a new thread with no comments.

        Args:
            author_id: Signed-in principal id, None when signed out
            title: Thread title
            body: Thread body

        Returns:
            ID of the new thread

        Raises:
            NotAuthenticatedError: If nobody is signed in
            ValidationError: If title or body is blank or too long
            WriteError: If the store rejects the write
        """
        if author_id is None:
            raise NotAuthenticatedError("create a discussion")

        title = title.strip()
        body = body.strip()
        if not title or not body:
            raise ValidationError("Title and body cannot be empty.")

        try:
            thread = Thread(
                id=ThreadId(uuid4()),
                title=title,
                body=body,
                author_id=author_id,
                comment_count=0,
            )
        except PydanticValidationError as e:
            raise ValidationError(str(e.errors()[0]["msg"]))

        with logfire.span(
            "discussion_service.create_thread",
            thread_id=str(thread.id),
            author_id=author_id,
        ):
            await self.thread_repository.save(thread)
            logfire.info("Thread created", thread_id=str(thread.id), author_id=author_id)
            return thread.id

    async def get_thread(self, thread_id: ThreadId) -> Thread:
        """Get thread by ID.

        Raises:
            NotFoundError: If the thread does not exist
        """
        with logfire.span("discussion_service.get_thread", thread_id=str(thread_id)):
            thread = await self.thread_repository.find_by_id(thread_id)
            if not thread:
                logfire.warn("Thread not found", thread_id=str(thread_id))
                raise NotFoundError("Thread", str(thread_id))
            return thread

    def subscribe_threads(self) -> Subscription[List[Thread]]:
        """Stream every thread, newest first, with authors resolved."""
        return Subscription(
            "threads", self._thread_producer(self.thread_repository.find_all)
        )

    def subscribe_threads_by_author(
        self, author_id: UserId
    ) -> Subscription[List[Thread]]:
        """Stream the threads of one author, newest first, with authors resolved."""
        return Subscription(
            f"threads:{author_id}",
            self._thread_producer(
                lambda: self.thread_repository.find_by_author(author_id)
            ),
        )

    def _thread_producer(self, query: Callable[[], Awaitable[List[Thread]]]):
        async def produce(emit) -> None:
            listener = await self.change_feed.listen(THREADS_TOPIC)
            try:
                while True:
                    threads = sorted(
                        await query(), key=lambda t: t.created_at, reverse=True
                    )
                    authors = await self._resolve_authors({t.author_id for t in threads})
                    emit(
                        [
                            t.model_copy(update={"author": authors.get(t.author_id)})
                            for t in threads
                        ]
                    )
                    await listener.wait()
            finally:
                await listener.close()

        return produce

    def subscribe_comments(self, thread_id: ThreadId) -> Subscription[List[Comment]]:
        """Stream the comments of a thread, oldest first.

        Each change first emits the comments with unresolved authors, then
        one patched snapshot per author as that author's profile arrives.
        Consumers should upsert by comment id.
        """

        async def produce(emit) -> None:
            listener = await self.change_feed.listen(comments_topic(thread_id))
            try:
                while True:
                    comments = sorted(
                        await self.comment_repository.find_by_thread(thread_id),
                        key=lambda c: c.created_at,
                    )
                    replica = Replica(comments)
                    emit(replica.snapshot())
                    await self._patch_comment_authors(replica, comments, emit)
                    await listener.wait()
            finally:
                await listener.close()

        return Subscription(f"comments:{thread_id}", produce)

    async def _patch_comment_authors(
        self, replica: Replica[Comment], comments: List[Comment], emit
    ) -> None:
        lookups = [
            asyncio.create_task(self._lookup_author(author_id))
            for author_id in dict.fromkeys(c.author_id for c in comments)
        ]
        try:
            for lookup in asyncio.as_completed(lookups):
                author = await lookup
                if author is None:
                    continue
                for comment in comments:
                    if comment.author_id == author.id:
                        replica.upsert(comment.model_copy(update={"author": author}))
                emit(replica.snapshot())
        finally:
            for lookup in lookups:
                lookup.cancel()

    async def _resolve_authors(self, author_ids: set[UserId]) -> dict[UserId, Profile]:
        ordered = list(author_ids)
        profiles = await asyncio.gather(*(self._lookup_author(a) for a in ordered))
        return {a: p for a, p in zip(ordered, profiles) if p is not None}

    async def _lookup_author(self, author_id: UserId) -> Optional[Profile]:
        # Failed lookups render as an anonymous author
        try:
            return await self.profile_repository.find_by_id(author_id)
        except Exception as e:
            logfire.warn(
                "Author lookup failed",
                author_id=author_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            return None
