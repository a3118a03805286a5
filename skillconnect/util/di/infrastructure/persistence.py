"""Persistence infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide
import logfire
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from skillconnect.config import Settings
from skillconnect.domain.repository import (
    ChangeFeed,
    CommentRepository,
    ProfileRepository,
    ThreadRepository,
    TransactionManager,
)
from skillconnect.persistence.change_feed import PostgresChangeFeed
from skillconnect.persistence.database import create_engine, create_session_factory
from skillconnect.persistence.repository import (
    PostgresCommentRepository,
    PostgresProfileRepository,
    PostgresThreadRepository,
)
from skillconnect.persistence.transaction import PostgresTransactionManager
from skillconnect.util.di.base import ProviderBase
from skillconnect.util.observability import instrument_sqlalchemy


class PersistenceProvider(ProviderBase):
    """Persistence component base."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """Production persistence provider using PostgreSQL.

    Repositories open a short session per call, so they live for the whole
    application.
    """

    __is_mock__ = False

    scope = Scope.APP

    @provide(scope=Scope.APP)
    async def get_engine(self, settings: Settings) -> AsyncIterator[AsyncEngine]:
        """Provide database engine."""
        engine = create_engine(settings)
        # Instrument SQLAlchemy for observability
        instrument_sqlalchemy(engine)
        yield engine
        await engine.dispose()

    @provide(scope=Scope.APP)
    def get_session_factory(
        self, engine: AsyncEngine
    ) -> async_sessionmaker[AsyncSession]:
        """Provide session factory."""
        return create_session_factory(engine)

    @provide(scope=Scope.APP)
    async def get_change_feed(
        self, engine: AsyncEngine, settings: Settings
    ) -> AsyncIterator[ChangeFeed]:
        """Provide the change feed, listening until the container closes."""
        feed = PostgresChangeFeed(engine, settings.change_feed)
        await feed.start()
        try:
            yield feed
        finally:
            await feed.stop()
            logfire.info("Change feed closed")

    @provide(scope=Scope.APP)
    def get_profile_repository(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> ProfileRepository:
        """Provide Profile repository."""
        return PostgresProfileRepository(session_factory)

    @provide(scope=Scope.APP)
    def get_thread_repository(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> ThreadRepository:
        """Provide Thread repository."""
        return PostgresThreadRepository(session_factory)

    @provide(scope=Scope.APP)
    def get_comment_repository(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> CommentRepository:
        """Provide Comment repository."""
        return PostgresCommentRepository(session_factory)

    @provide(scope=Scope.APP)
    def get_transaction_manager(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> TransactionManager:
        """Provide store transaction manager."""
        return PostgresTransactionManager(session_factory)
