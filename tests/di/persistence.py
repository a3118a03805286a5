"""Mock persistence providers for testing."""

from dishka import Scope, provide

from skillconnect.domain.repository import (
    ChangeFeed,
    CommentRepository,
    ProfileRepository,
    ThreadRepository,
    TransactionManager,
)
from skillconnect.persistence.repository.inmemory import (
    InMemoryCommentRepository,
    InMemoryDatabase,
    InMemoryProfileRepository,
    InMemoryThreadRepository,
    InMemoryTransactionManager,
)
from skillconnect.util.di.infrastructure.persistence import PersistenceProvider


class MockPersistenceProvider(PersistenceProvider):
    """Mock persistence provider using in-memory repositories.

    Uses REQUEST scope to ensure test isolation - each test gets a fresh
    database shared by all of its repositories.
    """

    __is_mock__ = True

    @provide(scope=Scope.REQUEST)
    def get_database(self) -> InMemoryDatabase:
        """Provide in-memory database."""
        return InMemoryDatabase()

    @provide(scope=Scope.REQUEST)
    def get_change_feed(self, database: InMemoryDatabase) -> ChangeFeed:
        """Provide the database's change feed."""
        return database.change_feed

    @provide(scope=Scope.REQUEST)
    def get_profile_repository(self, database: InMemoryDatabase) -> ProfileRepository:
        """Provide in-memory profile repository."""
        return InMemoryProfileRepository(database)

    @provide(scope=Scope.REQUEST)
    def get_thread_repository(self, database: InMemoryDatabase) -> ThreadRepository:
        """Provide in-memory thread repository."""
        return InMemoryThreadRepository(database)

    @provide(scope=Scope.REQUEST)
    def get_comment_repository(self, database: InMemoryDatabase) -> CommentRepository:
        """Provide in-memory comment repository."""
        return InMemoryCommentRepository(database)

    @provide(scope=Scope.REQUEST)
    def get_transaction_manager(
        self, database: InMemoryDatabase
    ) -> TransactionManager:
        """Provide in-memory transaction manager."""
        return InMemoryTransactionManager(database)
