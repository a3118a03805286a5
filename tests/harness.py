"""Test harness for unit and integration tests.

Integration tests assume PostgreSQL is running and migrated; settings are
loaded from environment variables (configure via .env or export).
"""

import pytest_asyncio

from skillconnect.util.di import Component
from tests.di import build_test_container


def create_env_fixture(unmock: set[Component] | None = None):
    """Factory for creating test environment fixtures.

    Creates a pytest fixture that:
    - Builds a test container with specified unmocking
    - Yields request-scoped container for service access
    - Closes the container (and any change feed connection) afterwards

    Args:
        unmock: Components to use real implementations for

    Returns:
        Pytest fixture function that yields AsyncContainer

    Usage:
        # Unit tests - everything mocked
        unit_env = create_env_fixture()

        # Integration tests - real persistence, assumes postgres running
        integration_env = create_env_fixture(unmock={"persistence"})

        @pytest.mark.asyncio
        async def test_create_thread(unit_env):
            service = await unit_env.get(DiscussionService)
            thread_id = await service.create_thread(UserId("u1"), "Hello", "World")
            assert thread_id is not None
    """

    @pytest_asyncio.fixture
    async def _test_environment():
        container = build_test_container(unmock=unmock or set())

        async with container() as request_container:
            yield request_container

        await container.close()

    return _test_environment
