"""Unit tests for provider selection and settings."""

import pytest

from skillconnect.app import create_app
from skillconnect.config import Settings, TransactionSettings
from skillconnect.domain.repository import TransactionManager
from skillconnect.persistence.repository.inmemory import InMemoryTransactionManager
from skillconnect.util.di import (
    PersistenceProvider,
    ProdConfigProvider,
    ProdPersistenceProvider,
    get_provider,
)
from skillconnect.util.di.container import create_container
from tests.di import MockPersistenceProvider, build_test_container


class TestGetProvider:
    """Tests for mock/production provider selection."""

    def test_concrete_provider_used_as_is(self):
        """Should return providers without implementations unchanged."""
        assert get_provider(ProdConfigProvider) is ProdConfigProvider

    def test_selects_by_mock_flag(self):
        """Should pick the mock or production subclass."""
        assert get_provider(PersistenceProvider, use_mock=True) is MockPersistenceProvider
        assert get_provider(PersistenceProvider) is ProdPersistenceProvider


class TestBuildTestContainer:
    """Tests for the test container builder."""

    def test_unknown_component_rejected(self):
        """Should raise ValueError for components no provider declares."""
        with pytest.raises(ValueError, match="Unknown components"):
            build_test_container(unmock={"payments"})

    @pytest.mark.asyncio
    async def test_mocks_wired_by_default(self):
        """Should resolve the in-memory store when nothing is unmocked."""
        container = build_test_container()

        async with container() as request_container:
            manager = await request_container.get(TransactionManager)

        await container.close()
        assert isinstance(manager, InMemoryTransactionManager)


class TestSettings:
    """Tests for environment-driven configuration."""

    def test_nested_values_from_environment(self, monkeypatch):
        """Should read nested settings with the double underscore delimiter."""
        monkeypatch.setenv("TRANSACTIONS__MAX_ATTEMPTS", "9")
        monkeypatch.setenv("FIREBASE__STORAGE_BUCKET", "demo.appspot.com")

        settings = Settings(_env_file=None)

        assert settings.transactions.max_attempts == 9
        assert settings.firebase.storage_bucket == "demo.appspot.com"
        assert settings.profiles.default_bio == "Tap Edit to add a bio!"


class TestCreateApp:
    """Tests for the application entry point."""

    @pytest.mark.asyncio
    async def test_builds_production_container(self):
        """Should configure observability and return a closable container."""
        container = create_app(Settings(_env_file=None, environment="test"))

        await container.close()


class TestCreateContainer:
    """Tests for the production container builder."""

    @pytest.mark.asyncio
    async def test_uses_given_settings(self):
        """Should resolve settings sections from the settings passed in."""
        # Arrange
        settings = Settings(
            _env_file=None, transactions=TransactionSettings(max_attempts=9)
        )

        # Act
        container = create_container(settings)
        transactions = await container.get(TransactionSettings)
        resolved = await container.get(Settings)
        await container.close()

        # Assert
        assert transactions.max_attempts == 9
        assert resolved is settings
