"""Core DI providers (non-mockable)."""

from dishka import Scope, from_context, provide

from skillconnect.config import (
    FirebaseSettings,
    ProfileSettings,
    Settings,
    TransactionSettings,
)
from skillconnect.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    ``Settings`` is passed in as container context by whoever builds the
    container; the nested sections are derived from it here.
    """

    settings = from_context(provides=Settings, scope=Scope.APP)

    @provide(scope=Scope.APP)
    def provide_firebase_settings(self, settings: Settings) -> FirebaseSettings:
        """Provide Firebase settings."""
        return settings.firebase

    @provide(scope=Scope.APP)
    def provide_transaction_settings(self, settings: Settings) -> TransactionSettings:
        """Provide transaction retry settings."""
        return settings.transactions

    @provide(scope=Scope.APP)
    def provide_profile_settings(self, settings: Settings) -> ProfileSettings:
        """Provide profile defaults."""
        return settings.profiles
