"""Domain layer DI providers."""

from dishka import Scope, provide

from skillconnect.config import ProfileSettings, TransactionSettings
from skillconnect.domain.repository import (
    ChangeFeed,
    CommentRepository,
    ProfileRepository,
    ThreadRepository,
    TransactionManager,
)
from skillconnect.domain.service import (
    AuthClient,
    BlobStore,
    DiscussionService,
    IdentityService,
    ProfileService,
    ReputationService,
)
from skillconnect.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped: one request scope is one signed-in
    session of the presentation layer.
    """

    scope = Scope.REQUEST

    @provide
    def get_identity_service(
        self,
        auth_client: AuthClient,
        profile_repository: ProfileRepository,
        profile_settings: ProfileSettings,
    ) -> IdentityService:
        """Provide identity domain service."""
        return IdentityService(
            auth_client=auth_client,
            profile_repository=profile_repository,
            profile_settings=profile_settings,
        )

    @provide
    def get_profile_service(
        self,
        profile_repository: ProfileRepository,
        change_feed: ChangeFeed,
        blob_store: BlobStore,
        profile_settings: ProfileSettings,
    ) -> ProfileService:
        """Provide profile domain service."""
        return ProfileService(
            profile_repository=profile_repository,
            change_feed=change_feed,
            blob_store=blob_store,
            profile_settings=profile_settings,
        )

    @provide
    def get_discussion_service(
        self,
        thread_repository: ThreadRepository,
        comment_repository: CommentRepository,
        profile_repository: ProfileRepository,
        change_feed: ChangeFeed,
    ) -> DiscussionService:
        """Provide discussion domain service."""
        return DiscussionService(
            thread_repository=thread_repository,
            comment_repository=comment_repository,
            profile_repository=profile_repository,
            change_feed=change_feed,
        )

    @provide
    def get_reputation_service(
        self,
        transaction_manager: TransactionManager,
        transaction_settings: TransactionSettings,
    ) -> ReputationService:
        """Provide reputation domain service."""
        return ReputationService(
            transaction_manager=transaction_manager,
            transaction_settings=transaction_settings,
        )
