"""Application layer DI providers."""

from dishka import Scope, provide

from skillconnect.application.usecase.auth import (
    LoginUseCase,
    RegisterUseCase,
    ResetPasswordUseCase,
)
from skillconnect.application.usecase.comment import (
    AddCommentUseCase,
    AwardSkillPointUseCase,
)
from skillconnect.application.usecase.profile import (
    StartSessionUseCase,
    UpdateProfileUseCase,
)
from skillconnect.application.usecase.thread import CreateThreadUseCase
from skillconnect.domain.service import (
    DiscussionService,
    IdentityService,
    ProfileService,
    ReputationService,
)
from skillconnect.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Auth use cases
    @provide(scope=Scope.REQUEST)
    def get_login_use_case(
        self, identity_service: IdentityService, profile_service: ProfileService
    ) -> LoginUseCase:
        """Provide login use case."""
        return LoginUseCase(
            identity_service=identity_service, profile_service=profile_service
        )

    @provide(scope=Scope.REQUEST)
    def get_register_use_case(
        self, identity_service: IdentityService
    ) -> RegisterUseCase:
        """Provide register use case."""
        return RegisterUseCase(identity_service=identity_service)

    @provide(scope=Scope.REQUEST)
    def get_reset_password_use_case(
        self, identity_service: IdentityService
    ) -> ResetPasswordUseCase:
        """Provide reset password use case."""
        return ResetPasswordUseCase(identity_service=identity_service)

    # Profile use cases
    @provide(scope=Scope.REQUEST)
    def get_start_session_use_case(
        self, identity_service: IdentityService, profile_service: ProfileService
    ) -> StartSessionUseCase:
        """Provide start session use case."""
        return StartSessionUseCase(
            identity_service=identity_service, profile_service=profile_service
        )

    @provide(scope=Scope.REQUEST)
    def get_update_profile_use_case(
        self, identity_service: IdentityService, profile_service: ProfileService
    ) -> UpdateProfileUseCase:
        """Provide update profile use case."""
        return UpdateProfileUseCase(
            identity_service=identity_service, profile_service=profile_service
        )

    # Thread use cases
    @provide(scope=Scope.REQUEST)
    def get_create_thread_use_case(
        self,
        identity_service: IdentityService,
        discussion_service: DiscussionService,
    ) -> CreateThreadUseCase:
        """Provide create thread use case."""
        return CreateThreadUseCase(
            identity_service=identity_service, discussion_service=discussion_service
        )

    # Comment use cases
    @provide(scope=Scope.REQUEST)
    def get_add_comment_use_case(
        self,
        identity_service: IdentityService,
        reputation_service: ReputationService,
    ) -> AddCommentUseCase:
        """Provide add comment use case."""
        return AddCommentUseCase(
            identity_service=identity_service, reputation_service=reputation_service
        )

    @provide(scope=Scope.REQUEST)
    def get_award_skill_point_use_case(
        self,
        identity_service: IdentityService,
        reputation_service: ReputationService,
    ) -> AwardSkillPointUseCase:
        """Provide award skill point use case."""
        return AwardSkillPointUseCase(
            identity_service=identity_service, reputation_service=reputation_service
        )
