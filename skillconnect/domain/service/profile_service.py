"""Profile domain service."""

from typing import Any, Optional
from uuid import uuid4

import logfire

from skillconnect.config import ProfileSettings
from skillconnect.domain.error import NotFoundError, UsernameInUseError, ValidationError
from skillconnect.domain.model import Principal, Profile
from skillconnect.domain.repository import ChangeFeed, ProfileRepository, profile_topic
from skillconnect.domain.value import PLACEHOLDER_USERNAME, BlobHandle, UserId, Username

from .base import Service
from .subscription import Subscription

AVATAR_PREFIX = "profile_images"


class BlobStore:
    """Blob store interface, used for avatar images."""

    async def put(
        self,
        path: str,
        data: bytes,
        content_type: str,
        auth_token: Optional[str] = None,
    ) -> BlobHandle:
        """Store bytes under a path.

        Args:
            path: Object path inside the bucket
            data: Object contents
            content_type: MIME type of the contents
            auth_token: Principal token authorizing the upload

        Returns:
            Handle to the stored object
        """
        raise NotImplementedError

    async def get_download_url(self, handle: BlobHandle) -> str:
        """Return a URL from which the object can be fetched."""
        raise NotImplementedError


class ProfileService(Service):
    """Domain service for profile operations."""

    def __init__(
        self,
        profile_repository: ProfileRepository,
        change_feed: ChangeFeed,
        blob_store: BlobStore,
        profile_settings: ProfileSettings,
    ) -> None:
        """Initialize profile service.

        Args:
            profile_repository: Profile repository
            change_feed: Change notifications for profile subscriptions
            blob_store: Blob store for avatar uploads
            profile_settings: Defaults for lazily created profiles
        """
        self.profile_repository = profile_repository
        self.change_feed = change_feed
        self.blob_store = blob_store
        self.profile_settings = profile_settings

    async def ensure_profile(self, principal: Principal) -> Profile:
        """Return the principal's profile, creating a default one if absent.

        The create is conditional on the principal id, so concurrent calls
        converge on one record. The default username is the principal's
        display name, or the placeholder when there is none or it is
        already claimed by another profile.

        Args:
            principal: Signed-in principal

        Returns:
            The existing or newly created profile
        """
        with logfire.span("profile_service.ensure_profile", user_id=principal.id):
            existing = await self.profile_repository.find_by_id(principal.id)
            if existing:
                return existing

            username = await self._default_username(principal)
            profile = Profile(
                id=principal.id,
                username=username,
                bio=self.profile_settings.default_bio,
                email=principal.email,
                skill_points=0,
            )
            try:
                stored = await self.profile_repository.create_if_absent(profile)
            except UsernameInUseError:
                logfire.warn(
                    "Display name claimed concurrently, using placeholder",
                    user_id=principal.id,
                    username=username.root,
                )
                stored = await self.profile_repository.create_if_absent(
                    profile.model_copy(update={"username": PLACEHOLDER_USERNAME})
                )

            logfire.info(
                "Profile ensured", user_id=stored.id, username=stored.username.root
            )
            return stored

    async def _default_username(self, principal: Principal) -> Username:
        if not principal.display_name:
            return PLACEHOLDER_USERNAME
        try:
            username = Username(principal.display_name)
        except ValueError:
            return PLACEHOLDER_USERNAME

        if username == PLACEHOLDER_USERNAME:
            return username
        claims = await self.profile_repository.find_by_username(username)
        if any(p.id != principal.id for p in claims):
            logfire.warn(
                "Display name already claimed", user_id=principal.id, username=username.root
            )
            return PLACEHOLDER_USERNAME
        return username

    async def get_profile(self, user_id: UserId) -> Profile:
        """Get profile by owner id.

        Raises:
            NotFoundError: If no profile exists
        """
        with logfire.span("profile_service.get_profile", user_id=user_id):
            profile = await self.profile_repository.find_by_id(user_id)
            if not profile:
                logfire.warn("Profile not found", user_id=user_id)
                raise NotFoundError("Profile", user_id)
            return profile

    def subscribe_profile(self, user_id: UserId) -> Subscription[Profile]:
        """Stream a profile.

        Emits the current record, then a fresh snapshot after every change.
        Nothing is emitted while the profile does not exist.
        """

        async def produce(emit) -> None:
            listener = await self.change_feed.listen(profile_topic(user_id))
            try:
                last: Optional[Profile] = None
                while True:
                    profile = await self.profile_repository.find_by_id(user_id)
                    if profile is not None and profile != last:
                        emit(profile)
                        last = profile
                    await listener.wait()
            finally:
                await listener.close()

        return Subscription(f"profile:{user_id}", produce)

    async def update_profile(
        self,
        user_id: UserId,
        username: Optional[str] = None,
        bio: Optional[str] = None,
        avatar_url: Optional[str] = None,
    ) -> Profile:
        """Apply a partial update to a profile.

        Only the arguments that are not None change. Skill points are never
        written here.

        Args:
            user_id: Profile owner
            username: New username
            bio: New bio
            avatar_url: New avatar URL

        Returns:
            The updated profile

        Raises:
            ValidationError: If the username is empty or reserved
            UsernameInUseError: If another profile claims the username
            NotFoundError: If no profile exists
            WriteError: If the store rejects the write
        """
        with logfire.span("profile_service.update_profile", user_id=user_id):
            current = await self.get_profile(user_id)

            fields: dict[str, Any] = {}
            if username is not None:
                try:
                    new_username = Username(username)
                except ValueError:
                    raise ValidationError("Username must be 1-64 characters.")

                if new_username != current.username:
                    if new_username == PLACEHOLDER_USERNAME:
                        raise ValidationError("That username is reserved.")
                    claims = await self.profile_repository.find_by_username(
                        new_username
                    )
                    if any(p.id != user_id for p in claims):
                        logfire.warn(
                            "Username already taken",
                            user_id=user_id,
                            username=new_username.root,
                        )
                        raise UsernameInUseError(new_username.root)
                    fields["username"] = new_username
            if bio is not None:
                fields["bio"] = bio
            if avatar_url is not None:
                fields["avatar_url"] = avatar_url

            if not fields:
                return current

            updated = await self.profile_repository.update_fields(user_id, fields)
            if updated is None:
                raise NotFoundError("Profile", user_id)

            logfire.info("Profile updated", user_id=user_id, fields=sorted(fields))
            return updated

    async def upload_avatar(
        self, principal: Principal, data: bytes, content_type: str = "image/jpeg"
    ) -> Profile:
        """Store a new avatar image and point the profile at it.

        Args:
            principal: Profile owner, whose token authorizes the upload
            data: Encoded image
            content_type: MIME type of the image

        Returns:
            The updated profile

        Raises:
            ValidationError: If the image is empty
            ExternalServiceError: If the blob store rejects the upload
        """
        if not data:
            raise ValidationError("Please choose an image.")

        path = f"{AVATAR_PREFIX}/{uuid4()}.jpg"
        with logfire.span(
            "profile_service.upload_avatar", user_id=principal.id, path=path
        ):
            handle = await self.blob_store.put(
                path, data, content_type, auth_token=principal.id_token
            )
            url = await self.blob_store.get_download_url(handle)
            logfire.info("Avatar uploaded", user_id=principal.id, path=path)
            return await self.update_profile(principal.id, avatar_url=url)
