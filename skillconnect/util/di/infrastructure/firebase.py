"""Firebase infrastructure providers."""

from dishka import Scope, provide

from skillconnect.adapter.firebase.auth import RealFirebaseAuthClient
from skillconnect.adapter.firebase.storage import RealFirebaseBlobStore
from skillconnect.config import FirebaseSettings
from skillconnect.domain.service import AuthClient, BlobStore
from skillconnect.util.di.base import ProviderBase
from skillconnect.util.error import ConfigurationError


class FirebaseAuthProvider(ProviderBase):
    """Firebase Auth component base."""

    __mock_component__ = "auth"


class ProdFirebaseAuthProvider(FirebaseAuthProvider):
    """Production Firebase Auth provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_auth_client(self, firebase_settings: FirebaseSettings) -> AuthClient:
        """Provide Firebase Auth client.

        Application scoped: the client holds the signed-in principal.

        Raises:
            ConfigurationError: If FIREBASE__API_KEY is not set
        """
        if not firebase_settings.api_key:
            raise ConfigurationError("FIREBASE__API_KEY is required")

        return RealFirebaseAuthClient(
            api_key=firebase_settings.api_key,
            base_url=firebase_settings.auth_base_url,
            timeout=firebase_settings.timeout,
        )


class StorageProvider(ProviderBase):
    """Blob storage component base."""

    __mock_component__ = "storage"


class ProdStorageProvider(StorageProvider):
    """Production Firebase Storage provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_blob_store(self, firebase_settings: FirebaseSettings) -> BlobStore:
        """Provide Firebase Storage blob store.

        Raises:
            ConfigurationError: If FIREBASE__STORAGE_BUCKET is not set
        """
        if not firebase_settings.storage_bucket:
            raise ConfigurationError("FIREBASE__STORAGE_BUCKET is required")

        return RealFirebaseBlobStore(
            bucket=firebase_settings.storage_bucket,
            base_url=firebase_settings.storage_base_url,
            timeout=firebase_settings.timeout,
        )
