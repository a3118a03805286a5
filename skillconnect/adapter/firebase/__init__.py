"""Firebase adapters."""

from .auth import (
    FirebaseAuthClient,
    FirebaseAuthError,
    MockFirebaseAuthClient,
    RealFirebaseAuthClient,
)
from .storage import (
    FirebaseBlobStore,
    FirebaseStorageError,
    MockBlobStore,
    RealFirebaseBlobStore,
)

__all__ = [
    "FirebaseAuthClient",
    "FirebaseAuthError",
    "MockFirebaseAuthClient",
    "RealFirebaseAuthClient",
    "FirebaseBlobStore",
    "FirebaseStorageError",
    "MockBlobStore",
    "RealFirebaseBlobStore",
]
