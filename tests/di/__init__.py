"""Mock providers for testing."""

from .firebase import MockFirebaseAuthProvider, MockStorageProvider
from .persistence import MockPersistenceProvider
from .container import build_test_container

__all__ = [
    "MockFirebaseAuthProvider",
    "MockStorageProvider",
    "MockPersistenceProvider",
    "build_test_container",
]
