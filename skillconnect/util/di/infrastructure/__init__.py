"""Infrastructure providers."""

# Import bases
from .firebase import FirebaseAuthProvider, StorageProvider
from .persistence import PersistenceProvider

# Import implementations (needed for __subclasses__())
from .firebase import ProdFirebaseAuthProvider, ProdStorageProvider  # noqa: F401
from .persistence import ProdPersistenceProvider  # noqa: F401

__all__ = [
    "FirebaseAuthProvider",
    "PersistenceProvider",
    "ProdFirebaseAuthProvider",
    "ProdPersistenceProvider",
    "ProdStorageProvider",
    "StorageProvider",
]
