"""Domain services."""

from .auth_service import AuthClient, IdentityService
from .base import Service
from .discussion_service import DiscussionService
from .profile_service import BlobStore, ProfileService
from .reputation_service import ReputationService
from .subscription import Replica, Subscription

__all__ = [
    "AuthClient",
    "BlobStore",
    "DiscussionService",
    "IdentityService",
    "ProfileService",
    "Replica",
    "ReputationService",
    "Service",
    "Subscription",
]
