"""Domain value objects for SkillConnect."""

from urllib.parse import quote

from pydantic import field_validator

from skillconnect.domain.value.common import RootValueObject, ValueObject


class Username(RootValueObject[str]):
    """Public username of a profile.

    Usernames are case-insensitive: the value is stripped and lowercased on
    construction, so ``Username("Alice") == Username("alice")``.
    """

    @field_validator("root")
    @classmethod
    def normalize_username(cls, v: str) -> str:
        """Strip, lowercase and check length."""
        v = v.strip().lower()
        if len(v) < 1 or len(v) > 64:
            raise ValueError("Username must be 1-64 characters")
        return v


# Given to profiles created before the owner picked a username. Stored
# lowercase like every other username and never counted as a claim.
PLACEHOLDER_USERNAME = Username("New User")


class BlobHandle(ValueObject):
    """Reference to an object stored in the blob store."""

    bucket: str
    path: str
    download_token: str | None = None

    @property
    def encoded_path(self) -> str:
        """Object path escaped for use as a single URL segment."""
        return quote(self.path, safe="")
