"""Shared base for SkillConnect entities."""

from pydantic import BaseModel, ConfigDict


class DomainModel(BaseModel):
    """Base for profiles, threads, comments and principals.

    Instances are snapshots: repositories and subscriptions hand out frozen
    copies, and changes go through ``model_copy(update=...)``.
    """

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,  # UserId, ThreadId and friends
    )
