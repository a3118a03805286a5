"""Domain model entities for SkillConnect."""

from skillconnect.domain.model.comment import Comment
from skillconnect.domain.model.principal import Principal
from skillconnect.domain.model.profile import Profile
from skillconnect.domain.model.thread import Thread

__all__ = [
    "Principal",
    "Profile",
    "Thread",
    "Comment",
]
