"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict
from uuid import UUID

from skillconnect.domain.model import Comment, Profile, Thread
from skillconnect.domain.value import CommentId, ThreadId, UserId, Username


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def row_to_profile(row: Dict[str, Any]) -> Profile:
    """Convert database row to Profile domain model.

    Args:
        row: Database row as dict

    Returns:
        Profile domain model
    """
    return Profile(
        id=UserId(row["id"]),
        username=Username(row["username"]),
        bio=row.get("bio") or "",
        email=row.get("email") or "",
        avatar_url=row.get("avatar_url"),
        skill_points=row["skill_points"],
    )


def profile_to_dict(profile: Profile) -> Dict[str, Any]:
    """Convert Profile domain model to database dict.

    Args:
        profile: Profile domain model

    Returns:
        Dict suitable for database insertion/update
    """
    return profile.model_dump()


def row_to_thread(row: Dict[str, Any]) -> Thread:
    """Convert database row to Thread domain model.

    Args:
        row: Database row as dict

    Returns:
        Thread domain model (author unresolved)
    """
    return Thread(
        id=ThreadId(_uuid(row["id"])),
        title=row["title"],
        body=row["body"],
        author_id=UserId(row["author_id"]),
        created_at=row["created_at"],
        comment_count=row["comment_count"],
    )


def thread_to_dict(thread: Thread) -> Dict[str, Any]:
    """Convert Thread domain model to database dict.

    The resolved author is not persisted.
    """
    return thread.model_dump(exclude={"author"})


def row_to_comment(row: Dict[str, Any]) -> Comment:
    """Convert database row to Comment domain model.

    Args:
        row: Database row as dict

    Returns:
        Comment domain model (author unresolved)
    """
    return Comment(
        id=CommentId(_uuid(row["id"])),
        thread_id=ThreadId(_uuid(row["discussion_id"])),
        text=row["text"],
        author_id=UserId(row["author_id"]),
        created_at=row["created_at"],
        skill_points=row["skill_points"],
    )


def comment_to_dict(comment: Comment) -> Dict[str, Any]:
    """Convert Comment domain model to database dict.

    Args:
        comment: Comment domain model

    Returns:
        Dict suitable for database insertion
    """
    data = comment.model_dump(exclude={"author", "thread_id"})
    data["discussion_id"] = comment.thread_id
    return data
