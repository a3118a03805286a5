"""PostgreSQL implementation of Profile repository."""

from typing import Any, List, Optional

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from skillconnect.domain.error import UsernameInUseError, WriteError
from skillconnect.domain.model import Profile
from skillconnect.domain.repository import ProfileRepository, profile_topic
from skillconnect.domain.value import UserId, Username
from skillconnect.persistence.change_feed import notify
from skillconnect.persistence.mappers import profile_to_dict, row_to_profile
from skillconnect.persistence.tables import users_table


class PostgresProfileRepository(ProfileRepository):
    """PostgreSQL implementation of ProfileRepository.

    Every call runs in its own short transaction.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize repository with a session factory.

        Args:
            session_factory: SQLAlchemy async session factory
        """
        self.session_factory = session_factory

    async def find_by_id(self, user_id: UserId) -> Optional[Profile]:
        """Find a profile by owner id."""
        stmt = select(users_table).where(users_table.c.id == user_id)
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            row = result.mappings().first()
        return row_to_profile(dict(row)) if row else None

    async def find_by_username(self, username: Username) -> List[Profile]:
        """Find profiles with the given (lowercase) username."""
        stmt = select(users_table).where(users_table.c.username == username.root)
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            rows = result.mappings().all()
        return [row_to_profile(dict(row)) for row in rows]

    async def save(self, profile: Profile) -> Profile:
        """Insert or replace a profile."""
        values = profile_to_dict(profile)
        stmt = insert(users_table).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[users_table.c.id],
            set_={
                **{
                    k: stmt.excluded[k]
                    for k in values
                    if k not in ("id", "skill_points")
                },
                "version": users_table.c.version + 1,
            },
        )
        try:
            async with self.session_factory.begin() as session:
                await session.execute(stmt)
                await notify(session, [profile_topic(profile.id)])
        except IntegrityError:
            raise UsernameInUseError(profile.username.root)
        except SQLAlchemyError as e:
            raise WriteError(f"Failed to save profile {profile.id}: {e}") from e
        return profile

    async def create_if_absent(self, profile: Profile) -> Profile:
        """Insert the profile unless its id already exists."""
        stmt = (
            insert(users_table)
            .values(**profile_to_dict(profile))
            .on_conflict_do_nothing(index_elements=[users_table.c.id])
            .returning(*users_table.c)
        )
        try:
            async with self.session_factory.begin() as session:
                result = await session.execute(stmt)
                row = result.mappings().first()
                if row is None:
                    # Lost the race; the winner's row is committed already
                    existing = await session.execute(
                        select(users_table).where(users_table.c.id == profile.id)
                    )
                    row = existing.mappings().one()
                else:
                    await notify(session, [profile_topic(profile.id)])
        except IntegrityError:
            raise UsernameInUseError(profile.username.root)
        except SQLAlchemyError as e:
            raise WriteError(f"Failed to create profile {profile.id}: {e}") from e
        return row_to_profile(dict(row))

    async def update_fields(
        self, user_id: UserId, fields: dict[str, Any]
    ) -> Optional[Profile]:
        """Apply a partial update and bump the version."""
        values = {
            k: (v.root if isinstance(v, Username) else v) for k, v in fields.items()
        }
        stmt = (
            users_table.update()
            .where(users_table.c.id == user_id)
            .values(**values, version=users_table.c.version + 1)
            .returning(*users_table.c)
        )
        try:
            async with self.session_factory.begin() as session:
                result = await session.execute(stmt)
                row = result.mappings().first()
                if row is not None:
                    await notify(session, [profile_topic(user_id)])
        except IntegrityError:
            raise UsernameInUseError(str(values.get("username", "")))
        except SQLAlchemyError as e:
            raise WriteError(f"Failed to update profile {user_id}: {e}") from e
        return row_to_profile(dict(row)) if row else None
