"""Authenticated principal."""

from typing import Optional

from pydantic import Field

from skillconnect.domain.model.common import DomainModel
from skillconnect.domain.value import UserId


class Principal(DomainModel):
    """An identity issued by the auth provider.

    The principal is never persisted by this system. Profiles, threads and
    comments reference it through its ``id``.
    """

    id: UserId
    email: str
    display_name: Optional[str] = None
    # Short-lived provider token for calls made on the principal's behalf
    id_token: Optional[str] = Field(default=None, repr=False)
