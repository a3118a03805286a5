"""Provider base and the names of the swappable components."""

from typing import ClassVar, Literal

from dishka import Provider

Component = Literal["auth", "storage", "persistence"]


class ProviderBase(Provider):
    """Base for SkillConnect providers.

    Mockable providers name the component they back, so test containers can
    swap the Firebase auth and storage adapters or the PostgreSQL store for
    in-memory doubles one at a time.

    Attributes:
        __mock_component__: "auth", "storage" or "persistence"; None for
            providers that are never mocked
        __is_mock__: Whether this is a mock implementation
    """

    __mock_component__: ClassVar[Component | None] = None
    __is_mock__: ClassVar[bool] = False
