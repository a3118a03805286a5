"""Marker base for SkillConnect domain services."""


class Service:
    """Base for the identity, profile, discussion and reputation services.

    Services own the rules that span repositories, such as keeping a
    thread's comment count in step with its comments.
    """
