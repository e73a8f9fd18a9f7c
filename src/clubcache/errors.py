"""Exceptions raised by the club cache."""

from __future__ import annotations


class ClubCacheError(RuntimeError):
    """Base class for every error raised by the cache."""

    pass


class MissingIDError(ClubCacheError, ValueError):
    """Raised when a payload handed to a registry carries no id."""

    pass


class UserNotFoundError(ClubCacheError, LookupError):
    """Raised when a member cannot resolve the user it wraps."""

    def __init__(self, member_id: int) -> None:
        super().__init__(f"User associated with Member not found: {member_id}")
        self.member_id = member_id


class MemberNotFoundError(ClubCacheError, LookupError):
    """Raised when a permission query names a member the club does not cache."""

    def __init__(self, club_id: int, member_id: int) -> None:
        super().__init__(f"Member {member_id} is not cached in club {club_id}")
        self.club_id = club_id
        self.member_id = member_id


__all__ = [
    "ClubCacheError",
    "MissingIDError",
    "UserNotFoundError",
    "MemberNotFoundError",
]
