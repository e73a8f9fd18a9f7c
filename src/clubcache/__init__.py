"""In-process mirror of club state with permission resolution."""

from .client import ClubClient, Shard
from .errors import (
    ClubCacheError,
    MemberNotFoundError,
    MissingIDError,
    UserNotFoundError,
)
from .structures import (
    Club,
    ClubChannel,
    Member,
    Permission,
    PermissionOverwrite,
    Registry,
    Role,
    User,
    VoiceState,
)

__all__ = [
    "Club",
    "ClubCacheError",
    "ClubChannel",
    "ClubClient",
    "Member",
    "MemberNotFoundError",
    "MissingIDError",
    "Permission",
    "PermissionOverwrite",
    "Registry",
    "Role",
    "Shard",
    "User",
    "UserNotFoundError",
    "VoiceState",
]
