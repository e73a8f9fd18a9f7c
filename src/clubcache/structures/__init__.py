"""Cached entity graph: clubs, channels, members, roles and voice states."""

from .base import Base, ClubChild, merge_fields
from .channel import ClubChannel
from .club import Club
from .member import Member
from .permission import (
    ADMINISTRATOR,
    ALL,
    PERMISSIONS,
    Permission,
    PermissionOverwrite,
)
from .registry import Registry
from .role import Role
from .user import User
from .voice_state import VoiceState

__all__ = [
    "ADMINISTRATOR",
    "ALL",
    "PERMISSIONS",
    "Base",
    "Club",
    "ClubChannel",
    "ClubChild",
    "Member",
    "Permission",
    "PermissionOverwrite",
    "Registry",
    "Role",
    "User",
    "VoiceState",
    "merge_fields",
]
