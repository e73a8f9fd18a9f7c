"""
Club channels and channel-scope permission resolution.

:meth:`ClubChannel.permissions_of` layers the channel's overwrites on top of
the member's club-wide permissions in a fixed order:

1. administrator at club scope short-circuits to every capability;
2. the ``@everyone`` overwrite (subject id == club id);
3. all role overwrites for roles the member holds, pooled into one
   deny mask and one allow mask before being applied;
4. the member's own overwrite.

Each step applies ``(permission & ~deny) | allow``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping, Tuple

from clubcache.errors import MemberNotFoundError
from clubcache.utils import snowflake

from .base import Base, ClubChild, Field, merge_fields
from .member import Member
from .permission import ADMINISTRATOR, Permission, PermissionOverwrite
from .registry import Registry

if TYPE_CHECKING:
    from .club import Club

TEXT = 0
VOICE = 2
CATEGORY = 4
NEWS = 5
STORE = 6

_FIELDS: Tuple[Field, ...] = (
    ("type", "type", int),
    ("name", "name", None),
    ("position", "position", int),
    ("parent_id", "parent_id", snowflake),
    ("topic", "topic", None),
    ("rate_limit_per_user", "rate_limit_per_user", int),
    ("bitrate", "bitrate", int),
    ("user_limit", "user_limit", int),
    ("last_message_id", "last_message_id", snowflake),
)


def is_nsfw_name(name: str | None) -> bool:
    """``"nsfw"`` exactly, or anything starting with ``"nsfw-"``."""

    name = name or ""
    return name == "nsfw" if len(name) == 4 else name.startswith("nsfw-")


class ClubChannel(ClubChild, Base):
    """A channel that belongs to a club."""

    _repr_attrs = ("name", "type", "position", "nsfw")

    def __init__(self, data: Mapping[str, Any], client: Any, club: "Club | None" = None) -> None:
        super().__init__(data.get("id"))
        self._client = client
        if club is None and client is not None and data.get("club_id") is not None:
            club = client.clubs.get(data["club_id"])
        self._bind_club(club, data.get("club_id"))

        self.type: int | None = None
        self.name: str | None = None
        self.position: int | None = None
        self.parent_id: int | None = None
        self.topic: str | None = None
        self.rate_limit_per_user: int | None = None
        self.bitrate: int | None = None
        self.user_limit: int | None = None
        self.last_message_id: int | None = None
        self.nsfw = False
        self.permission_overwrites: Registry[PermissionOverwrite] = Registry(PermissionOverwrite)
        self.voice_members: Registry[Member] = Registry(Member)
        self.update(data)

    def update(self, data: Mapping[str, Any]) -> None:
        merge_fields(self, data, _FIELDS)
        if "name" in data or "nsfw" in data:
            self.nsfw = is_nsfw_name(self.name) or bool(data.get("nsfw"))
        if data.get("permission_overwrites") is not None:
            # Overwrites always arrive as the complete set for the channel.
            overwrites: Registry[PermissionOverwrite] = Registry(PermissionOverwrite)
            for overwrite in data["permission_overwrites"]:
                overwrites.add(overwrite)
            self.permission_overwrites = overwrites

    @property
    def mention(self) -> str:
        return f"<#{self.id}>"

    def permissions_of(self, member: Member | int | str) -> Permission:
        """Resolve the effective permissions of ``member`` in this channel."""

        club = self.club
        if not isinstance(member, Member):
            member_id = member
            member = club.members.get(member_id)
            if member is None:
                raise MemberNotFoundError(club.id, int(member_id))

        permission = club.permissions_of(member).allow
        if permission & ADMINISTRATOR:
            return Permission.all()

        overwrite = self.permission_overwrites.get(club.id)
        if overwrite is not None:
            permission = (permission & ~overwrite.deny) | overwrite.allow

        deny = 0
        allow = 0
        for role_id in member.roles or ():
            overwrite = self.permission_overwrites.get(role_id)
            if overwrite is not None:
                deny |= overwrite.deny
                allow |= overwrite.allow
        permission = (permission & ~deny) | allow

        overwrite = self.permission_overwrites.get(member.id)
        if overwrite is not None:
            permission = (permission & ~overwrite.deny) | overwrite.allow

        return Permission(permission)

    def to_json(self, props=()) -> dict:
        return super().to_json(
            [
                "type",
                "name",
                "nsfw",
                "parent_id",
                "permission_overwrites",
                "position",
                "topic",
                *props,
            ]
        )


__all__ = ["ClubChannel", "is_nsfw_name", "TEXT", "VOICE", "CATEGORY", "NEWS", "STORE"]
