"""
Club-scoped membership records.

A :class:`Member` wraps the process-wide :class:`~clubcache.structures.user.User`
it belongs to (never a copy of it) and carries the club-local data: nickname,
role ids, presence and join/boost times. Voice payloads routed through
:meth:`Member.update` are applied to the owning club's voice-state registry,
and :attr:`Member.permissions` is recomputed from the club's role table on every
access.
"""

from __future__ import annotations

import warnings
from typing import TYPE_CHECKING, Any, Dict, Mapping, Tuple

from clubcache.errors import UserNotFoundError
from clubcache.utils import parse_timestamp, snowflakes

from .base import Base, ClubChild, Field, merge_fields
from .permission import Permission
from .user import User
from .voice_state import VoiceState

if TYPE_CHECKING:
    import datetime

    from .club import Club

_FIELDS: Tuple[Field, ...] = (
    ("status", "status", None),
    ("game", "game", None),
    ("joined_at", "joined_at", parse_timestamp),
    ("activities", "activities", None),
    ("premium_since", "premium_since", parse_timestamp),
    ("nick", "nick", None),
    ("roles", "roles", snowflakes),
)

_OFFLINE_CLIENT_STATUS: Dict[str, str] = {"web": "offline", "desktop": "offline", "mobile": "offline"}
_VOICE_FLAGS = ("mute", "deaf", "suppress")
_MISSING = object()


class Member(ClubChild, Base):
    """A user's membership in one club."""

    _repr_attrs = ("nick", "status")

    def __init__(self, data: Mapping[str, Any], club: "Club | None" = None, client: Any = None) -> None:
        user_data = data.get("user") or {}
        super().__init__(data.get("id") or user_data.get("id"))
        if club is not None:
            client = club.client
        self._client = client
        self._bind_club(club, data.get("club_id"))

        user: User | None = None
        if club is not None and client is not None:
            user = client.get_user(self.id)
            if user is None and user_data:
                user = client.users.add({"id": self.id, **user_data}, client)
        elif user_data:
            user = User({"id": self.id, **user_data}, client)
        if user is None:
            raise UserNotFoundError(self.id)
        self.user: User = user

        self.status: str | None = None
        self.game: dict | None = None
        self.joined_at: "datetime.datetime | None" = None
        self.activities: list | None = None
        self.client_status: Dict[str, str] | None = None
        self.premium_since: "datetime.datetime | None" = None
        self.nick: str | None = None
        self.roles: list[int] = []
        self.update(data)

    def update(self, data: Mapping[str, Any]) -> None:
        # ``user`` is never merged here: the user cache owns those fields.
        merge_fields(self, data, _FIELDS)
        if "client_status" in data:
            self.client_status = {**_OFFLINE_CLIENT_STATUS, **(data["client_status"] or {})}
        if "mute" in data:
            self._update_voice_state(data)

    def _update_voice_state(self, data: Mapping[str, Any]) -> None:
        club = self.club
        if club is None:
            return

        flagged = any(data.get(flag) for flag in _VOICE_FLAGS)
        state = club.voice_states.get(self.id)
        if data.get("channel_id", _MISSING) is None and not flagged:
            # Fully disconnected: nothing left worth caching.
            club.voice_states.delete(self.id)
        elif state is not None:
            state.update(data)
        elif data.get("channel_id") or flagged:
            club.voice_states.add({**data, "id": self.id})

    # ------------------------------------------------------------------ #
    # Derived state
    # ------------------------------------------------------------------ #

    @property
    def voice_state(self) -> VoiceState:
        """Cached voice state, or a detached default one when the member is not in voice."""

        club = self.club
        if club is not None:
            state = club.voice_states.get(self.id)
            if state is not None:
                return state
        return VoiceState({"id": self.id})

    @property
    def permissions(self) -> Permission:
        """Club-wide permissions, recomputed from the current role table."""

        return self.club.permissions_of(self)

    @property
    def permission(self) -> Permission:
        message = "Member.permission is deprecated. Use Member.permissions instead"
        warnings.warn(message, DeprecationWarning, stacklevel=2)
        club = self.club
        if self._client is not None:
            self._client.emit("warn", message, club.shard_id if club is not None else None)
        return self.permissions

    @property
    def mention(self) -> str:
        return f"<@!{self.id}>"

    @property
    def username(self) -> str | None:
        return self.user.username

    @property
    def discriminator(self) -> str | None:
        return self.user.discriminator

    @property
    def avatar(self) -> str | None:
        return self.user.avatar

    @property
    def bot(self) -> bool:
        return self.user.bot

    @property
    def created_at(self) -> "datetime.datetime":
        return self.user.created_at

    def to_json(self, props=()) -> dict:
        return super().to_json(
            [
                "game",
                "joined_at",
                "nick",
                "roles",
                "status",
                "user",
                "voice_state",
                "premium_since",
                "activities",
                "client_status",
                *props,
            ]
        )


__all__ = ["Member"]
