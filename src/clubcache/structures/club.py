"""
Club aggregate root.

A :class:`Club` is built from a full snapshot and kept current by partial
payloads. It owns the registries of channels, members, roles and voice states
for one community, wires every child's back-reference to itself, and resolves
club-wide permissions:

* the owner always gets every capability;
* everyone else starts from the ``@everyone`` role (same id as the club) and
  accumulates the allow mask of every role they hold, short-circuiting to every
  capability as soon as one of those roles grants administrator.

There is no deny at club scope; deny masks only exist on channel overwrites.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable, Mapping, Tuple

from clubcache.errors import MemberNotFoundError
from clubcache.utils import parse_timestamp, snowflake

from .base import Base, Field, merge_fields
from .channel import ClubChannel
from .member import Member
from .permission import ADMINISTRATOR, ALL, Permission
from .registry import Registry
from .role import Role
from .voice_state import VoiceState

if TYPE_CHECKING:
    import datetime

logger = logging.getLogger(__name__)

_FIELDS: Tuple[Field, ...] = (
    ("name", "name", None),
    ("verification_level", "verification_level", int),
    ("splash", "splash", None),
    ("banner", "banner", None),
    ("region", "region", None),
    ("owner_id", "owner_id", snowflake),
    ("icon", "icon", None),
    ("features", "features", list),
    ("emojis", "emojis", list),
    ("afk_channel_id", "afk_channel_id", snowflake),
    ("afk_timeout", "afk_timeout", int),
    ("default_message_notifications", "default_notifications", int),
    ("mfa_level", "mfa_level", int),
    ("large", "large", bool),
    ("max_presences", "max_presences", int),
    ("explicit_content_filter", "explicit_content_filter", int),
    ("system_channel_id", "system_channel_id", snowflake),
    ("premium_tier", "premium_tier", int),
    ("premium_subscription_count", "premium_subscription_count", int),
    ("vanity_url_code", "vanity_url", None),
    ("preferred_locale", "preferred_locale", None),
    ("description", "description", None),
    ("max_members", "max_members", int),
    ("public_updates_channel_id", "public_updates_channel_id", snowflake),
    ("rules_channel_id", "rules_channel_id", snowflake),
    ("max_video_channel_users", "max_video_channel_users", int),
    ("member_count", "member_count", int),
    ("unavailable", "unavailable", bool),
)

# Only present on REST snapshots.
_REST_FIELDS: Tuple[Field, ...] = (
    ("widget_enabled", "widget_enabled", bool),
    ("widget_channel_id", "widget_channel_id", snowflake),
    ("approximate_member_count", "approximate_member_count", int),
    ("approximate_presence_count", "approximate_presence_count", int),
)


class Club(Base):
    """A community and everything cached about it."""

    _repr_attrs = ("name", "member_count", "unavailable")

    def __init__(self, data: Mapping[str, Any], client: Any) -> None:
        super().__init__(data.get("id"))
        self.client = client
        self.shard = client.shards.get(client.club_shard_map.get(self.id))
        self.unavailable = bool(data.get("unavailable"))
        self.joined_at: "datetime.datetime | None" = parse_timestamp(data.get("joined_at"))
        self.voice_states: Registry[VoiceState] = Registry(VoiceState)
        self.channels: Registry[ClubChannel] = Registry(ClubChannel)
        self.members: Registry[Member] = Registry(Member)
        self.roles: Registry[Role] = Registry(Role)
        self.pending_voice_states: list[dict] | None = None
        self._init_attributes()
        merge_fields(self, data, _REST_FIELDS)

        for role in data.get("roles") or ():
            self.roles.add(role, self)

        for channel_data in data.get("channels") or ():
            channel = self.channels.add({**channel_data, "club_id": self.id}, client, self)
            client.channel_club_map[channel.id] = self.id

        for member_data in data.get("members") or ():
            user_id = (member_data.get("user") or {}).get("id")
            self.members.add({**member_data, "id": member_data.get("id", user_id)}, self)

        for presence in data.get("presences") or ():
            self.apply_presence(presence)

        if data.get("voice_states"):
            if not client.options.BOT:
                # Channels may not be cached yet outside full-bot mode.
                self.pending_voice_states = list(data["voice_states"])
                logger.debug("Deferred %d voice state(s) for club %s", len(self.pending_voice_states), self.id)
            else:
                self.sync_voice_states(data["voice_states"])

        self.update(data)

    def _init_attributes(self) -> None:
        for _, attr, _ in _FIELDS + _REST_FIELDS:
            if not hasattr(self, attr):
                setattr(self, attr, None)
        self.features = []
        self.emojis = []

    def update(self, data: Mapping[str, Any]) -> None:
        merge_fields(self, data, _FIELDS)

    # ------------------------------------------------------------------ #
    # Snapshot reconciliation
    # ------------------------------------------------------------------ #

    @property
    def shard_id(self) -> int | None:
        return getattr(self.shard, "id", None)

    def apply_presence(self, presence: Mapping[str, Any]) -> Member | None:
        user_id = snowflake((presence.get("user") or {}).get("id"))
        if not self.members.has(user_id):
            cached = self.client.users.get(user_id)
            self.client.emit(
                "debug",
                f"Presence without member. {user_id}. In global user cache: {cached!r}. {dict(presence)!r}",
                self.shard_id,
            )
            return None
        return self.members.update({**presence, "id": user_id})

    def sync_voice_states(self, voice_states: Iterable[Mapping[str, Any]] | None = None) -> None:
        """Apply voice-state payloads, defaulting to the ones deferred at construction."""

        if voice_states is None:
            voice_states, self.pending_voice_states = self.pending_voice_states or [], None

        client = self.client
        for voice_state in voice_states:
            user_id = snowflake(voice_state.get("user_id", voice_state.get("id")))
            if not self.members.has(user_id):
                client.emit("debug", f"Voice state without member. {user_id} in club {self.id}", self.shard_id)
                continue
            channel_id = snowflake(voice_state.get("channel_id"))
            channel = self.channels.get(channel_id)
            if channel is None:
                client.emit(
                    "error",
                    LookupError(f"Voice state for {user_id} references unknown channel {channel_id}"),
                    self.shard_id,
                )
                continue
            member = self.members.update({**voice_state, "id": user_id})
            channel.voice_members.add(member)

            if (
                client.options.SEED_VOICE_CONNECTIONS
                and client.user is not None
                and user_id == client.user.id
                and self.id not in client.voice_connections
            ):
                client.schedule_voice_join(channel_id)

    # ------------------------------------------------------------------ #
    # Permissions
    # ------------------------------------------------------------------ #

    @property
    def everyone_role(self) -> Role | None:
        return self.roles.get(self.id)

    def permissions_of(self, member: Member | int | str) -> Permission:
        """Resolve the club-wide permissions of ``member``."""

        if not isinstance(member, Member):
            member_id = member
            member = self.members.get(member_id)
            if member is None:
                raise MemberNotFoundError(self.id, int(member_id))

        if member.id == self.owner_id:
            return Permission(ALL)

        everyone = self.everyone_role
        permissions = everyone.permissions.allow if everyone is not None else 0
        for role_id in member.roles or ():
            role = self.roles.get(role_id)
            if role is None:
                continue
            allow = role.permissions.allow
            if allow & ADMINISTRATOR:
                permissions = ALL
                break
            permissions |= allow
        return Permission(permissions)

    def to_json(self, props=()) -> dict:
        return super().to_json(
            [
                "afk_channel_id",
                "afk_timeout",
                "banner",
                "channels",
                "default_notifications",
                "description",
                "emojis",
                "explicit_content_filter",
                "features",
                "icon",
                "joined_at",
                "large",
                "max_members",
                "max_presences",
                "member_count",
                "members",
                "mfa_level",
                "name",
                "owner_id",
                "preferred_locale",
                "premium_subscription_count",
                "premium_tier",
                "region",
                "roles",
                "splash",
                "unavailable",
                "vanity_url",
                "verification_level",
                *props,
            ]
        )


__all__ = ["Club"]
