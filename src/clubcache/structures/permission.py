"""
Capability bitmasks.

``PERMISSIONS`` maps every capability name to its bit. :class:`Permission` is
an immutable (allow, deny) pair of masks exposing one boolean attribute per
capability, e.g. ``perm.send_messages``. :class:`PermissionOverwrite` is the
channel-scoped variant keyed by the role or member it applies to.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping

from .base import Base

PERMISSIONS: Dict[str, int] = {
    "create_instant_invite": 1 << 0,
    "kick_members": 1 << 1,
    "ban_members": 1 << 2,
    "administrator": 1 << 3,
    "manage_channels": 1 << 4,
    "manage_club": 1 << 5,
    "add_reactions": 1 << 6,
    "view_audit_logs": 1 << 7,
    "voice_priority_speaker": 1 << 8,
    "stream": 1 << 9,
    "read_messages": 1 << 10,
    "send_messages": 1 << 11,
    "send_tts_messages": 1 << 12,
    "manage_messages": 1 << 13,
    "embed_links": 1 << 14,
    "attach_files": 1 << 15,
    "read_message_history": 1 << 16,
    "mention_everyone": 1 << 17,
    "external_emojis": 1 << 18,
    "view_club_insights": 1 << 19,
    "voice_connect": 1 << 20,
    "voice_speak": 1 << 21,
    "voice_mute_members": 1 << 22,
    "voice_deafen_members": 1 << 23,
    "voice_move_members": 1 << 24,
    "voice_use_vad": 1 << 25,
    "change_nickname": 1 << 26,
    "manage_nicknames": 1 << 27,
    "manage_roles": 1 << 28,
    "manage_webhooks": 1 << 29,
    "manage_emojis": 1 << 30,
}


def _mask(*names: str) -> int:
    value = 0
    for name in names:
        value |= PERMISSIONS[name]
    return value


ADMINISTRATOR = PERMISSIONS["administrator"]
ALL = _mask(*PERMISSIONS)
ALL_CLUB = _mask(
    "kick_members",
    "ban_members",
    "administrator",
    "manage_channels",
    "manage_club",
    "view_audit_logs",
    "view_club_insights",
    "change_nickname",
    "manage_nicknames",
    "manage_roles",
    "manage_webhooks",
    "manage_emojis",
)
ALL_TEXT = _mask(
    "create_instant_invite",
    "manage_channels",
    "add_reactions",
    "read_messages",
    "send_messages",
    "send_tts_messages",
    "manage_messages",
    "embed_links",
    "attach_files",
    "read_message_history",
    "mention_everyone",
    "external_emojis",
    "manage_roles",
    "manage_webhooks",
)
ALL_VOICE = _mask(
    "create_instant_invite",
    "manage_channels",
    "voice_priority_speaker",
    "stream",
    "read_messages",
    "voice_connect",
    "voice_speak",
    "voice_mute_members",
    "voice_deafen_members",
    "voice_move_members",
    "voice_use_vad",
    "manage_roles",
)


class _capability:
    """Read-only boolean view of one bit of :attr:`Permission.allow`."""

    def __init__(self, name: str, bit: int) -> None:
        self.name = name
        self.bit = bit

    def __get__(self, instance: Any, owner: type) -> Any:
        if instance is None:
            return self
        return bool(instance.allow & self.bit)

    def __set__(self, instance: Any, value: Any) -> None:
        raise AttributeError(f"Permission.{self.name} is read-only")


class Permission:
    """Immutable pair of allow/deny capability masks."""

    def __init__(self, allow: int | str = 0, deny: int | str = 0) -> None:
        self._allow = int(allow or 0)
        self._deny = int(deny or 0)

    @classmethod
    def all(cls) -> "Permission":
        return cls(ALL)

    @property
    def allow(self) -> int:
        return self._allow

    @property
    def deny(self) -> int:
        return self._deny

    def has(self, name: str) -> bool:
        """Return ``True`` when capability ``name`` is allowed. Unknown names raise ``KeyError``."""

        return bool(self._allow & PERMISSIONS[name])

    def to_dict(self) -> Dict[str, bool]:
        """Map each allowed capability to ``True`` and each denied one to ``False``."""

        out: Dict[str, bool] = {}
        for name, bit in PERMISSIONS.items():
            if self._allow & bit:
                out[name] = True
            elif self._deny & bit:
                out[name] = False
        return out

    def to_json(self) -> Dict[str, int]:
        return {"allow": self._allow, "deny": self._deny}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Permission):
            return NotImplemented
        return (self._allow, self._deny) == (other.allow, other.deny)

    def __hash__(self) -> int:
        return hash((self._allow, self._deny))

    def __repr__(self) -> str:
        return f"<Permission allow={self._allow} deny={self._deny}>"


for _name, _bit in PERMISSIONS.items():
    setattr(Permission, _name, _capability(_name, _bit))
del _name, _bit

_OVERWRITE_TYPES = {0: "role", 1: "member", "0": "role", "1": "member"}


class PermissionOverwrite(Base, Permission):
    """Channel overwrite for a single role or member."""

    _repr_attrs = ("type", "allow", "deny")

    def __init__(self, data: Mapping[str, Any]) -> None:
        Base.__init__(self, data.get("id"))
        Permission.__init__(self, data.get("allow", 0), data.get("deny", 0))
        raw_type = data.get("type")
        self.type: str | None = _OVERWRITE_TYPES.get(raw_type, raw_type)

    def to_json(self, props=()) -> Dict[str, Any]:
        return Base.to_json(self, ["type", "allow", "deny", *props])

    __eq__ = Base.__eq__
    __hash__ = Base.__hash__
    __repr__ = Base.__repr__


__all__ = [
    "PERMISSIONS",
    "ADMINISTRATOR",
    "ALL",
    "ALL_CLUB",
    "ALL_TEXT",
    "ALL_VOICE",
    "Permission",
    "PermissionOverwrite",
]
