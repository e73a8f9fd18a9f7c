"""Per-member voice attachment."""

from __future__ import annotations

from typing import Any, Mapping, Tuple

from clubcache.utils import snowflake

from .base import Base, Field, merge_fields

_FIELDS: Tuple[Field, ...] = (
    ("channel_id", "channel_id", snowflake),
    ("session_id", "session_id", None),
    ("mute", "mute", bool),
    ("deaf", "deaf", bool),
    ("suppress", "suppress", bool),
    ("self_mute", "self_mute", bool),
    ("self_deaf", "self_deaf", bool),
    ("self_stream", "self_stream", bool),
    ("self_video", "self_video", bool),
)


class VoiceState(Base):
    """Voice channel attachment and mute/deaf flags for one member."""

    _repr_attrs = ("channel_id", "mute", "deaf", "suppress")

    def __init__(self, data: Mapping[str, Any]) -> None:
        super().__init__(data.get("id", data.get("user_id")))
        self.channel_id: int | None = None
        self.session_id: str | None = None
        self.mute = False
        self.deaf = False
        self.suppress = False
        self.self_mute = False
        self.self_deaf = False
        self.self_stream = False
        self.self_video = False
        self.update(data)

    def update(self, data: Mapping[str, Any]) -> None:
        merge_fields(self, data, _FIELDS)

    @property
    def connected(self) -> bool:
        return self.channel_id is not None

    def to_json(self, props=()) -> dict:
        return super().to_json([attr for _, attr, _ in _FIELDS] + list(props))


__all__ = ["VoiceState"]
