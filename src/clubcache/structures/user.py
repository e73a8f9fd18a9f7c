"""Process-wide user identity shared by every membership of that user."""

from __future__ import annotations

from typing import Any, Mapping, Tuple

from .base import Base, Field, merge_fields

_FIELDS: Tuple[Field, ...] = (
    ("username", "username", None),
    ("discriminator", "discriminator", None),
    ("avatar", "avatar", None),
    ("bot", "bot", bool),
    ("system", "system", bool),
)


class User(Base):
    """A platform account, cached once per process."""

    _repr_attrs = ("username", "discriminator", "bot")

    def __init__(self, data: Mapping[str, Any], client: Any = None) -> None:
        super().__init__(data.get("id"))
        self._client = client
        self.username: str | None = None
        self.discriminator: str | None = None
        self.avatar: str | None = None
        self.bot = False
        self.system = False
        self.update(data)

    def update(self, data: Mapping[str, Any]) -> None:
        merge_fields(self, data, _FIELDS)

    @property
    def mention(self) -> str:
        return f"<@{self.id}>"

    def to_json(self, props=()) -> dict:
        return super().to_json([attr for _, attr, _ in _FIELDS] + list(props))


__all__ = ["User"]
