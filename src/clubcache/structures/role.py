"""Club-scoped permission bundles."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping, Tuple

from .base import Base, ClubChild, Field, merge_fields
from .permission import Permission

if TYPE_CHECKING:
    from .club import Club

_FIELDS: Tuple[Field, ...] = (
    ("name", "name", None),
    ("color", "color", int),
    ("hoist", "hoist", bool),
    ("managed", "managed", bool),
    ("mentionable", "mentionable", bool),
    ("position", "position", int),
    ("permissions", "permissions", Permission),
)


class Role(ClubChild, Base):
    """A named allow-mask that members of a club can hold."""

    _repr_attrs = ("name", "position")

    def __init__(self, data: Mapping[str, Any], club: "Club | None" = None) -> None:
        super().__init__(data.get("id"))
        self._client = club.client if club is not None else None
        self._bind_club(club, data.get("club_id"))
        self.name: str | None = None
        self.color = 0
        self.hoist = False
        self.managed = False
        self.mentionable = False
        self.position = 0
        self.permissions = Permission()
        self.update(data)

    def update(self, data: Mapping[str, Any]) -> None:
        merge_fields(self, data, _FIELDS)
        if self.permissions is None:
            self.permissions = Permission()

    @property
    def mention(self) -> str:
        return f"<@&{self.id}>"

    def to_json(self, props=()) -> dict:
        return super().to_json([attr for _, attr, _ in _FIELDS] + list(props))


__all__ = ["Role"]
