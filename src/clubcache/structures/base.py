"""
Shared base for every cached entity.

:class:`Base` owns the immutable ``id`` and the creation time decoded from it,
plus the allow-listed JSON projection used when serializing registries.

:func:`merge_fields` implements the presence-aware merge every stateful entity
relies on: a key missing from the payload leaves the attribute alone, while a
key that is present overwrites it, even when its value is ``None``, ``0``,
``""`` or ``False``. Entities describe their payload keys as ``Field`` tuples
of ``(payload_key, attribute, converter)``.
"""

from __future__ import annotations

import datetime
import weakref
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple

from clubcache.errors import MissingIDError
from clubcache.utils import created_at

Field = Tuple[str, str, Optional[Callable[[Any], Any]]]

_MISSING = object()


def merge_fields(entity: Any, data: Mapping[str, Any], fields: Iterable[Field]) -> None:
    """Copy every field present in ``data`` onto ``entity``."""

    for key, attr, convert in fields:
        if key not in data:
            continue
        value = data[key]
        if convert is not None and value is not None:
            value = convert(value)
        setattr(entity, attr, value)


def _project(value: Any) -> Any:
    to_json = getattr(value, "to_json", None)
    if callable(to_json):
        return to_json()
    if isinstance(value, datetime.datetime):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return [_project(v) for v in value]
    return value


class Base:
    """Entity keyed by an immutable, time-embedded id."""

    _repr_attrs: Tuple[str, ...] = ()

    def __init__(self, entity_id: Any) -> None:
        if entity_id is None:
            raise MissingIDError(f"{type(self).__name__} payload is missing an id")
        self._id = int(entity_id)

    @property
    def id(self) -> int:
        return self._id

    @property
    def created_at(self) -> datetime.datetime:
        """UTC timestamp decoded from :attr:`id`."""

        return created_at(self._id)

    def update(self, data: Mapping[str, Any]) -> None:
        """Merge ``data`` into the entity. Immutable entities ignore merges."""

    def __eq__(self, other: object) -> bool:
        return isinstance(other, type(self)) and other.id == self._id

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._id))

    def __repr__(self) -> str:
        attrs = " ".join(f"{name}={getattr(self, name, None)!r}" for name in ("id", *self._repr_attrs))
        return f"<{type(self).__name__} {attrs}>"

    def to_json(self, props: Iterable[str] = ()) -> Dict[str, Any]:
        """Project the allow-listed ``props`` into a JSON-friendly dict."""

        out: Dict[str, Any] = {"id": self._id, "created_at": self.created_at.isoformat()}
        for prop in props:
            value = getattr(self, prop, _MISSING)
            if value is _MISSING:
                continue
            out[prop] = _project(value)
        return out


class ClubChild:
    """Weak link from a channel, member or role back to the club that owns it.

    The club itself is held through a :func:`weakref.ref`; once it is gone the
    link falls back to looking ``club_id`` up in the client's club registry, so
    a child never keeps its club alive.
    """

    _club_ref: Optional["weakref.ref[Any]"] = None
    _client: Any = None
    club_id: Optional[int] = None

    def _bind_club(self, club: Any, club_id: Any = None) -> None:
        self._club_ref = weakref.ref(club) if club is not None else None
        self.club_id = club.id if club is not None else (int(club_id) if club_id is not None else None)

    @property
    def club(self) -> Any:
        club = self._club_ref() if self._club_ref is not None else None
        if club is None and self._client is not None and self.club_id is not None:
            club = self._client.clubs.get(self.club_id)
        return club

    @club.setter
    def club(self, club: Any) -> None:
        self._bind_club(club)


__all__ = ["Base", "ClubChild", "Field", "merge_fields"]
