"""
Insertion-ordered, id-keyed store for cached entities.

A :class:`Registry` backs every one-to-many edge of the club graph (channels,
members, roles, voice states, permission overwrites and the process-wide user
cache). ``add`` constructs-or-merges, ``update`` merges only. Both mutate the
stored entity in place, so every other holder of a reference observes the
merge.
"""

from __future__ import annotations

from typing import (
    Any,
    Callable,
    Dict,
    Generic,
    Iterator,
    List,
    Mapping,
    Optional,
    Type,
    TypeVar,
)

from clubcache.errors import MissingIDError

from .base import Base

T = TypeVar("T", bound=Base)


def _key_of(payload: Mapping[str, Any]) -> int:
    entity_id = payload.get("id")
    if entity_id is None:
        raise MissingIDError("Missing object id")
    return int(entity_id)


class Registry(Generic[T]):
    """Mapping of id -> entity of a single declared type."""

    def __init__(self, base_type: Type[T], limit: int = 0) -> None:
        if limit < 0:
            raise ValueError("limit must be >= 0")
        self.base_type = base_type
        self.limit = limit
        self._items: Dict[int, T] = {}

    # ------------------------------------------------------------------ #
    # WRITE helpers
    # ------------------------------------------------------------------ #

    def add(self, obj: T | Mapping[str, Any], *args: Any) -> T:
        """Insert ``obj``, constructing it from a payload or merging into the cached entity."""

        if isinstance(obj, self.base_type):
            existing = self._items.get(obj.id)
            if existing is not None:
                return existing
            self._insert(obj)
            return obj

        key = _key_of(obj)
        existing = self._items.get(key)
        if existing is not None:
            existing.update(obj)
            return existing

        entity = self.base_type(obj, *args)
        self._insert(entity)
        return entity

    def update(self, payload: Mapping[str, Any]) -> Optional[T]:
        """Merge ``payload`` into the cached entity; ``None`` when it is not cached."""

        existing = self._items.get(_key_of(payload))
        if existing is None:
            return None
        existing.update(payload)
        return existing

    def delete(self, entity_id: Any) -> Optional[T]:
        if entity_id is None:
            return None
        return self._items.pop(int(entity_id), None)

    def remove(self, payload: Mapping[str, Any]) -> Optional[T]:
        return self.delete(payload.get("id"))

    def clear(self) -> None:
        self._items.clear()

    def _insert(self, entity: T) -> None:
        self._items[entity.id] = entity
        # Evict oldest-first once a bounded registry overflows.
        while self.limit and len(self._items) > self.limit:
            del self._items[next(iter(self._items))]

    # ------------------------------------------------------------------ #
    # READ helpers
    # ------------------------------------------------------------------ #

    def get(self, entity_id: Any) -> Optional[T]:
        if entity_id is None:
            return None
        return self._items.get(int(entity_id))

    def has(self, entity_id: Any) -> bool:
        return entity_id is not None and int(entity_id) in self._items

    def find(self, predicate: Callable[[T], bool]) -> Optional[T]:
        return next((item for item in self._items.values() if predicate(item)), None)

    def filter(self, predicate: Callable[[T], bool]) -> List[T]:
        return [item for item in self._items.values() if predicate(item)]

    def keys(self) -> List[int]:
        return list(self._items.keys())

    def values(self) -> List[T]:
        return list(self._items.values())

    def items(self) -> List[tuple[int, T]]:
        return list(self._items.items())

    def to_json(self) -> List[dict]:
        return [item.to_json() for item in self._items.values()]

    def __contains__(self, entity_id: object) -> bool:
        try:
            return self.has(entity_id)
        except (TypeError, ValueError):
            return False

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items.values()))

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"<Registry[{self.base_type.__name__}] size={len(self._items)}>"


__all__ = ["Registry"]
