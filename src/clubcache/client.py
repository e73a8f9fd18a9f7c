"""
Client context that owns the cached clubs.

:class:`ClubClient` is the collaborator every cached structure talks to: it
maps clubs to shards and channels to clubs, holds the process-wide user cache,
fans diagnostic events out to listeners (and the log), and schedules voice
reconnects. The ``club_*``, ``member_*``, ``channel_*``, ``role_*``,
``presence_update`` and ``voice_state_update`` entry points apply gateway
snapshots and patches to the cache. Network I/O lives elsewhere.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping

from clubcache import config
from clubcache.config.client import ClientOptions
from clubcache.structures import Club, ClubChannel, Member, Registry, Role, User
from clubcache.utils import snowflake

logger = logging.getLogger(__name__)

_EVENT_LEVELS = {"debug": logging.DEBUG, "warn": logging.WARNING, "error": logging.ERROR}


@dataclass
class Shard:
    """Gateway shard handle. Only the id matters to the cache."""

    id: int
    client: "ClubClient"


class ClubClient:
    """Process-wide registry of clubs and users, fed by gateway payloads."""

    def __init__(self, options: ClientOptions | None = None, *, shard_count: int = 1) -> None:
        self.options = options or config.client
        self.user: User | None = None
        self.shards: Dict[int, Shard] = {i: Shard(i, self) for i in range(shard_count)}
        self.club_shard_map: Dict[int, int] = {}
        self.channel_club_map: Dict[int, int] = {}
        self.users: Registry[User] = Registry(User, limit=self.options.USER_CACHE_LIMIT)
        self.clubs: Registry[Club] = Registry(Club)
        self.unavailable_clubs: set[int] = set()
        self.voice_connections: Dict[int, Any] = {}
        self.pending_voice_joins: List[int] = []
        self._listeners: Dict[str, List[Callable[..., Any]]] = defaultdict(list)
        self._voice_tasks: set[asyncio.Task] = set()

    # ------------------------------------------------------------------ #
    # Events
    # ------------------------------------------------------------------ #

    def on(self, event: str, handler: Callable[..., Any] | None = None):
        """Register ``handler`` for ``event``; usable as a decorator."""

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self._listeners[event].append(func)
            return func

        if handler is not None:
            return decorator(handler)
        return decorator

    def emit(self, event: str, *args: Any) -> None:
        logger.log(_EVENT_LEVELS.get(event, logging.DEBUG), "[%s] %s", event, " ".join(map(str, args)))
        for handler in list(self._listeners.get(event, ())):
            try:
                handler(*args)
            except Exception:
                logger.exception("Listener for %r failed", event)

    # ------------------------------------------------------------------ #
    # Voice
    # ------------------------------------------------------------------ #

    async def join_voice_channel(self, channel_id: int) -> None:
        """Connect to ``channel_id``. The transport layer overrides this."""

        logger.info("Voice join requested for channel %s", channel_id)

    def schedule_voice_join(self, channel_id: int) -> None:
        """Run :meth:`join_voice_channel` once the current call stack has unwound."""

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running loop; queueing voice join for channel %s", channel_id)
            self.pending_voice_joins.append(channel_id)
            return
        loop.call_soon(self._spawn_voice_join, channel_id)

    def _spawn_voice_join(self, channel_id: int) -> None:
        task = asyncio.ensure_future(self.join_voice_channel(channel_id))
        self._voice_tasks.add(task)
        task.add_done_callback(self._voice_join_done)

    def _voice_join_done(self, task: asyncio.Task) -> None:
        self._voice_tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            self.emit("error", task.exception(), None)

    async def flush_pending_voice_joins(self) -> None:
        """Join the voice channels queued while no event loop was running."""

        pending, self.pending_voice_joins = self.pending_voice_joins, []
        for channel_id in pending:
            await self.join_voice_channel(channel_id)

    # ------------------------------------------------------------------ #
    # Users
    # ------------------------------------------------------------------ #

    def set_self_user(self, data: Mapping[str, Any]) -> User:
        self.user = self.users.add(data, self)
        return self.user

    def user_update(self, data: Mapping[str, Any]) -> User | None:
        user = self.get_user(data.get("id"))
        if user is not None:
            user.update(data)
        return user

    def get_user(self, user_id: Any) -> User | None:
        """Return the shared :class:`User` for ``user_id``.

        A bounded user cache can evict users that cached members still hold.
        Those are found through the members and put back, so every membership
        of one user keeps sharing a single object.
        """

        user = self.users.get(user_id)
        if user is not None or user_id is None:
            return user
        if self.user is not None and self.user.id == int(user_id):
            return self.users.add(self.user)
        for club in self.clubs:
            member = club.members.get(user_id)
            if member is not None:
                return self.users.add(member.user)
        return None

    # ------------------------------------------------------------------ #
    # Clubs
    # ------------------------------------------------------------------ #

    def _get_club(self, club_id: Any, event: str) -> Club | None:
        club = self.clubs.get(club_id)
        if club is None:
            self.emit("debug", f"{event} referencing an unknown club ID: {club_id}. Discarding.", None)
        return club

    def club_create(self, data: Mapping[str, Any], shard_id: int = 0) -> Club:
        """Cache a full club snapshot, replacing any previous copy."""

        club_id = snowflake(data.get("id"))
        self.club_shard_map[club_id] = shard_id
        self.unavailable_clubs.discard(club_id)
        self.clubs.delete(club_id)
        club = self.clubs.add(data, self)
        logger.info("Cached club %s (%s) with %d member(s)", club.id, club.name, len(club.members))
        return club

    def club_update(self, data: Mapping[str, Any]) -> Club | None:
        club = self._get_club(data.get("id"), "CLUB_UPDATE")
        if club is not None:
            club.update(data)
        return club

    def club_delete(self, data: Mapping[str, Any]) -> Club | None:
        """Flag the club unavailable on an outage, otherwise drop it from the cache."""

        club_id = snowflake(data.get("id"))
        if data.get("unavailable"):
            self.unavailable_clubs.add(club_id)
            club = self.clubs.get(club_id)
            if club is not None:
                club.unavailable = True
            return club

        club = self.clubs.delete(club_id)
        self.club_shard_map.pop(club_id, None)
        self.voice_connections.pop(club_id, None)
        if club is not None:
            for channel_id in club.channels.keys():
                self.channel_club_map.pop(channel_id, None)
        return club

    # ------------------------------------------------------------------ #
    # Members & presences
    # ------------------------------------------------------------------ #

    @staticmethod
    def _member_payload(data: Mapping[str, Any]) -> Dict[str, Any]:
        return {**data, "id": data.get("id") or (data.get("user") or {}).get("id")}

    def member_add(self, club_id: Any, data: Mapping[str, Any]) -> Member | None:
        club = self._get_club(club_id, "CLUB_MEMBER_ADD")
        if club is None:
            return None
        member = club.members.add(self._member_payload(data), club)
        club.member_count = (club.member_count or 0) + 1
        return member

    def member_update(self, club_id: Any, data: Mapping[str, Any]) -> Member | None:
        club = self._get_club(club_id, "CLUB_MEMBER_UPDATE")
        if club is None:
            return None
        payload = self._member_payload(data)
        if data.get("user"):
            self.user_update(payload["user"])
        return club.members.add(payload, club)

    def member_remove(self, club_id: Any, data: Mapping[str, Any]) -> Member | None:
        club = self._get_club(club_id, "CLUB_MEMBER_REMOVE")
        if club is None:
            return None
        payload = self._member_payload(data)
        member = club.members.delete(payload["id"])
        if member is not None:
            club.member_count = max((club.member_count or 1) - 1, 0)
            channel = club.channels.get(member.voice_state.channel_id)
            if channel is not None:
                channel.voice_members.delete(member.id)
            club.voice_states.delete(member.id)
        return member

    def presence_update(self, club_id: Any, data: Mapping[str, Any]) -> Member | None:
        club = self._get_club(club_id, "PRESENCE_UPDATE")
        if club is None:
            return None
        user_data = data.get("user") or {}
        if len(user_data) > 1:
            self.user_update(user_data)
        return club.apply_presence(data)

    def voice_state_update(self, club_id: Any, data: Mapping[str, Any]) -> Member | None:
        """Apply a voice patch and move the member between channel voice lists."""

        club = self._get_club(club_id, "VOICE_STATE_UPDATE")
        if club is None:
            return None
        user_id = snowflake(data.get("user_id"))
        member = club.members.get(user_id)
        if member is None:
            self.emit("debug", f"VOICE_STATE_UPDATE referencing an unknown member ID: {user_id}. Discarding.", club.shard_id)
            return None

        old_channel = club.channels.get(member.voice_state.channel_id)
        member.update({**data, "id": user_id})
        new_channel = club.channels.get(snowflake(data.get("channel_id")))
        if old_channel is not None and old_channel is not new_channel:
            old_channel.voice_members.delete(member.id)
        if new_channel is not None:
            new_channel.voice_members.add(member)
        return member

    # ------------------------------------------------------------------ #
    # Channels & roles
    # ------------------------------------------------------------------ #

    def channel_create(self, data: Mapping[str, Any]) -> ClubChannel | None:
        club = self._get_club(data.get("club_id"), "CHANNEL_CREATE")
        if club is None:
            return None
        channel = club.channels.add({**data, "club_id": club.id}, self, club)
        self.channel_club_map[channel.id] = club.id
        return channel

    def channel_update(self, data: Mapping[str, Any]) -> ClubChannel | None:
        club = self._get_club(data.get("club_id"), "CHANNEL_UPDATE")
        if club is None:
            return None
        return club.channels.update(data)

    def channel_delete(self, data: Mapping[str, Any]) -> ClubChannel | None:
        club = self._get_club(data.get("club_id"), "CHANNEL_DELETE")
        if club is None:
            return None
        channel = club.channels.remove(data)
        if channel is not None:
            self.channel_club_map.pop(channel.id, None)
        return channel

    def role_create(self, club_id: Any, data: Mapping[str, Any]) -> Role | None:
        club = self._get_club(club_id, "CLUB_ROLE_CREATE")
        if club is None:
            return None
        return club.roles.add(data, club)

    def role_update(self, club_id: Any, data: Mapping[str, Any]) -> Role | None:
        club = self._get_club(club_id, "CLUB_ROLE_UPDATE")
        if club is None:
            return None
        return club.roles.add(data, club)

    def role_delete(self, club_id: Any, role_id: Any) -> Role | None:
        club = self._get_club(club_id, "CLUB_ROLE_DELETE")
        if club is None:
            return None
        return club.roles.delete(role_id)


__all__ = ["ClubClient", "Shard"]
