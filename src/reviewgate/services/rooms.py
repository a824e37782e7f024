"""Pull request rooms for real-time fanout.

Each live connection sits in at most one room, keyed by project and pull
request number. Writers broadcast to a room after their change commits and
every member receives it, the writer's own connection included, so all
clients render from the same event stream.
"""

import asyncio
import logging
import threading
from typing import Any, Protocol

from fastapi.encoders import jsonable_encoder

from ..config import settings

logger = logging.getLogger(__name__)


class Connection(Protocol):
    """Anything that can receive room events."""

    id: str
    user_id: int

    async def send(self, event: str, payload: Any) -> None: ...


def room_key(project_id: int, pull_request_number: int) -> str:
    return f"pr:{project_id}:{pull_request_number}"


class RoomRegistry:
    """Index from room key to the connections currently joined.

    Membership changes never suspend and run under one lock, so no caller
    observes a room mid-mutation. Broadcasts send to a snapshot taken under
    the same lock. Each send is bounded by ``send_timeout`` seconds.
    """

    def __init__(self, send_timeout: float | None = None) -> None:
        self.send_timeout = (
            settings.room_send_timeout_seconds if send_timeout is None else send_timeout
        )
        self._lock = threading.Lock()
        self._rooms: dict[str, dict[str, Connection]] = {}
        self._membership: dict[str, str] = {}  # connection id -> room key

    def join(self, connection: Connection, project_id: int, pull_request_number: int) -> int:
        """Move the connection into the pull request's room; returns the room size."""
        room = room_key(project_id, pull_request_number)
        with self._lock:
            previous = self._membership.get(connection.id)
            if previous is not None and previous != room:
                self._discard(previous, connection.id)
            self._rooms.setdefault(room, {})[connection.id] = connection
            self._membership[connection.id] = room
            size = len(self._rooms[room])

        if previous is not None and previous != room:
            logger.debug(f"Connection {connection.id} left {previous}")
        logger.debug(f"Connection {connection.id} joined {room} ({size} client(s))")
        return size

    def leave(self, connection: Connection, project_id: int, pull_request_number: int) -> None:
        """Remove the connection from that room. No-op if it is not a member."""
        room = room_key(project_id, pull_request_number)
        with self._lock:
            if self._membership.get(connection.id) != room:
                return
            self._discard(room, connection.id)
            del self._membership[connection.id]
        logger.debug(f"Connection {connection.id} left {room}")

    def disconnect(self, connection: Connection) -> None:
        """Forget the connection entirely. Emits nothing."""
        with self._lock:
            room = self._membership.pop(connection.id, None)
            if room is not None:
                self._discard(room, connection.id)

    def _discard(self, room: str, connection_id: str) -> None:
        # Caller holds the lock
        members = self._rooms.get(room)
        if members is None:
            return
        members.pop(connection_id, None)
        if not members:
            del self._rooms[room]

    def room_size(self, room: str) -> int:
        with self._lock:
            return len(self._rooms.get(room, ()))

    def room_of(self, connection: Connection) -> str | None:
        with self._lock:
            return self._membership.get(connection.id)

    @property
    def connection_count(self) -> int:
        with self._lock:
            return len(self._membership)

    def members(self, room: str) -> list[Connection]:
        with self._lock:
            return list(self._rooms.get(room, {}).values())

    async def broadcast(self, room: str, event: str, payload: Any) -> int:
        """Send ``event`` to every connection in ``room``; returns how many received it.

        A connection whose send fails or outlasts ``send_timeout`` is dropped
        from the registry. Delivery failures are never raised to the caller.
        """
        targets = self.members(room)
        if not targets:
            logger.debug(f"No clients in {room} for {event}")
            return 0

        data = jsonable_encoder(payload, by_alias=True)
        results = await asyncio.gather(
            *(
                asyncio.wait_for(connection.send(event, data), self.send_timeout)
                for connection in targets
            ),
            return_exceptions=True,
        )

        delivered = 0
        for connection, result in zip(targets, results):
            if isinstance(result, asyncio.TimeoutError):
                logger.warning(
                    f"Dropping connection {connection.id} from {room}: send timed out "
                    f"after {self.send_timeout}s"
                )
                self.disconnect(connection)
            elif isinstance(result, BaseException):
                logger.warning(
                    f"Dropping connection {connection.id} from {room}: send failed ({result!r})"
                )
                self.disconnect(connection)
            else:
                delivered += 1

        logger.info(f"Emitted {event} to {room}: {delivered}/{len(targets)} client(s)")
        return delivered

    async def broadcast_to_pull_request(
        self,
        project_id: int,
        pull_request_number: int,
        event: str,
        payload: Any,
    ) -> int:
        return await self.broadcast(room_key(project_id, pull_request_number), event, payload)


room_registry = RoomRegistry()


def get_room_registry() -> RoomRegistry:
    """Dependency for FastAPI to get the process-wide registry."""
    return room_registry
