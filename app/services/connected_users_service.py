import logging
import threading
from datetime import timedelta
from typing import Callable

from app.core import clock
from app.core.config import settings
from app.core.exceptions import ValidationError
from app.schemas.presence import ConnectedUser, ConnectedUsersStats

logger = logging.getLogger(__name__)

StatsListener = Callable[[ConnectedUsersStats], None]


class ConnectedUsersService:
    """In-memory registry of users connected to the real-time channel.

    Entries are keyed by connection id. A user keeps at most one connection:
    registering a new one drops the others. Listeners (the real-time
    transport) receive a fresh ConnectedUsersStats after every change.
    """

    def __init__(self, cleanup_minutes: int = 30):
        self.cleanup_minutes = cleanup_minutes
        self._connected_users: dict[str, ConnectedUser] = {}
        self._listeners: list[StatsListener] = []
        self._lock = threading.RLock()

    def add_user(
        self,
        connection_id: str,
        user_id: str,
        user_name: str,
        email: str = "",
        ip_address: str = "",
        user_agent: str = "",
    ) -> ConnectedUser:
        """Register a connection, replacing any older connection of the same user."""
        now = clock.utcnow()

        with self._lock:
            stale = [
                cid for cid, user in self._connected_users.items()
                if user.user_id == user_id and cid != connection_id
            ]
            for cid in stale:
                removed = self._connected_users.pop(cid)
                logger.info(
                    f"Dropped old connection {cid} for user {removed.user_name}"
                )

            existing = self._connected_users.get(connection_id)
            if existing is not None:
                existing.last_activity = now
                existing.is_active = True
                connected_user = existing
            else:
                connected_user = ConnectedUser(
                    connection_id=connection_id,
                    user_id=user_id,
                    user_name=user_name,
                    email=email,
                    connected_at=now,
                    last_activity=now,
                    ip_address=ip_address,
                    user_agent=user_agent,
                    is_active=True,
                )
                self._connected_users[connection_id] = connected_user

        logger.info(f"User {user_name} ({user_id}) connected via {connection_id}")
        self.broadcast_connected_users_update()
        return connected_user

    def remove_user(self, connection_id: str) -> bool:
        with self._lock:
            removed = self._connected_users.pop(connection_id, None)

        if removed is None:
            return False

        logger.info(
            f"User {removed.user_name} ({removed.user_id}) disconnected from {connection_id}"
        )
        self.broadcast_connected_users_update()
        return True

    def get_connected_users(self) -> list[ConnectedUser]:
        """Purge idle connections, then list one entry per user ordered by name."""
        self.remove_inactive_users(self.cleanup_minutes)
        return self._latest_per_user()

    def get_connected_users_count(self) -> int:
        self.remove_inactive_users(self.cleanup_minutes)
        with self._lock:
            return len(self._connected_users)

    def is_user_connected(self, user_id: str) -> bool:
        with self._lock:
            return any(
                user.user_id == user_id and user.is_active
                for user in self._connected_users.values()
            )

    def update_last_activity(self, connection_id: str) -> bool:
        """Heartbeat from a connection. Unknown connection ids are ignored."""
        with self._lock:
            user = self._connected_users.get(connection_id)
            if user is None:
                return False
            user.last_activity = clock.utcnow()
            user.is_active = True
        return True

    def remove_inactive_users(self, inactive_minutes: int = 30) -> int:
        """Drop connections idle for longer than ``inactive_minutes``.

        Returns the number of connections removed.
        """
        if inactive_minutes < 1:
            raise ValidationError("inactive_minutes must be at least 1")

        cutoff = clock.utcnow() - timedelta(minutes=inactive_minutes)

        with self._lock:
            expired = [
                cid for cid, user in self._connected_users.items()
                if user.last_activity < cutoff
            ]
            removed = [self._connected_users.pop(cid) for cid in expired]

        for user in removed:
            logger.info(
                f"Removed inactive user {user.user_name} ({user.connection_id})"
            )

        if removed:
            logger.info(f"Removed {len(removed)} inactive users")
            self.broadcast_connected_users_update()

        return len(removed)

    def get_stats(self) -> ConnectedUsersStats:
        return ConnectedUsersStats.from_users(self.get_connected_users())

    def subscribe(self, listener: StatsListener) -> None:
        with self._lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def unsubscribe(self, listener: StatsListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def broadcast_connected_users_update(self) -> int:
        """Push current stats to every listener. Returns how many were notified."""
        with self._lock:
            listeners = list(self._listeners)

        if not listeners:
            return 0

        # No purge here: remove_inactive_users broadcasts itself
        stats = ConnectedUsersStats.from_users(self._latest_per_user())

        notified = 0
        for listener in listeners:
            try:
                listener(stats)
                notified += 1
            except Exception as e:
                logger.error(f"Failed to deliver connected users update: {e}", exc_info=True)

        logger.debug(f"Connected users update sent: {stats.total_connected} users")
        return notified

    def clear(self) -> None:
        with self._lock:
            self._connected_users.clear()
            self._listeners.clear()

    def _latest_per_user(self) -> list[ConnectedUser]:
        with self._lock:
            latest: dict[str, ConnectedUser] = {}
            for user in self._connected_users.values():
                current = latest.get(user.user_id)
                if current is None or user.last_activity > current.last_activity:
                    latest[user.user_id] = user

        return sorted(latest.values(), key=lambda u: u.user_name)


connected_users_service = ConnectedUsersService(
    cleanup_minutes=settings.PRESENCE_CLEANUP_MINUTES,
)
