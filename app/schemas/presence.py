from datetime import datetime, timedelta
from enum import Enum
from typing import Iterable, Optional

from pydantic import BaseModel, Field, computed_field, field_validator

from app.core import clock


class ActivityStatusEnum(str, Enum):
    """Recency bucket for a connected user's last activity."""
    ACTIVE = "Ativo"
    INACTIVE = "Inativo"
    ABSENT = "Ausente"


ACTIVE_WINDOW = timedelta(minutes=2)
INACTIVE_WINDOW = timedelta(minutes=10)
JUST_NOW_LABEL = "agora"

STATUS_CLASSES = {
    ActivityStatusEnum.ACTIVE.value: "text-success",
    ActivityStatusEnum.INACTIVE.value: "text-warning",
    ActivityStatusEnum.ABSENT.value: "text-muted",
}
DEFAULT_STATUS_CLASS = "text-secondary"

STATUS_ICONS = {
    ActivityStatusEnum.ACTIVE.value: "fas fa-circle",
    ActivityStatusEnum.INACTIVE.value: "fas fa-circle",
    ActivityStatusEnum.ABSENT.value: "far fa-circle",
}
DEFAULT_STATUS_ICON = "far fa-circle"


def format_online_time(connected_at: datetime, now: datetime) -> str:
    """Render time since connection as "2h 5m", "12m" or "agora"."""
    elapsed = int((clock.as_utc(now) - clock.as_utc(connected_at)).total_seconds())

    if elapsed >= 3600:
        hours, remainder = divmod(elapsed, 3600)
        return f"{hours}h {remainder // 60}m"
    if elapsed >= 60:
        return f"{elapsed // 60}m"
    return JUST_NOW_LABEL


def classify_activity(last_activity: datetime, now: datetime) -> str:
    """Bucket idle time into Ativo (<2min), Inativo (<10min) or Ausente."""
    idle = clock.as_utc(now) - clock.as_utc(last_activity)

    if idle < ACTIVE_WINDOW:
        return ActivityStatusEnum.ACTIVE.value
    if idle < INACTIVE_WINDOW:
        return ActivityStatusEnum.INACTIVE.value
    return ActivityStatusEnum.ABSENT.value


def status_class_for(status: str) -> str:
    return STATUS_CLASSES.get(status, DEFAULT_STATUS_CLASS)


def status_icon_for(status: str) -> str:
    return STATUS_ICONS.get(status, DEFAULT_STATUS_ICON)


class ConnectedUser(BaseModel):
    """A user currently connected to the real-time channel.

    The derived fields read the clock on every access, so two reads of the
    same record can disagree. Use the ``*_at`` methods to pin ``now``.
    """

    connection_id: str = ""
    user_id: str = ""
    user_name: str = ""
    email: str = ""
    connected_at: datetime = Field(default_factory=lambda: clock.utcnow())
    last_activity: datetime = Field(default_factory=lambda: clock.utcnow())
    ip_address: str = ""
    user_agent: str = ""
    is_active: bool = True

    @field_validator("connected_at", "last_activity")
    @classmethod
    def normalize_timestamp(cls, v: datetime) -> datetime:
        return clock.as_utc(v)

    def online_time_at(self, now: datetime) -> str:
        return format_online_time(self.connected_at, now)

    def activity_status_at(self, now: datetime) -> str:
        return classify_activity(self.last_activity, now)

    @computed_field
    @property
    def online_time(self) -> str:
        return self.online_time_at(clock.utcnow())

    @computed_field
    @property
    def activity_status(self) -> str:
        return self.activity_status_at(clock.utcnow())

    @computed_field
    @property
    def status_class(self) -> str:
        return status_class_for(self.activity_status)

    @computed_field
    @property
    def status_icon(self) -> str:
        return status_icon_for(self.activity_status)


class ConnectedUsersStats(BaseModel):
    """Snapshot of everyone connected, broadcast to listeners.

    Counts passed to the constructor are taken as given. Use ``from_users``
    to derive them from the list.
    """

    total_connected: int = 0
    active_users: int = 0
    inactive_users: int = 0
    absent_users: int = 0
    users: list[ConnectedUser] = Field(default_factory=list)
    last_updated: datetime = Field(default_factory=lambda: clock.utcnow())

    @classmethod
    def from_users(
        cls,
        users: Iterable[ConnectedUser],
        now: Optional[datetime] = None,
    ) -> "ConnectedUsersStats":
        now = now or clock.utcnow()
        users = list(users)
        statuses = [user.activity_status_at(now) for user in users]

        return cls(
            total_connected=len(users),
            active_users=statuses.count(ActivityStatusEnum.ACTIVE.value),
            inactive_users=statuses.count(ActivityStatusEnum.INACTIVE.value),
            absent_users=statuses.count(ActivityStatusEnum.ABSENT.value),
            users=users,
            last_updated=now,
        )


class ConnectedUsersCountResponse(BaseModel):
    count: int
    timestamp: datetime


class UserConnectionCheckResponse(BaseModel):
    user_id: str
    is_connected: bool
    timestamp: datetime


class PresenceActionResponse(BaseModel):
    message: str
    removed: Optional[int] = None
    timestamp: datetime
