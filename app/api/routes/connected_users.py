from fastapi import APIRouter, Depends, Query, Request

from app.api.deps import get_connected_users_service
from app.core import clock
from app.core.rate_limit import rate_limit_read, rate_limit_write
from app.schemas.presence import (
    ConnectedUser,
    ConnectedUsersStats,
    ConnectedUsersCountResponse,
    UserConnectionCheckResponse,
    PresenceActionResponse,
)
from app.services.connected_users_service import ConnectedUsersService

router = APIRouter(prefix="/connected-users", tags=["connected-users"])


@router.get("", response_model=list[ConnectedUser])
@rate_limit_read()
def list_connected_users(
    request: Request,
    service: ConnectedUsersService = Depends(get_connected_users_service),
):
    """List connected users, one entry per user, ordered by name."""
    return service.get_connected_users()


@router.get("/stats", response_model=ConnectedUsersStats)
@rate_limit_read()
def get_connected_users_stats(
    request: Request,
    service: ConnectedUsersService = Depends(get_connected_users_service),
):
    """Counts per activity status plus the user list."""
    return service.get_stats()


@router.get("/count", response_model=ConnectedUsersCountResponse)
@rate_limit_read()
def get_connected_users_count(
    request: Request,
    service: ConnectedUsersService = Depends(get_connected_users_service),
):
    return ConnectedUsersCountResponse(
        count=service.get_connected_users_count(),
        timestamp=clock.utcnow(),
    )


@router.get("/check/{user_id}", response_model=UserConnectionCheckResponse)
@rate_limit_read()
def check_user_connected(
    request: Request,
    user_id: str,
    service: ConnectedUsersService = Depends(get_connected_users_service),
):
    """Whether the user has at least one active connection."""
    return UserConnectionCheckResponse(
        user_id=user_id,
        is_connected=service.is_user_connected(user_id),
        timestamp=clock.utcnow(),
    )


@router.post("/cleanup", response_model=PresenceActionResponse)
@rate_limit_write()
def cleanup_inactive_users(
    request: Request,
    inactive_minutes: int = Query(default=30, ge=1, le=1440),
    service: ConnectedUsersService = Depends(get_connected_users_service),
):
    """Drop connections idle for longer than ``inactive_minutes``."""
    removed = service.remove_inactive_users(inactive_minutes)
    return PresenceActionResponse(
        message="Inactive users cleanup completed",
        removed=removed,
        timestamp=clock.utcnow(),
    )


@router.post("/refresh", response_model=PresenceActionResponse)
@rate_limit_write()
def refresh_connected_users(
    request: Request,
    service: ConnectedUsersService = Depends(get_connected_users_service),
):
    """Push the current connected users snapshot to every listener."""
    service.broadcast_connected_users_update()
    return PresenceActionResponse(
        message="Connected users list refreshed",
        timestamp=clock.utcnow(),
    )
