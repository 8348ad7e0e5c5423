from app.core.config import settings
from app.services.connected_users_service import (
    ConnectedUsersService,
    connected_users_service,
)


def get_connected_users_service() -> ConnectedUsersService:
    """Presence registry dependency. Overridden in tests."""
    return connected_users_service


def get_dashboard_limits() -> dict:
    """Dashboard sizing taken from settings."""
    return {
        "recent_limit": settings.DASHBOARD_RECENT_LIMIT,
        "chart_days": settings.DASHBOARD_CHART_DAYS,
    }
