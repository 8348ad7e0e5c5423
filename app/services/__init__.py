from app.services.connected_users_service import ConnectedUsersService
from app.services.dashboard_service import DashboardService

__all__ = [
    "ConnectedUsersService",
    "DashboardService",
]
