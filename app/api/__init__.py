from app.api.routes.connected_users import router as connected_users_router
from app.api.routes.dashboard import router as dashboard_router

__all__ = ["connected_users_router", "dashboard_router"]
