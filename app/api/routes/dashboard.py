from fastapi import APIRouter, Depends, Request

from app.api.deps import get_connected_users_service, get_dashboard_limits
from app.core.rate_limit import rate_limit_compute
from app.schemas.dashboard import DashboardViewModel, ProcessingRecord
from app.services.connected_users_service import ConnectedUsersService
from app.services.dashboard_service import DashboardService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.post("/summary", response_model=DashboardViewModel)
@rate_limit_compute()
def summarize_dashboard(
    request: Request,
    records: list[ProcessingRecord],
    limits: dict = Depends(get_dashboard_limits),
    service: ConnectedUsersService = Depends(get_connected_users_service),
):
    """Build the dashboard view model from processing records.

    Active users come from the presence registry, so the card reflects who
    is online right now rather than anything in the submitted records.
    """
    active_users = service.get_stats().active_users

    return DashboardService.build_view_model(
        records,
        active_users=active_users,
        recent_limit=limits["recent_limit"],
        chart_days=limits["chart_days"],
    )
