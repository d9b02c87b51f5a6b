from typing import Any, Dict

from fastapi import APIRouter, Depends

from dearself.services import DashboardPanel
from dearself.web.dependencies import get_dashboard_panel

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])

@router.get("", response_model=Dict[str, Any])
def get_dashboard(panel: DashboardPanel = Depends(get_dashboard_panel)):
    """Summary cards across every logging domain"""
    return panel.view()
