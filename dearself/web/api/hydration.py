from typing import Any, Dict

from fastapi import APIRouter, Depends

from dearself.services import HydrationPanel
from dearself.web.dependencies import get_hydration_panel
from dearself.web.schemas import MutationResult, WaterLog

router = APIRouter(prefix="/api/hydration", tags=["hydration"])

@router.get("", response_model=Dict[str, Any])
def get_hydration(panel: HydrationPanel = Depends(get_hydration_panel)):
    """Today's intake, the last seven days and a time-of-day tip"""
    return panel.view()

@router.post("", response_model=MutationResult)
def log_water(payload: WaterLog, panel: HydrationPanel = Depends(get_hydration_panel)):
    ok = panel.log_water(payload.amount_ml)
    return MutationResult.of(ok, panel.view())

@router.delete("/{log_id}", response_model=MutationResult)
def delete_log(log_id: str, panel: HydrationPanel = Depends(get_hydration_panel)):
    ok = panel.delete(log_id)
    return MutationResult.of(ok, panel.view())
