from typing import Any, Dict

from fastapi import APIRouter, Depends

from dearself.services import StepsPanel
from dearself.web.dependencies import get_steps_panel
from dearself.web.schemas import MutationResult, StepsEntry

router = APIRouter(prefix="/api/steps", tags=["steps"])

@router.get("", response_model=Dict[str, Any])
def get_steps(panel: StepsPanel = Depends(get_steps_panel)):
    return panel.view()

@router.post("", response_model=MutationResult)
def log_steps(payload: StepsEntry, panel: StepsPanel = Depends(get_steps_panel)):
    """Set today's step count"""
    ok = panel.log_steps(payload.steps)
    return MutationResult.of(ok, panel.view())
