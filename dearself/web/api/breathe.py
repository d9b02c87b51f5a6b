"""
Breathing endpoints

Handlers are coroutines so timer controls run on the event loop, the same
loop the scheduler fires ticks on. The optional ?page= id keeps each open
breathing screen on its own timer.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from dearself.core.breathing import BreathingSession
from dearself.core.session import AuthSession
from dearself.services import BreathingPanel, BreathingRegistry
from dearself.web.dependencies import (
    get_breathing_panel,
    get_breathing_registry,
    get_page_id,
    require_session,
)
from dearself.web.schemas import MutationResult, PatternChoice

router = APIRouter(prefix="/api/breathe", tags=["breathe"])

@router.get("", response_model=Dict[str, Any])
async def get_breathing(panel: BreathingPanel = Depends(get_breathing_panel)):
    return panel.view()

@router.get("/state", response_model=Dict[str, Any])
async def get_timer_state(
    session: AuthSession = Depends(require_session),
    registry: BreathingRegistry = Depends(get_breathing_registry),
    page_id: str = Depends(get_page_id),
):
    """Timer snapshot only, for polling once per second; never creates a timer"""
    timer = registry.get(session.user_id, page_id)
    if timer is None:
        return BreathingSession().snapshot()
    return timer.snapshot()

@router.post("/pattern", response_model=Dict[str, Any])
async def select_pattern(payload: PatternChoice, panel: BreathingPanel = Depends(get_breathing_panel)):
    panel.select_pattern(payload.name)
    return panel.view()

@router.post("/toggle", response_model=Dict[str, Any])
async def toggle(panel: BreathingPanel = Depends(get_breathing_panel)):
    panel.toggle()
    return panel.view()

@router.post("/reset", response_model=Dict[str, Any])
async def reset(panel: BreathingPanel = Depends(get_breathing_panel)):
    panel.reset()
    return panel.view()

@router.post("/record", response_model=MutationResult)
async def record(panel: BreathingPanel = Depends(get_breathing_panel)):
    """Save the current session; the timer starts over once it is stored"""
    ok = panel.record()
    return MutationResult.of(ok, panel.view())

@router.delete("")
async def leave(
    session: AuthSession = Depends(require_session),
    registry: BreathingRegistry = Depends(get_breathing_registry),
    page_id: str = Depends(get_page_id),
):
    """Leaving the screen stops and drops that screen's timer"""
    registry.discard(session.user_id, page_id)
    return {"ok": True}
