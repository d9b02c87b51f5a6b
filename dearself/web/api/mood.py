from typing import Any, Dict

from fastapi import APIRouter, Depends

from dearself.services import MoodPanel
from dearself.web.dependencies import get_mood_panel
from dearself.web.schemas import MoodCheckIn, MutationResult

router = APIRouter(prefix="/api/mood", tags=["mood"])

@router.get("", response_model=Dict[str, Any])
def get_mood(panel: MoodPanel = Depends(get_mood_panel)):
    return panel.view()

@router.post("", response_model=MutationResult)
def check_in(payload: MoodCheckIn, panel: MoodPanel = Depends(get_mood_panel)):
    """Record today's mood; a second check-in the same day replaces the first"""
    ok = panel.log_mood(payload.mood, payload.intensity, payload.notes)
    return MutationResult.of(ok, panel.view())
