from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query

from dearself.services import JournalPanel
from dearself.web.dependencies import get_journal_panel
from dearself.web.schemas import JournalEntryIn, MutationResult

router = APIRouter(prefix="/api/journal", tags=["journal"])

@router.get("", response_model=Dict[str, Any])
def list_entries(
    search: str = Query(""),
    mood: Optional[str] = Query(None),
    panel: JournalPanel = Depends(get_journal_panel),
):
    """Entries newest first, optionally filtered by text and mood"""
    return panel.view(search=search, mood=mood)

@router.post("", response_model=MutationResult)
def create_entry(payload: JournalEntryIn, panel: JournalPanel = Depends(get_journal_panel)):
    ok = panel.create(payload.title, payload.content, payload.mood, payload.date)
    return MutationResult.of(ok, panel.view())

@router.put("/{entry_id}", response_model=MutationResult)
def update_entry(entry_id: str, payload: JournalEntryIn,
                 panel: JournalPanel = Depends(get_journal_panel)):
    ok = panel.update(entry_id, payload.title, payload.content, payload.mood, payload.date)
    return MutationResult.of(ok, panel.view())

@router.delete("/{entry_id}", response_model=MutationResult)
def delete_entry(entry_id: str, confirm: bool = Query(False),
                 panel: JournalPanel = Depends(get_journal_panel)):
    ok = panel.delete(entry_id, confirmed=confirm)
    return MutationResult.of(ok, panel.view())
