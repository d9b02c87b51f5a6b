from typing import Any, Dict

from fastapi import APIRouter, Depends, Query

from dearself.services import TasksPanel
from dearself.web.dependencies import get_tasks_panel
from dearself.web.schemas import MutationResult, TaskCreate, TaskUpdate

router = APIRouter(prefix="/api/tasks", tags=["tasks"])

@router.get("", response_model=Dict[str, Any])
def list_tasks(panel: TasksPanel = Depends(get_tasks_panel)):
    """Tasks of the current user, newest first"""
    return panel.view()

@router.post("", response_model=MutationResult)
def create_task(payload: TaskCreate, panel: TasksPanel = Depends(get_tasks_panel)):
    ok = panel.create(payload.title, payload.description, payload.priority)
    return MutationResult.of(ok, panel.view())

@router.patch("/{task_id}", response_model=MutationResult)
def update_task(task_id: str, payload: TaskUpdate, panel: TasksPanel = Depends(get_tasks_panel)):
    ok = panel.update(task_id, **payload.model_dump(exclude_none=True))
    return MutationResult.of(ok, panel.view())

@router.post("/{task_id}/toggle", response_model=MutationResult)
def toggle_task(task_id: str, panel: TasksPanel = Depends(get_tasks_panel)):
    ok = panel.toggle(task_id)
    return MutationResult.of(ok, panel.view())

@router.delete("/{task_id}", response_model=MutationResult)
def delete_task(task_id: str, confirm: bool = Query(False),
                panel: TasksPanel = Depends(get_tasks_panel)):
    ok = panel.delete(task_id, confirmed=confirm)
    return MutationResult.of(ok, panel.view())
