# services/tasks.py

import logging
from typing import Any, Dict, List, Optional

from dearself.core.exceptions import NotFoundError, ValidationError
from dearself.models.enums import Table, TaskPriority
from dearself.models.task import Task
from dearself.services.base import Panel
from dearself.utils.validators import MAX_TITLE_LENGTH, require_priority, require_text

logger = logging.getLogger(__name__)

class TasksPanel(Panel):
    """To-do list with priorities"""

    name = "tasks"

    def clear(self) -> None:
        self.tasks: List[Task] = []

    def _load(self, user_id: str) -> None:
        rows = (
            self.store.table(Table.TODOS)
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .execute()
        )
        self.tasks = [Task.from_dict(row) for row in rows]

    @property
    def completed_count(self) -> int:
        return sum(1 for task in self.tasks if task.completed)

    @property
    def total_count(self) -> int:
        return len(self.tasks)

    def get(self, task_id: str) -> Task:
        for task in self.tasks:
            if task.id == task_id:
                return task
        raise NotFoundError(f"Task {task_id} not found")

    def create(self, title: str, description: Optional[str] = None,
               priority: str = TaskPriority.MEDIUM.value) -> bool:
        title = require_text(title, "title", MAX_TITLE_LENGTH)
        priority = require_priority(priority)
        description = (description or "").strip() or None

        return self._mutate("adding task", lambda user_id: self.store.table(Table.TODOS).insert({
            "title": title,
            "description": description,
            "priority": priority.value,
            "completed": False,
            "user_id": user_id,
        }))

    def toggle(self, task_id: str) -> bool:
        task = self.get(task_id)
        return self.update(task_id, completed=not task.completed)

    def update(self, task_id: str, title: Optional[str] = None, description: Optional[str] = None,
               priority: Optional[str] = None, completed: Optional[bool] = None) -> bool:
        fields: Dict[str, Any] = {}
        if title is not None:
            fields["title"] = require_text(title, "title", MAX_TITLE_LENGTH)
        if description is not None:
            fields["description"] = description.strip() or None
        if priority is not None:
            fields["priority"] = require_priority(priority).value
        if completed is not None:
            fields["completed"] = bool(completed)
        if not fields:
            raise ValidationError("Nothing to update")

        def write(user_id):
            self._require_owned(Table.TODOS, task_id, user_id)
            self.store.table(Table.TODOS).update(task_id, fields)

        return self._mutate("updating task", write)

    def delete(self, task_id: str, confirmed: bool = False) -> bool:
        self._require_confirmation(confirmed, "a task")

        def write(user_id):
            self._require_owned(Table.TODOS, task_id, user_id)
            self.store.table(Table.TODOS).delete(task_id)

        return self._mutate("deleting task", write)

    def view(self) -> Dict[str, Any]:
        return {
            "tasks": [task.to_dict() for task in self.tasks],
            "completed_count": self.completed_count,
            "total_count": self.total_count,
        }
