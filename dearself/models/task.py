# models/task.py

from dataclasses import dataclass, asdict
from typing import Optional

from dearself.models.enums import TaskPriority

@dataclass
class Task:
    id: str
    title: str
    user_id: str
    description: Optional[str] = None
    completed: bool = False
    priority: TaskPriority = TaskPriority.MEDIUM
    created_at: Optional[str] = None

    def to_dict(self) -> dict:
        data = asdict(self)
        data["priority"] = self.priority.value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Task":
        return cls(
            id=data["id"],
            title=data["title"],
            user_id=data["user_id"],
            description=data.get("description"),
            completed=bool(data.get("completed", False)),
            priority=TaskPriority(data.get("priority") or "medium"),
            created_at=data.get("created_at"),
        )
