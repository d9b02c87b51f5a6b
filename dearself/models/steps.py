# models/steps.py

from dataclasses import dataclass, asdict
from typing import Optional

@dataclass
class StepsLog:
    id: str
    steps: int
    date: str
    user_id: str
    created_at: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "StepsLog":
        return cls(
            id=data["id"],
            steps=int(data["steps"]),
            date=data["date"],
            user_id=data["user_id"],
            created_at=data.get("created_at"),
        )
