# models/breathing.py

from dataclasses import dataclass, asdict
from typing import Optional

@dataclass
class BreathingSessionLog:
    """A finished breathing session as stored remotely"""
    id: str
    pattern_name: str
    duration_seconds: int
    cycles_completed: int
    date: str
    user_id: str
    created_at: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "BreathingSessionLog":
        return cls(
            id=data["id"],
            pattern_name=data["pattern_name"],
            duration_seconds=int(data.get("duration_seconds", 0)),
            cycles_completed=int(data.get("cycles_completed", 0)),
            date=data["date"],
            user_id=data["user_id"],
            created_at=data.get("created_at"),
        )
