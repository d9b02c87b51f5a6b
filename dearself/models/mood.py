# models/mood.py

from dataclasses import dataclass
from typing import Optional

from dearself.models.enums import Mood

@dataclass
class MoodLog:
    id: str
    mood: Mood
    intensity: int  # 1-10
    date: str
    user_id: str
    notes: Optional[str] = None
    created_at: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "mood": self.mood.value,
            "emoji": self.mood.emoji,
            "intensity": self.intensity,
            "notes": self.notes,
            "date": self.date,
            "user_id": self.user_id,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "MoodLog":
        return cls(
            id=data["id"],
            mood=Mood.parse(data.get("mood", "neutral")),
            intensity=int(data.get("intensity", 5)),
            date=data["date"],
            user_id=data["user_id"],
            notes=data.get("notes"),
            created_at=data.get("created_at"),
        )
