# models/journal.py

from dataclasses import dataclass
from typing import Optional

from dearself.models.enums import Mood

@dataclass
class JournalEntry:
    id: str
    title: str
    content: str
    mood: Mood
    date: str
    user_id: str
    created_at: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "mood": self.mood.value,
            "emoji": self.mood.emoji,
            "date": self.date,
            "user_id": self.user_id,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "JournalEntry":
        return cls(
            id=data["id"],
            title=data["title"],
            content=data.get("content", ""),
            mood=Mood.parse(data.get("mood", "neutral")),
            date=data["date"],
            user_id=data["user_id"],
            created_at=data.get("created_at"),
        )
