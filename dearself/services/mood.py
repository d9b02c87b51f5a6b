# services/mood.py

import logging
from typing import Any, Dict, List, Optional

from dearself.models.enums import Mood, Table
from dearself.models.mood import MoodLog
from dearself.services.base import Panel
from dearself.utils.validators import require_mood, require_range

logger = logging.getLogger(__name__)

MOOD_OPTIONS = [
    {"value": mood.value, "label": mood.label, "emoji": mood.emoji}
    for mood in Mood
]

class MoodPanel(Panel):
    """Daily mood check-in with intensity and notes"""

    name = "mood"

    def clear(self) -> None:
        self.today_log: Optional[MoodLog] = None
        self.weekly: List[MoodLog] = []

    def _fetch_today(self, user_id: str) -> Optional[Dict[str, Any]]:
        return (
            self.store.table(Table.MOOD_LOGS)
            .select("*")
            .eq("user_id", user_id)
            .eq("date", self.today())
            .order("created_at", desc=True)
            .first()
        )

    def _load(self, user_id: str) -> None:
        today_row = self._fetch_today(user_id)
        weekly_rows = (
            self.store.table(Table.MOOD_LOGS)
            .select("*")
            .eq("user_id", user_id)
            .gte("date", self.week_start())
            .order("date", desc=True)
            .execute()
        )

        self.today_log = MoodLog.from_dict(today_row) if today_row else None
        self.weekly = [MoodLog.from_dict(row) for row in weekly_rows]

    @property
    def average_intensity(self) -> float:
        if not self.weekly:
            return 0.0
        return sum(log.intensity for log in self.weekly) / len(self.weekly)

    def log_mood(self, mood: str, intensity: int = 5, notes: Optional[str] = None) -> bool:
        """Update today's check-in when there is one, insert otherwise"""
        mood = require_mood(mood)
        intensity = require_range(intensity, "intensity", 1, 10)
        notes = (notes or "").strip() or None
        today = self.today()

        def write(user_id):
            fields = {"mood": mood.value, "intensity": intensity, "notes": notes}
            existing = self._fetch_today(user_id)
            table = self.store.table(Table.MOOD_LOGS)
            if existing:
                table.update(existing["id"], fields)
            else:
                table.insert({**fields, "date": today, "user_id": user_id})

        return self._mutate("logging mood", write)

    def recommendation(self) -> Dict[str, Any]:
        if self.today_log is None:
            return {
                "title": "Check in with yourself 💭",
                "message": "How are you feeling today? Tracking your mood helps build self-awareness.",
                "color": "from-pastel-purple-deep to-pastel-magenta-deep",
                "suggestions": [
                    "Take a moment to reflect on your current emotional state",
                    "Consider what factors might be influencing your mood",
                    "Remember that all emotions are valid and temporary",
                ],
            }

        mood, intensity = self.today_log.mood, self.today_log.intensity

        if mood in (Mood.HAPPY, Mood.EXCITED):
            return {
                "title": "Wonderful energy! ✨",
                "message": "You're feeling great today. Here's how to maintain this positive state.",
                "color": "from-yellow-400 to-orange-400",
                "suggestions": [
                    "Share your positive energy with others",
                    "Engage in activities that bring you joy",
                    "Practice gratitude for this good feeling",
                ],
            }
        if mood is Mood.CALM:
            return {
                "title": "Beautiful balance 🧘",
                "message": "Your calm state is perfect for mindful activities.",
                "color": "from-blue-400 to-cyan-400",
                "suggestions": [
                    "Try some gentle meditation or breathing exercises",
                    "Enjoy nature or peaceful surroundings",
                    "Use this time for creative or reflective activities",
                ],
            }
        if mood is Mood.ANXIOUS and intensity > 6:
            return {
                "title": "Take it easy 🤗",
                "message": "High anxiety can be challenging. Here are some ways to find relief.",
                "color": "from-purple-400 to-pink-400",
                "suggestions": [
                    "Try the 4-7-8 breathing technique",
                    "Go for a gentle walk or do light exercise",
                    "Practice grounding techniques (5-4-3-2-1 method)",
                ],
            }
        if mood is Mood.SAD and intensity > 6:
            return {
                "title": "Be gentle with yourself 💙",
                "message": "It's okay to feel sad. Here are some nurturing activities.",
                "color": "from-blue-500 to-indigo-500",
                "suggestions": [
                    "Reach out to a trusted friend or family member",
                    "Engage in a comforting activity you enjoy",
                    "Consider journaling about your feelings",
                ],
            }
        return {
            "title": "Every feeling matters 🌈",
            "message": "Your emotions are valid. Here are some general wellness tips.",
            "color": "from-pastel-pink-deep to-pastel-purple-deep",
            "suggestions": [
                "Stay hydrated and eat nourishing foods",
                "Get some fresh air and natural light",
                "Practice self-compassion and patience",
            ],
        }

    def view(self) -> Dict[str, Any]:
        return {
            "today": self.today_log.to_dict() if self.today_log else None,
            "weekly": [log.to_dict() for log in self.weekly],
            "average_intensity": round(self.average_intensity, 1),
            "options": MOOD_OPTIONS,
            "recommendation": self.recommendation(),
        }
