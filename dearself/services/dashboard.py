# services/dashboard.py

import logging
from dataclasses import dataclass, asdict
from typing import Any, Dict, List

from dearself.models.enums import Table
from dearself.services.base import Panel

logger = logging.getLogger(__name__)

@dataclass
class DashboardSummary:
    total_tasks: int = 0
    completed_tasks: int = 0
    hydration_ml: int = 0
    today_steps: int = 0
    journal_entries: int = 0
    mood_score: int = 0
    breathing_sessions: int = 0

    def to_dict(self) -> dict:
        return asdict(self)

class DashboardPanel(Panel):
    """Read-only summary across every logging domain"""

    name = "dashboard"

    def clear(self) -> None:
        self.summary = DashboardSummary()

    def _load(self, user_id: str) -> None:
        today = self.today()

        todos = self.store.table(Table.TODOS).select("completed").eq("user_id", user_id).execute()
        hydration = (
            self.store.table(Table.HYDRATION_LOGS)
            .select("amount_ml")
            .eq("user_id", user_id)
            .eq("date", today)
            .execute()
        )
        steps = (
            self.store.table(Table.STEPS_LOGS)
            .select("steps")
            .eq("user_id", user_id)
            .eq("date", today)
            .order("created_at", desc=True)
            .first()
        )
        journal_count = self.store.table(Table.JOURNAL_ENTRIES).select("*").eq("user_id", user_id).count()
        recent_mood = (
            self.store.table(Table.MOOD_LOGS)
            .select("intensity")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .first()
        )
        breathing_count = self.store.table(Table.BREATHING_SESSIONS).select("*").eq("user_id", user_id).count()

        self.summary = DashboardSummary(
            total_tasks=len(todos),
            completed_tasks=sum(1 for todo in todos if todo.get("completed")),
            hydration_ml=sum(int(row["amount_ml"]) for row in hydration),
            today_steps=int(steps["steps"]) if steps else 0,
            journal_entries=journal_count,
            mood_score=int(recent_mood["intensity"]) if recent_mood else 0,
            breathing_sessions=breathing_count,
        )

    def cards(self) -> List[Dict[str, Any]]:
        summary = self.summary
        return [
            {"title": "Tasks Today", "value": f"{summary.completed_tasks}/{summary.total_tasks}"},
            {"title": "Hydration", "value": f"{summary.hydration_ml}ml"},
            {"title": "Steps Today", "value": f"{summary.today_steps:,}"},
            {"title": "Mood Score", "value": f"{summary.mood_score}/10"},
            {"title": "Journal Entries", "value": str(summary.journal_entries)},
            {"title": "Breathing Sessions", "value": str(summary.breathing_sessions)},
        ]

    def view(self) -> Dict[str, Any]:
        return {
            "summary": self.summary.to_dict(),
            "cards": self.cards(),
        }
