# services/steps.py

import logging
from typing import Any, Dict, List, Optional

from dearself.models.enums import Table
from dearself.models.steps import StepsLog
from dearself.services.base import Panel
from dearself.utils.validators import require_non_negative

logger = logging.getLogger(__name__)

class StepsPanel(Panel):
    """Daily step count, one row per day"""

    name = "steps"

    def clear(self) -> None:
        self.today_log: Optional[StepsLog] = None
        self.weekly: List[StepsLog] = []

    def _fetch_today(self, user_id: str) -> Optional[Dict[str, Any]]:
        # Most recent row wins if a race ever produced duplicates
        return (
            self.store.table(Table.STEPS_LOGS)
            .select("*")
            .eq("user_id", user_id)
            .eq("date", self.today())
            .order("created_at", desc=True)
            .first()
        )

    def _load(self, user_id: str) -> None:
        today_row = self._fetch_today(user_id)
        weekly_rows = (
            self.store.table(Table.STEPS_LOGS)
            .select("*")
            .eq("user_id", user_id)
            .gte("date", self.week_start())
            .order("date", desc=True)
            .execute()
        )

        self.today_log = StepsLog.from_dict(today_row) if today_row else None
        self.weekly = [StepsLog.from_dict(row) for row in weekly_rows]

    @property
    def goal(self) -> int:
        return self.goals.steps

    @property
    def steps_today(self) -> int:
        return self.today_log.steps if self.today_log else 0

    @property
    def percentage(self) -> float:
        return min(self.steps_today / self.goal * 100, 100.0)

    @property
    def weekly_average(self) -> int:
        if not self.weekly:
            return 0
        return int(sum(log.steps for log in self.weekly) / len(self.weekly) + 0.5)

    def log_steps(self, steps: int) -> bool:
        """Update today's row when there is one, insert otherwise"""
        steps = require_non_negative(steps, "steps")
        today = self.today()

        def write(user_id):
            existing = self._fetch_today(user_id)
            table = self.store.table(Table.STEPS_LOGS)
            if existing:
                table.update(existing["id"], {"steps": steps})
            else:
                table.insert({"steps": steps, "date": today, "user_id": user_id})

        return self._mutate("logging steps", write)

    def recommendation(self, hour: Optional[int] = None) -> Dict[str, Any]:
        hour = self.current_hour() if hour is None else hour
        steps = self.steps_today
        percentage = steps / self.goal * 100

        if percentage >= 100:
            return {
                "title": "Outstanding! 🏆",
                "message": "You've crushed your daily step goal! Keep up the amazing work.",
                "color": "from-green-400 to-emerald-500",
                "suggestions": [
                    "Consider a gentle cool-down walk",
                    "Stretch to prevent muscle soreness",
                    "Celebrate your achievement!",
                ],
            }
        if percentage >= 75:
            return {
                "title": "Almost there! 💪",
                "message": f"Just {self.goal - steps} more steps to reach your goal.",
                "color": "from-pastel-purple-deep to-pastel-magenta-deep",
                "suggestions": [
                    "Take a short walk around the block",
                    "Use stairs instead of elevators",
                    "Park further away from your destination",
                ],
            }
        if hour > 18 and percentage < 50:
            return {
                "title": "Evening boost needed! 🌅",
                "message": "It's getting late, but you can still make progress.",
                "color": "from-orange-400 to-red-400",
                "suggestions": [
                    "Take a brisk 15-minute walk",
                    "Do some indoor walking or dancing",
                    "Walk while talking on the phone",
                ],
            }
        if percentage < 25 and hour > 12:
            return {
                "title": "Time to get moving! 🚶",
                "message": "Your body is ready for some activity.",
                "color": "from-blue-400 to-cyan-400",
                "suggestions": [
                    "Take a lunch break walk",
                    "Walk to a nearby coffee shop",
                    "Try walking meetings if possible",
                ],
            }
        return {
            "title": "Great start! 🌟",
            "message": f"You're {percentage:.0f}% of the way to your goal.",
            "color": "from-pastel-pink-deep to-pastel-purple-deep",
            "suggestions": [
                "Take regular walking breaks",
                "Walk while listening to music or podcasts",
                "Find a walking buddy for motivation",
            ],
        }

    def view(self) -> Dict[str, Any]:
        return {
            "today": self.today_log.to_dict() if self.today_log else None,
            "steps_today": self.steps_today,
            "goal": self.goal,
            "percentage": round(self.percentage, 1),
            "weekly": [log.to_dict() for log in self.weekly],
            "weekly_average": self.weekly_average,
            "recommendation": self.recommendation(),
        }
