# services/hydration.py

import logging
from typing import Any, Dict, List, Optional

from dearself.models.enums import Table
from dearself.models.hydration import DailyAmount, HydrationLog
from dearself.services.base import Panel
from dearself.utils.validators import require_positive

logger = logging.getLogger(__name__)

QUICK_AMOUNT_LABELS = {250: "Glass", 500: "Bottle", 750: "Large", 1000: "Jumbo"}

class HydrationPanel(Panel):
    """Water intake for today and the trailing week"""

    name = "hydration"

    def clear(self) -> None:
        self.logs: List[HydrationLog] = []
        self.total = 0
        self.weekly: List[DailyAmount] = []

    def _load(self, user_id: str) -> None:
        today_rows = (
            self.store.table(Table.HYDRATION_LOGS)
            .select("*")
            .eq("user_id", user_id)
            .eq("date", self.today())
            .order("created_at", desc=True)
            .execute()
        )
        weekly_rows = (
            self.store.table(Table.HYDRATION_LOGS)
            .select("amount_ml, date")
            .eq("user_id", user_id)
            .gte("date", self.week_start())
            .order("date")
            .execute()
        )

        # Rows arrive date-ascending; dict keeps that order
        per_day: Dict[str, int] = {}
        for row in weekly_rows:
            per_day[row["date"]] = per_day.get(row["date"], 0) + int(row["amount_ml"])

        self.logs = [HydrationLog.from_dict(row) for row in today_rows]
        self.total = sum(log.amount_ml for log in self.logs)
        self.weekly = [DailyAmount(date=day, amount=amount) for day, amount in per_day.items()]

    @property
    def goal(self) -> int:
        return self.goals.hydration_ml

    @property
    def percentage(self) -> float:
        return min(self.total / self.goal * 100, 100.0)

    def quick_amounts(self) -> List[Dict[str, Any]]:
        return [
            {"amount": amount, "label": QUICK_AMOUNT_LABELS.get(amount, f"{amount}ml")}
            for amount in self.goals.quick_amounts_ml
        ]

    def log_water(self, amount_ml: int) -> bool:
        amount_ml = require_positive(amount_ml, "amount_ml")
        today = self.today()
        return self._mutate("logging water", lambda user_id: self.store.table(Table.HYDRATION_LOGS).insert({
            "amount_ml": amount_ml,
            "date": today,
            "user_id": user_id,
        }))

    def delete(self, log_id: str) -> bool:
        def write(user_id):
            self._require_owned(Table.HYDRATION_LOGS, log_id, user_id)
            self.store.table(Table.HYDRATION_LOGS).delete(log_id)

        return self._mutate("deleting water log", write)

    def recommendation(self, hour: Optional[int] = None) -> Dict[str, str]:
        hour = self.current_hour() if hour is None else hour
        percentage = self.percentage

        if percentage >= 100:
            return {
                "type": "success",
                "title": "Excellent hydration! 🎉",
                "message": "You've reached your daily goal. Keep up the great work!",
                "color": "from-green-400 to-emerald-500",
            }
        if percentage >= 75:
            return {
                "type": "good",
                "title": "Almost there! 💪",
                "message": f"Just {self.goal - self.total}ml more to reach your goal.",
                "color": "from-pastel-purple-deep to-pastel-magenta-deep",
            }
        if hour > 18 and percentage < 50:
            return {
                "type": "warning",
                "title": "Catch up time! ⏰",
                "message": "It's evening and you're behind. Try to drink more water before bed.",
                "color": "from-orange-400 to-red-400",
            }
        return {
            "type": "info",
            "title": "Keep going! 💧",
            "message": f"You're {percentage:.0f}% of the way to your goal.",
            "color": "from-pastel-pink-deep to-pastel-purple-deep",
        }

    def view(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "goal": self.goal,
            "percentage": round(self.percentage, 1),
            "logs": [log.to_dict() for log in self.logs],
            "weekly": [day.to_dict() for day in self.weekly],
            "quick_amounts": self.quick_amounts(),
            "recommendation": self.recommendation(),
        }
