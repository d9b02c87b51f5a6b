# models/hydration.py

from dataclasses import dataclass, asdict
from typing import Optional

@dataclass
class HydrationLog:
    id: str
    amount_ml: int
    date: str  # YYYY-MM-DD
    user_id: str
    created_at: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "HydrationLog":
        return cls(
            id=data["id"],
            amount_ml=int(data["amount_ml"]),
            date=data["date"],
            user_id=data["user_id"],
            created_at=data.get("created_at"),
        )

@dataclass
class DailyAmount:
    date: str
    amount: int

    def to_dict(self) -> dict:
        return asdict(self)
