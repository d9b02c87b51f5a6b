from pydantic import BaseModel, Field
from typing import Any, Dict, Optional

# ===== AUTH =====

class Credentials(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=1, max_length=256)

class AuthUserOut(BaseModel):
    id: str
    email: Optional[str] = None

class AuthResult(BaseModel):
    user: AuthUserOut
    access_token: Optional[str] = None
    confirmation_required: bool = False

# ===== PANELS =====

class TaskCreate(BaseModel):
    title: str
    description: Optional[str] = None
    priority: str = "medium"

class TaskUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[str] = None
    completed: Optional[bool] = None

class WaterLog(BaseModel):
    amount_ml: int

class MoodCheckIn(BaseModel):
    mood: str
    intensity: int = 5
    notes: Optional[str] = None

class StepsEntry(BaseModel):
    steps: int

class JournalEntryIn(BaseModel):
    title: str
    content: str
    mood: str = "neutral"
    date: Optional[str] = None

class PatternChoice(BaseModel):
    name: str

# ===== RESPONSES =====

class MutationResult(BaseModel):
    """ok is False when the store call failed; view is then unchanged"""
    ok: bool
    view: Dict[str, Any]

    @classmethod
    def of(cls, ok: bool, view: Dict[str, Any]) -> "MutationResult":
        return cls(ok=ok, view=view)

class HealthCheck(BaseModel):
    status: str
    service: str
    version: str
    timestamp: float
