# models/enums.py

from enum import Enum

class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

class Mood(str, Enum):
    HAPPY = "happy"
    EXCITED = "excited"
    CALM = "calm"
    NEUTRAL = "neutral"
    ANXIOUS = "anxious"
    SAD = "sad"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def emoji(self) -> str:
        return MOOD_EMOJI[self]

    @classmethod
    def parse(cls, value: str) -> "Mood":
        """Unknown moods display as neutral"""
        try:
            return cls(value)
        except ValueError:
            return cls.NEUTRAL

MOOD_EMOJI = {
    Mood.HAPPY: "😊",
    Mood.EXCITED: "🤩",
    Mood.CALM: "😌",
    Mood.NEUTRAL: "😐",
    Mood.ANXIOUS: "😰",
    Mood.SAD: "😢",
}

class BreathingPhase(str, Enum):
    INHALE = "inhale"
    HOLD = "hold"
    EXHALE = "exhale"
    REST = "rest"

class Table(str, Enum):
    """Remote store collections"""
    TODOS = "todos"
    HYDRATION_LOGS = "hydration_logs"
    JOURNAL_ENTRIES = "journal_entries"
    STEPS_LOGS = "steps_logs"
    MOOD_LOGS = "mood_logs"
    BREATHING_SESSIONS = "breathing_sessions"
