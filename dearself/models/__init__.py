"""
DearSelf - Models Package
Data models and enums for the wellness panels
"""

from .enums import (
    TaskPriority,
    Mood,
    BreathingPhase,
    Table
)

from .task import Task
from .hydration import HydrationLog, DailyAmount
from .mood import MoodLog
from .steps import StepsLog
from .journal import JournalEntry
from .breathing import BreathingSessionLog

__all__ = [
    # Enums
    'TaskPriority',
    'Mood',
    'BreathingPhase',
    'Table',

    # Records
    'Task',
    'HydrationLog',
    'DailyAmount',
    'MoodLog',
    'StepsLog',
    'JournalEntry',
    'BreathingSessionLog'
]
