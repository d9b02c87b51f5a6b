"""
DearSelf - Services Package
Feature panels backed by the remote store
"""

from .base import Panel
from .tasks import TasksPanel
from .hydration import HydrationPanel
from .mood import MoodPanel
from .steps import StepsPanel
from .journal import JournalPanel
from .breathing import BreathingPanel, BreathingRegistry
from .dashboard import DashboardPanel, DashboardSummary

__all__ = [
    'Panel',
    'TasksPanel',
    'HydrationPanel',
    'MoodPanel',
    'StepsPanel',
    'JournalPanel',
    'BreathingPanel',
    'BreathingRegistry',
    'DashboardPanel',
    'DashboardSummary',
]
