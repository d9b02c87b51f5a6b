"""
DearSelf - API routers
"""

from . import auth, breathe, dashboard, hydration, journal, mood, steps, tasks

routers = [
    auth.router,
    tasks.router,
    hydration.router,
    mood.router,
    steps.router,
    journal.router,
    breathe.router,
    dashboard.router,
]

__all__ = ['routers']
