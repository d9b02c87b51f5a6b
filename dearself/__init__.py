"""
DearSelf - personal wellness tracker

Tasks, hydration, mood, steps, journaling and guided breathing on top of a
hosted backend-as-a-service.
"""

__version__ = "1.0.0"
