"""Game session services: the coordinator and its timers.

This package holds the authoritative game state and its transitions,
kept free of Socket.IO and Flask so it can be driven directly in tests.
Socket handlers and HTTP routes import from here.
"""

from .coordinator import SessionCoordinator
from .scheduler import BackgroundScheduler, ManualScheduler, TimerHandle

__all__ = ['SessionCoordinator', 'BackgroundScheduler', 'ManualScheduler', 'TimerHandle']
