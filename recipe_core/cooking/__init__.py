"""
Cooking mode: step tracking and countdown timers.
"""

from .progress import ProgressTracker, StepProgress
from .timers import CountdownTimer, MultiTimer, format_duration

__all__ = [
    "ProgressTracker",
    "StepProgress",
    "CountdownTimer",
    "MultiTimer",
    "format_duration",
]
