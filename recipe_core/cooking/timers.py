# =============================================================================
# recipe_core/cooking/timers.py
# Countdown Timers for Cooking Mode
# =============================================================================
"""
Countdown timers based on absolute end times.

A running timer stores when it ends, not how much is left, so the remaining
time is always computed from the clock. Streamlit reruns, hidden tabs and
slow renders therefore never make a timer drift.
"""

from __future__ import annotations
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional


Clock = Callable[[], float]


def format_duration(seconds: float) -> str:
    """``H:MM:SS`` when an hour or more remains, otherwise ``MM:SS``."""
    total = max(0, int(round(seconds)))
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


@dataclass
class CountdownTimer:
    """Single countdown. States: idle, running, paused, expired."""
    duration: float
    label: str = "Timer"
    clock: Clock = field(default=time.time, repr=False, compare=False)
    _end_at: Optional[float] = field(default=None, repr=False)
    _remaining_at_pause: Optional[float] = field(default=None, repr=False)

    @classmethod
    def from_hms(cls, hours: int = 0, minutes: int = 0, seconds: int = 0, **kwargs) -> CountdownTimer:
        return cls(duration=float(hours * 3600 + minutes * 60 + seconds), **kwargs)

    @property
    def is_running(self) -> bool:
        return self._end_at is not None

    @property
    def is_paused(self) -> bool:
        return self._remaining_at_pause is not None

    @property
    def remaining(self) -> float:
        if self._end_at is not None:
            return max(0.0, self._end_at - self.clock())
        if self._remaining_at_pause is not None:
            return self._remaining_at_pause
        return self.duration

    @property
    def is_expired(self) -> bool:
        return self.is_running and self.remaining <= 0

    @property
    def display(self) -> str:
        return format_duration(self.remaining)

    def start(self) -> None:
        if self.duration <= 0 or self.is_running:
            return
        remaining = self._remaining_at_pause if self.is_paused else self.duration
        self._end_at = self.clock() + remaining
        self._remaining_at_pause = None

    def pause(self) -> None:
        if not self.is_running:
            return
        self._remaining_at_pause = self.remaining
        self._end_at = None

    def resume(self) -> None:
        if self.is_paused:
            self.start()

    def reset(self) -> None:
        self._end_at = None
        self._remaining_at_pause = None

    def add_minutes(self, minutes: float) -> None:
        """Extend (or with a negative value, shorten) the countdown."""
        delta = minutes * 60
        if self._end_at is not None:
            self._end_at = max(self.clock(), self._end_at + delta)
        elif self._remaining_at_pause is not None:
            self._remaining_at_pause = max(0.0, self._remaining_at_pause + delta)
        else:
            self.duration = max(0.0, self.duration + delta)


class MultiTimer:
    """Named timers running side by side (e.g. "Oven", "Rice")."""

    def __init__(self, clock: Clock = time.time):
        self._clock = clock
        self._timers: Dict[str, CountdownTimer] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._timers

    def __len__(self) -> int:
        return len(self._timers)

    def add(self, name: str, duration: float, start: bool = True) -> CountdownTimer:
        timer = CountdownTimer(duration=duration, label=name, clock=self._clock)
        self._timers[name] = timer
        if start:
            timer.start()
        return timer

    def get(self, name: str) -> Optional[CountdownTimer]:
        return self._timers.get(name)

    def remove(self, name: str) -> None:
        self._timers.pop(name, None)

    def timers(self) -> List[CountdownTimer]:
        return list(self._timers.values())

    def expired(self) -> List[CountdownTimer]:
        return [timer for timer in self._timers.values() if timer.is_expired]

    def running(self) -> List[CountdownTimer]:
        return [timer for timer in self._timers.values() if timer.is_running and not timer.is_expired]
