"""
Tween and Segment Progress Records

A tween is the mutable progress record an animator drives; a segment is a
tween that moves a beam tip from an origin point to a target point.
"""

from dataclasses import dataclass, field
from typing import Optional

from ..core.geometry import Point


@dataclass
class Tween:
    """Progress of a scalar 0 to 1 ramp over ``duration`` ms after ``delay`` ms."""
    duration: float = 0.0
    delay: float = 0.0
    progress: float = 0.0
    start_time: Optional[float] = None
    begun: bool = False
    completed: bool = False

    @property
    def begin_time(self) -> Optional[float]:
        """Instant the ramp begins (start time plus delay), once started."""
        if self.start_time is None:
            return None
        return self.start_time + max(self.delay, 0.0)

    @property
    def end_time(self) -> Optional[float]:
        """Instant the ramp reaches 1."""
        begin = self.begin_time
        if begin is None:
            return None
        return begin + max(self.duration, 0.0)

    def update_progress(self, now: float) -> float:
        """
        Recompute progress for the clock time ``now``.

        Progress depends only on elapsed time, never decreases, and once it
        reaches 1 the tween is terminal. A non-positive duration completes as
        soon as the delay has elapsed.
        """
        if self.completed or self.start_time is None:
            return self.progress

        elapsed = now - self.begin_time
        if elapsed < 0:
            return self.progress

        self.begun = True
        if self.duration <= 0:
            value = 1.0
        else:
            value = min(elapsed / self.duration, 1.0)

        if value > self.progress:
            self.progress = value
        if self.progress >= 1.0:
            self.progress = 1.0
            self.completed = True
        return self.progress


@dataclass
class Segment(Tween):
    """One beam: a tween whose progress moves the tip from origin to target."""
    origin: Point = field(default_factory=Point)
    target: Point = field(default_factory=Point)

    @property
    def current_point(self) -> Point:
        return self.point_at(self.progress)

    def point_at(self, progress: float) -> Point:
        return self.origin.lerp(self.target, progress)
