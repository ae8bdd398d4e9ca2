"""
Reveal Performance Monitor

Tracks frame intervals reported by the clock and the lifecycle of every
animator (start delays, beams and fill ramps) so hosts can inspect how a run
behaved.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from loguru import logger

from .animation_config import DEFAULT_FRAME_RATE, FrameMetrics


@dataclass
class AnimationCounters:
    """Animator lifecycle counters."""
    started: int = 0
    completed: int = 0
    cancelled: int = 0
    by_kind: Dict[str, int] = field(default_factory=dict)


class RevealPerformanceMonitor:
    """Collects frame timing and animator statistics for one engine."""

    def __init__(self, dropped_frame_threshold_ms: float = 1000.0 / DEFAULT_FRAME_RATE):
        self.dropped_frame_threshold_ms = dropped_frame_threshold_ms
        self.metrics = FrameMetrics()
        self.counters = AnimationCounters()
        self.active_animations: Dict[str, Dict[str, Any]] = {}
        self.monitoring_enabled = True

    def record_frame_time(self, frame_time: float) -> None:
        """Record the interval in ms between two consecutive frames."""
        if not self.monitoring_enabled:
            return
        self.metrics.add_frame_time(frame_time, self.dropped_frame_threshold_ms)

    def record_animation_start(self, animation_id: str, kind: str = "unknown",
                               start_time: Optional[float] = None) -> None:
        self.counters.started += 1
        self.counters.by_kind[kind] = self.counters.by_kind.get(kind, 0) + 1
        self.active_animations[animation_id] = {"kind": kind, "start_time": start_time}

    def record_animation_end(self, animation_id: str, completed: bool = True) -> None:
        if completed:
            self.counters.completed += 1
        else:
            self.counters.cancelled += 1
        self.active_animations.pop(animation_id, None)

    @property
    def active_count(self) -> int:
        return len(self.active_animations)

    def get_performance_summary(self) -> Dict[str, Any]:
        """Get a summary of frame timing and animator counters."""
        return {
            "fps": round(self.metrics.fps, 2),
            "average_frame_time_ms": round(self.metrics.average_frame_time, 3),
            "total_frames": self.metrics.total_frames,
            "dropped_frames": self.metrics.dropped_frames,
            "active_animations": self.active_count,
            "animations_started": self.counters.started,
            "animations_completed": self.counters.completed,
            "animations_cancelled": self.counters.cancelled,
            "animations_by_kind": dict(self.counters.by_kind),
        }

    def reset_metrics(self) -> None:
        """Reset all collected metrics."""
        self.metrics = FrameMetrics()
        self.counters = AnimationCounters()
        self.active_animations.clear()
        logger.debug("Reveal performance metrics reset")
