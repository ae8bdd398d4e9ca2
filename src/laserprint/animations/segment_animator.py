"""
Timed and Segment Animators

An animator owns exactly one tween and one frame subscription at a time. It
re-subscribes every frame until the tween completes, reports completion
exactly once, and releases its subscription on completion or cancellation so a
cancelled animator can never fire late.
"""

import uuid
from typing import Callable, Optional

from loguru import logger

from ..core.error_handling import SchedulingError
from ..core.geometry import Point
from .clock import FrameClock, FrameRequest
from .performance_monitor import RevealPerformanceMonitor
from .tween import Segment, Tween


class TimedAnimator:
    """Drives one Tween from a shared clock until it completes or is cancelled."""

    kind = "tween"

    def __init__(self, clock: FrameClock, monitor: Optional[RevealPerformanceMonitor] = None,
                 label: str = ""):
        self.clock = clock
        self.monitor = monitor
        self.animation_id = str(uuid.uuid4())
        self.label = label or self.kind
        self.tween: Optional[Tween] = None
        self._request: Optional[FrameRequest] = None
        self._on_complete: Optional[Callable[[], None]] = None
        self._cancelled = False
        self._finished = False

    @property
    def is_running(self) -> bool:
        return self.tween is not None and not (self._cancelled or self._finished)

    @property
    def is_finished(self) -> bool:
        return self._finished

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    @property
    def progress(self) -> float:
        return self.tween.progress if self.tween else 0.0

    def start(self, tween: Tween, on_complete: Optional[Callable[[], None]] = None,
              start_time: Optional[float] = None) -> str:
        """
        Begin driving ``tween``.

        Args:
            tween: The progress record to advance
            on_complete: Called once when progress reaches 1
            start_time: Instant the delay countdown began; defaults to ``clock.now()``

        Returns:
            Animation ID for tracking

        Raises:
            SchedulingError: If this animator was already started
        """
        if self.tween is not None:
            raise SchedulingError(
                f"Animator {self.label} was already started",
                component=type(self).__name__,
                operation="start",
            )

        tween.start_time = self.clock.now() if start_time is None else start_time
        self.tween = tween
        self._on_complete = on_complete
        self._request = self.clock.request_frame(self._on_frame)

        if self.monitor:
            self.monitor.record_animation_start(self.animation_id, self.kind, tween.start_time)
        logger.debug(
            f"Started {self.label} (duration={tween.duration:.1f}ms, delay={tween.delay:.1f}ms)"
        )
        return self.animation_id

    def cancel(self) -> bool:
        """
        Stop the animation and release its frame subscription.

        Returns:
            True if a running animation was cancelled, False otherwise
        """
        if self.tween is None or self._cancelled or self._finished:
            return False

        self._cancelled = True
        self._on_complete = None
        if self._request is not None:
            self._request.cancel()
            self._request = None

        if self.monitor:
            self.monitor.record_animation_end(self.animation_id, completed=False)
        logger.debug(f"Cancelled {self.label} at progress {self.tween.progress:.2f}")
        return True

    def _on_frame(self, now: float) -> None:
        self._request = None
        if self._cancelled or self._finished or self.tween is None:
            return

        self.tween.update_progress(now)
        if self.tween.completed:
            self._finish()
        else:
            self._request = self.clock.request_frame(self._on_frame)

    def _finish(self) -> None:
        self._finished = True
        callback, self._on_complete = self._on_complete, None

        if self.monitor:
            self.monitor.record_animation_end(self.animation_id, completed=True)
        logger.debug(f"Finished {self.label}")

        if callback is not None:
            callback()


class SegmentAnimator(TimedAnimator):
    """Interpolates one beam segment from its origin to its target."""

    kind = "beam"

    @property
    def segment(self) -> Optional[Segment]:
        return self.tween

    @property
    def current_point(self) -> Optional[Point]:
        if self.tween is None:
            return None
        return self.tween.current_point

    def start(self, segment: Segment, on_complete: Optional[Callable[[], None]] = None,
              start_time: Optional[float] = None) -> str:
        if not isinstance(segment, Segment):
            raise SchedulingError(
                f"SegmentAnimator needs a Segment, got {type(segment).__name__}",
                component="SegmentAnimator",
                operation="start",
            )
        return super().start(segment, on_complete, start_time)
