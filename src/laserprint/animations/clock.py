"""
Frame Clocks

The engine never reads wall time or sets timers on its own. Every animator is
handed a clock that provides a monotonic ``now()`` in milliseconds and a
"run this callback on the next frame" primitive. ``ManualClock`` advances only
when told to (tests, offline simulation); ``AsyncioFrameClock`` runs frames on
the asyncio event loop at a target frame rate.
"""

import asyncio
import time
from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from loguru import logger

from ..core.error_handling import SchedulingError
from .animation_config import DEFAULT_FRAME_RATE
from .performance_monitor import RevealPerformanceMonitor


FrameCallback = Callable[[float], None]


class FrameRequest:
    """A pending frame callback. ``cancel()`` releases it before it fires."""

    def __init__(self, callback: FrameCallback, clock: "FrameClock"):
        self.callback = callback
        self._clock = clock
        self.cancelled = False
        self.fired = False

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self) -> bool:
        """
        Release the request.

        Returns:
            True if the request was still pending, False otherwise
        """
        if not self.active:
            return False
        self.cancelled = True
        self._clock._discard(self)
        return True


class FrameClock(ABC):
    """Base class for clock sources: monotonic time plus per-frame callbacks."""

    def __init__(self, monitor: Optional[RevealPerformanceMonitor] = None):
        self.monitor = monitor
        self.closed = False
        self.frame_count = 0
        self._pending: List[FrameRequest] = []

    @abstractmethod
    def now(self) -> float:
        """Current monotonic time in milliseconds."""

    def request_frame(self, callback: FrameCallback) -> FrameRequest:
        """
        Run ``callback(frame_time_ms)`` once on the next frame.

        Callbacks requested while a frame is running are deferred to the
        following frame.

        Raises:
            SchedulingError: If the clock has been closed
        """
        if self.closed:
            raise SchedulingError(
                "Cannot request a frame from a closed clock",
                component=type(self).__name__,
                operation="request_frame",
            )
        request = FrameRequest(callback, self)
        self._pending.append(request)
        return request

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def close(self) -> None:
        """Cancel every pending request and refuse new ones."""
        self.closed = True
        for request in self._pending:
            request.cancelled = True
        self._pending.clear()

    def _discard(self, request: FrameRequest) -> None:
        try:
            self._pending.remove(request)
        except ValueError:
            pass

    def _run_frame(self, now: float) -> int:
        due, self._pending = self._pending, []
        self.frame_count += 1
        ran = 0
        for request in due:
            # An earlier callback in this frame may have cancelled a later one or closed the clock
            if self.closed:
                request.cancelled = True
                continue
            if request.cancelled:
                continue
            request.fired = True
            self._invoke(request, now)
            ran += 1
        return ran

    def _invoke(self, request: FrameRequest, now: float) -> None:
        request.callback(now)


class ManualClock(FrameClock):
    """Deterministic clock whose time only moves when ``tick``/``advance`` is called."""

    def __init__(self, start_time: float = 0.0,
                 frame_interval_ms: float = 1000.0 / DEFAULT_FRAME_RATE,
                 monitor: Optional[RevealPerformanceMonitor] = None):
        super().__init__(monitor)
        if frame_interval_ms <= 0:
            raise SchedulingError("Frame interval must be positive", component="ManualClock")
        self.frame_interval_ms = frame_interval_ms
        self._now = float(start_time)

    def now(self) -> float:
        return self._now

    def tick(self, dt: Optional[float] = None) -> int:
        """
        Move time forward by ``dt`` ms (one frame interval by default) and run a frame.

        Returns:
            Number of callbacks that ran
        """
        step = self.frame_interval_ms if dt is None else dt
        return self._step_to(self._now + step)

    def advance(self, duration: float, frame_interval_ms: Optional[float] = None) -> int:
        """
        Simulate ``duration`` ms of frames.

        Frames are spaced by the frame interval; the last frame lands exactly
        on the target time.

        Returns:
            Number of frames run
        """
        if duration < 0:
            raise SchedulingError("Cannot advance a clock backwards", component="ManualClock",
                                  operation="advance")
        interval = frame_interval_ms or self.frame_interval_ms
        target = self._now + duration
        frames = 0
        while self._now < target:
            self._step_to(min(self._now + interval, target))
            frames += 1
        return frames

    def advance_to(self, time_ms: float, frame_interval_ms: Optional[float] = None) -> int:
        return self.advance(max(time_ms - self._now, 0.0), frame_interval_ms)

    def run_until(self, predicate: Callable[[], bool], limit_ms: float,
                  frame_interval_ms: Optional[float] = None) -> bool:
        """
        Run frames until ``predicate()`` holds or ``limit_ms`` of time has passed.

        Returns:
            True if the predicate held before the limit
        """
        interval = frame_interval_ms or self.frame_interval_ms
        deadline = self._now + limit_ms
        while not predicate():
            if self._now >= deadline:
                return False
            self._step_to(min(self._now + interval, deadline))
        return True

    def _step_to(self, time_ms: float) -> int:
        if time_ms < self._now:
            raise SchedulingError("Time cannot move backwards", component="ManualClock",
                                  operation="tick")
        if self.monitor:
            self.monitor.record_frame_time(time_ms - self._now)
        self._now = time_ms
        return self._run_frame(time_ms)


class AsyncioFrameClock(FrameClock):
    """Runs frames on the asyncio event loop at a target frame rate."""

    def __init__(self, frame_rate: float = DEFAULT_FRAME_RATE,
                 loop: Optional[asyncio.AbstractEventLoop] = None,
                 monitor: Optional[RevealPerformanceMonitor] = None):
        super().__init__(monitor)
        if frame_rate <= 0:
            raise SchedulingError("Frame rate must be positive", component="AsyncioFrameClock")
        self.frame_rate = frame_rate
        self.frame_time = 1.0 / frame_rate
        self._loop = loop
        self._handle: Optional[asyncio.TimerHandle] = None
        self._last_frame_at: Optional[float] = None

        logger.debug(f"Asyncio frame clock created at {frame_rate:.0f} FPS")

    def now(self) -> float:
        return time.monotonic() * 1000.0

    def request_frame(self, callback: FrameCallback) -> FrameRequest:
        loop = self._get_loop()
        request = super().request_frame(callback)
        self._schedule(loop)
        return request

    def close(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        super().close()
        logger.debug("Asyncio frame clock closed")

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is not None:
            return self._loop
        try:
            return asyncio.get_running_loop()
        except RuntimeError as e:
            raise SchedulingError(
                "AsyncioFrameClock needs a running event loop",
                component="AsyncioFrameClock",
                operation="request_frame",
            ) from e

    def _schedule(self, loop: asyncio.AbstractEventLoop) -> None:
        if self._handle is None and not self.closed:
            self._handle = loop.call_later(self.frame_time, self._on_frame)

    def _on_frame(self) -> None:
        self._handle = None
        now = self.now()
        if self._last_frame_at is not None and self.monitor:
            self.monitor.record_frame_time(now - self._last_frame_at)
        self._last_frame_at = now

        self._run_frame(now)

        if not self._pending:
            # Idle: the next burst of frames should not report the gap as a dropped frame
            self._last_frame_at = None

    def _invoke(self, request: FrameRequest, now: float) -> None:
        try:
            request.callback(now)
        except Exception as e:
            logger.exception(f"Error in frame callback: {e}")
