"""
Panel Phase State Machine

A RevealPanel walks one panel through its reveal: wait for the start delay,
shoot a beam to each corner strictly one at a time, ramp the fill in, then
mark the content visible. Every continuation it hands to an animator is tagged
with the panel's epoch; ``reset()`` bumps the epoch, so anything issued before
the reset is discarded instead of mutating the new run.
"""

from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple

from loguru import logger

from ..core.geometry import Point, Rect
from .animation_config import (
    CORNER_COUNT,
    PanelConfig,
    PanelPhase,
    RevealSettings,
    phase_ordinal,
)
from .clock import FrameClock
from .easing import apply_easing
from .performance_monitor import RevealPerformanceMonitor
from .segment_animator import SegmentAnimator, TimedAnimator
from .tween import Segment, Tween


PhaseListener = Callable[[str, PanelPhase, Optional[int], float], None]
RevealListener = Callable[[str], None]


@dataclass(frozen=True)
class BeamSnapshot:
    """The beam currently in flight toward a corner."""
    corner_index: int
    origin: Point
    target: Point
    tip: Point
    progress: float


@dataclass(frozen=True)
class PanelSnapshot:
    """Everything a renderer needs to draw one panel at the current instant."""
    panel_id: str
    phase: PanelPhase
    corner_index: Optional[int]
    phase_ordinal: int
    settled_edges: Tuple[int, ...]
    beam: Optional[BeamSnapshot]
    fill_progress: float
    fill_opacity: float
    content_visible: bool
    bounds: Rect
    color: str
    title: Optional[str] = None
    content: Any = None

    @property
    def is_revealed(self) -> bool:
        return self.phase is PanelPhase.REVEALED

    @property
    def frame_visible(self) -> bool:
        """True once all edges are settled and the fill, outline and markers show."""
        return self.phase_ordinal >= phase_ordinal(PanelPhase.EDGES_SETTLED)


class RevealPanel:
    """Phase state machine for one panel's reveal sequence."""

    def __init__(self, panel_id: str, config: PanelConfig, origin: Point, clock: FrameClock,
                 settings: Optional[RevealSettings] = None,
                 monitor: Optional[RevealPerformanceMonitor] = None):
        """
        Initialize a panel in the ``PENDING`` phase.

        Args:
            panel_id: Identity used in callbacks and snapshots
            config: Validated panel configuration
            origin: Shared beam origin; read only
            clock: Shared frame clock
            settings: Engine-wide timing settings
            monitor: Optional performance monitor fed by this panel's animators
        """
        self.panel_id = panel_id
        self.config = config
        self.origin = origin
        self.clock = clock
        self.settings = settings or RevealSettings()
        self.monitor = monitor
        self.corners = config.bounds.corners()
        self.corner_duration = self.settings.corner_duration_for(config.speed)

        self.phase_listeners: List[PhaseListener] = []
        self.reveal_listeners: List[RevealListener] = []
        self.stale_callbacks_discarded = 0

        self._epoch = 0
        self._clear_state()

    def _clear_state(self) -> None:
        self._phase = PanelPhase.PENDING
        self._corner_index: Optional[int] = None
        self._settled: List[int] = []
        self._active: Optional[TimedAnimator] = None
        self._beam: Optional[Segment] = None
        self._fill: Optional[Tween] = None
        self._content_visible = False
        self._armed = False
        self._reveal_reported = False

    @property
    def epoch(self) -> int:
        return self._epoch

    @property
    def phase(self) -> PanelPhase:
        return self._phase

    @property
    def corner_index(self) -> Optional[int]:
        return self._corner_index

    @property
    def phase_ordinal(self) -> int:
        return phase_ordinal(self._phase, self._corner_index)

    @property
    def settled_edges(self) -> Tuple[int, ...]:
        return tuple(self._settled)

    @property
    def is_armed(self) -> bool:
        return self._armed

    @property
    def is_revealed(self) -> bool:
        return self._phase is PanelPhase.REVEALED

    @property
    def content_visible(self) -> bool:
        return self._content_visible

    @property
    def fill_progress(self) -> float:
        return self._fill.progress if self._fill else 0.0

    @property
    def active_animator(self) -> Optional[TimedAnimator]:
        return self._active

    def arm(self) -> bool:
        """
        Arm the ``PENDING → DRAWING_CORNER(0)`` transition.

        The first beam starts once the panel's start delay has elapsed. With
        animations disabled the panel is revealed on the next frame instead.

        Returns:
            True if the panel was armed, False if it already was
        """
        if self._armed:
            logger.debug(f"Panel {self.panel_id} already armed, ignoring trigger")
            return False

        self._armed = True
        epoch = self._epoch

        if not self.settings.animations_enabled:
            animator = TimedAnimator(self.clock, self.monitor, label=f"{self.panel_id} instant reveal")
            self._active = animator
            animator.start(Tween(), self._guarded(epoch, self._reveal_instantly))
            return True

        delay = Tween(duration=0.0, delay=self.config.start_delay)
        animator = TimedAnimator(self.clock, self.monitor, label=f"{self.panel_id} start delay")
        animator.kind = "delay"
        self._active = animator
        animator.start(delay, self._guarded(epoch, self._on_start_delay_elapsed, delay))
        logger.debug(f"Panel {self.panel_id} armed with {self.config.start_delay:.0f}ms delay")
        return True

    def reset(self) -> None:
        """
        Return to ``PENDING`` from any phase.

        Cancels the active animator and clears settled edges, fill progress
        and the reveal flag. Safe to call at any point and idempotent.
        """
        self._epoch += 1
        if self._active is not None:
            self._active.cancel()
        previous = self._phase
        self._clear_state()
        logger.debug(f"Panel {self.panel_id} reset from {previous.value} (epoch {self._epoch})")

    def snapshot(self) -> PanelSnapshot:
        """Build the render snapshot for the current instant."""
        beam = None
        if self._phase is PanelPhase.DRAWING_CORNER and self._beam is not None and self._beam.begun:
            eased = apply_easing(self._beam.progress, self.settings.beam_easing)
            beam = BeamSnapshot(
                corner_index=self._corner_index,
                origin=self._beam.origin,
                target=self._beam.target,
                tip=self._beam.point_at(eased),
                progress=self._beam.progress,
            )

        fill_progress = self.fill_progress
        fill_opacity = apply_easing(fill_progress, self.settings.fill_easing) * self.settings.fill_max_opacity

        return PanelSnapshot(
            panel_id=self.panel_id,
            phase=self._phase,
            corner_index=self._corner_index,
            phase_ordinal=self.phase_ordinal,
            settled_edges=tuple(self._settled),
            beam=beam,
            fill_progress=fill_progress,
            fill_opacity=fill_opacity,
            content_visible=self._content_visible,
            bounds=self.config.bounds,
            color=self.config.color,
            title=self.config.title,
            content=self.config.content,
        )

    def _guarded(self, epoch: int, handler: Callable[..., None], *args: Any) -> Callable[[], None]:
        def continuation() -> None:
            if epoch != self._epoch:
                self.stale_callbacks_discarded += 1
                logger.debug(
                    f"Discarding stale {handler.__name__} for panel {self.panel_id} "
                    f"(issued in epoch {epoch}, current {self._epoch})"
                )
                return
            handler(*args)
        return continuation

    def _on_start_delay_elapsed(self, delay: Tween) -> None:
        self._active = None
        self._begin_corner(0, delay.end_time)

    def _begin_corner(self, index: int, start_time: float) -> None:
        segment = Segment(duration=self.corner_duration, origin=self.origin, target=self.corners[index])
        animator = SegmentAnimator(self.clock, self.monitor, label=f"{self.panel_id} beam {index}")
        self._beam = segment
        self._active = animator
        animator.start(segment, self._guarded(self._epoch, self._on_corner_complete, index, segment),
                       start_time=start_time)
        self._set_phase(PanelPhase.DRAWING_CORNER, index)

    def _on_corner_complete(self, index: int, segment: Segment) -> None:
        self._settled.append(index)
        self._beam = None
        self._active = None

        if index + 1 < CORNER_COUNT:
            self._begin_corner(index + 1, segment.end_time)
            return

        epoch = self._epoch
        self._set_phase(PanelPhase.EDGES_SETTLED)
        if epoch != self._epoch:
            return
        self._begin_fill(segment.end_time)

    def _begin_fill(self, start_time: float) -> None:
        fill = Tween(duration=self.settings.fill_duration_ms)
        animator = TimedAnimator(self.clock, self.monitor, label=f"{self.panel_id} fill")
        animator.kind = "fill"
        self._fill = fill
        self._active = animator
        animator.start(fill, self._guarded(self._epoch, self._on_fill_complete), start_time=start_time)
        self._set_phase(PanelPhase.FILLING)

    def _on_fill_complete(self) -> None:
        self._active = None
        self._content_visible = True
        epoch = self._epoch
        self._set_phase(PanelPhase.REVEALED)
        if epoch != self._epoch:
            return
        self._report_revealed()

    def _reveal_instantly(self) -> None:
        self._active = None
        self._settled = list(range(CORNER_COUNT))
        self._fill = Tween(progress=1.0, begun=True, completed=True)
        self._content_visible = True
        epoch = self._epoch
        self._set_phase(PanelPhase.REVEALED)
        if epoch != self._epoch:
            return
        self._report_revealed()

    def _set_phase(self, phase: PanelPhase, corner_index: Optional[int] = None) -> None:
        self._phase = phase
        self._corner_index = corner_index
        label = phase.value if corner_index is None else f"{phase.value}({corner_index})"
        logger.debug(f"Panel {self.panel_id} -> {label}")
        self._notify(self.phase_listeners, self.panel_id, phase, corner_index, self.clock.now())

    def _report_revealed(self) -> None:
        if self._reveal_reported:
            return
        self._reveal_reported = True
        logger.debug(f"Panel {self.panel_id} revealed")
        self._notify(self.reveal_listeners, self.panel_id)

    def _notify(self, listeners: List[Callable[..., None]], *args: Any) -> None:
        for listener in list(listeners):
            try:
                listener(*args)
            except Exception as e:
                logger.error(f"Error in listener for panel {self.panel_id}: {e}")
