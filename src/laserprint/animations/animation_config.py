"""
Reveal Animation Configuration

This module defines the phase enumeration, the engine-wide timing settings,
the validated per-panel configuration and the frame metrics record.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.geometry import Rect


CORNER_COUNT = 4

DEFAULT_CORNER_DURATION_MS = 80.0
DEFAULT_FILL_DURATION_MS = 300.0
DEFAULT_FILL_MAX_OPACITY = 0.15
MIN_SEGMENT_DURATION_MS = 1.0
MAX_SEGMENT_DURATION_MS = 60_000.0
DEFAULT_FRAME_RATE = 60.0
DEFAULT_PANEL_COLOR = "#00f0ff"
LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


class PanelPhase(Enum):
    """Stages of a panel's reveal sequence, in progression order."""
    PENDING = "pending"
    DRAWING_CORNER = "drawing_corner"
    EDGES_SETTLED = "edges_settled"
    FILLING = "filling"
    REVEALED = "revealed"


class EasingFunction(Enum):
    """Easing curves applied to derived render values."""
    LINEAR = "linear"
    EASE_IN = "ease_in"
    EASE_OUT = "ease_out"
    EASE_IN_OUT = "ease_in_out"


def phase_ordinal(phase: PanelPhase, corner_index: Optional[int] = None) -> int:
    """
    Map a phase to its position in the total order.

    ``PENDING`` is 0, ``DRAWING_CORNER(i)`` is ``1 + i``, then
    ``EDGES_SETTLED``, ``FILLING`` and ``REVEALED`` follow.
    """
    if phase is PanelPhase.PENDING:
        return 0
    if phase is PanelPhase.DRAWING_CORNER:
        return 1 + (corner_index or 0)
    if phase is PanelPhase.EDGES_SETTLED:
        return 1 + CORNER_COUNT
    if phase is PanelPhase.FILLING:
        return 2 + CORNER_COUNT
    return 3 + CORNER_COUNT


def scaled_duration(base_ms: float, speed: float,
                    minimum_ms: float = MIN_SEGMENT_DURATION_MS,
                    maximum_ms: float = MAX_SEGMENT_DURATION_MS) -> float:
    """
    Scale a duration by the inverse of a speed multiplier.

    The result always lies in ``[minimum_ms, maximum_ms]``. A speed so small
    that the division overflows (or is zero) plays as slowly as allowed; a
    speed so large that the duration vanishes plays as fast as allowed.
    """
    try:
        duration = base_ms / speed
    except ZeroDivisionError:
        return maximum_ms
    if math.isnan(duration):
        return minimum_ms
    return min(max(duration, minimum_ms), maximum_ms)


class RevealSettings(BaseSettings):
    """Engine-wide timing and presentation settings (env prefix ``LASERPRINT_``)."""

    model_config = SettingsConfigDict(env_prefix="LASERPRINT_", extra="ignore")

    corner_duration_ms: float = Field(
        default=DEFAULT_CORNER_DURATION_MS, gt=0, allow_inf_nan=False,
        description="Beam duration per corner at speed 1.0"
    )
    fill_duration_ms: float = Field(
        default=DEFAULT_FILL_DURATION_MS, gt=0, allow_inf_nan=False,
        description="Fill ramp duration, independent of panel speed"
    )
    fill_max_opacity: float = Field(
        default=DEFAULT_FILL_MAX_OPACITY, ge=0, le=1,
        description="Fill opacity once the ramp completes"
    )
    min_segment_duration_ms: float = Field(
        default=MIN_SEGMENT_DURATION_MS, gt=0, allow_inf_nan=False,
        description="Lower clamp for speed-scaled beam durations"
    )
    max_segment_duration_ms: float = Field(
        default=MAX_SEGMENT_DURATION_MS, gt=0, allow_inf_nan=False,
        description="Upper clamp for speed-scaled beam durations"
    )
    frame_rate: float = Field(default=DEFAULT_FRAME_RATE, gt=0, le=1000, description="Target FPS")
    dropped_frame_threshold_ms: float = Field(
        default=1000.0 / DEFAULT_FRAME_RATE, gt=0,
        description="Frame intervals above this count as dropped"
    )
    animations_enabled: bool = Field(default=True, description="Reveal instantly when disabled")
    beam_easing: EasingFunction = Field(default=EasingFunction.LINEAR)
    fill_easing: EasingFunction = Field(default=EasingFunction.LINEAR)
    log_level: str = Field(default="INFO", description="Log level used by the CLI")

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, value: Any) -> str:
        level = str(value).upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log level must be one of {', '.join(LOG_LEVELS)}, got {value!r}")
        return level

    @model_validator(mode="after")
    def validate_segment_clamp(self) -> "RevealSettings":
        if self.max_segment_duration_ms < self.min_segment_duration_ms:
            raise ValueError("max_segment_duration_ms must not be below min_segment_duration_ms")
        return self

    @property
    def frame_interval_ms(self) -> float:
        return 1000.0 / self.frame_rate

    def corner_duration_for(self, speed: float) -> float:
        """Effective per-corner beam duration for a panel speed multiplier."""
        return scaled_duration(self.corner_duration_ms, speed,
                               self.min_segment_duration_ms, self.max_segment_duration_ms)


class PanelConfig(BaseModel):
    """Validated configuration for one panel."""

    model_config = ConfigDict(frozen=True)

    bounds: Rect
    color: str = Field(default=DEFAULT_PANEL_COLOR, description="Opaque color token for the renderer")
    start_delay: float = Field(default=0.0, ge=0, allow_inf_nan=False, description="Delay in ms after trigger")
    speed: float = Field(default=1.0, gt=0, allow_inf_nan=False, description="Speed multiplier")
    title: Optional[str] = None
    content: Any = None
    panel_id: Optional[str] = None

    @field_validator("bounds", mode="before")
    @classmethod
    def coerce_bounds(cls, value: Any) -> Rect:
        try:
            return Rect.coerce(value)
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"invalid bounds {value!r}: {e}")

    @field_validator("bounds")
    @classmethod
    def validate_bounds(cls, value: Rect) -> Rect:
        if not value.is_valid:
            raise ValueError(
                f"bounds must be finite with positive width and height, got {value}"
            )
        return value


@dataclass
class FrameMetrics:
    """Rolling frame timing statistics."""
    frame_times: list = field(default_factory=list)
    dropped_frames: int = 0
    total_frames: int = 0
    max_samples: int = 60

    @property
    def average_frame_time(self) -> float:
        """Get average frame time in milliseconds."""
        if not self.frame_times:
            return 0.0
        return sum(self.frame_times) / len(self.frame_times)

    @property
    def fps(self) -> float:
        avg_frame_time = self.average_frame_time
        if avg_frame_time <= 0:
            return 0.0
        return 1000.0 / avg_frame_time

    def add_frame_time(self, frame_time: float, dropped_threshold: float) -> None:
        """Add a frame interval measurement in milliseconds."""
        self.frame_times.append(frame_time)
        self.total_frames += 1
        if len(self.frame_times) > self.max_samples:
            self.frame_times.pop(0)

        if frame_time > dropped_threshold:
            self.dropped_frames += 1
