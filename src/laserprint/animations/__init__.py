"""
Sequential Reveal Animation Engine

This package provides the frame clocks, animators, panel phase state machine
and orchestrator that drive the beam-by-beam panel construction effect.
"""

from .animation_config import EasingFunction, PanelConfig, PanelPhase, RevealSettings
from .clock import AsyncioFrameClock, FrameClock, FrameRequest, ManualClock
from .panel_state import BeamSnapshot, PanelSnapshot, RevealPanel
from .performance_monitor import RevealPerformanceMonitor
from .reveal_orchestrator import RevealOrchestrator
from .segment_animator import SegmentAnimator, TimedAnimator
from .tween import Segment, Tween

__all__ = [
    "EasingFunction",
    "PanelConfig",
    "PanelPhase",
    "RevealSettings",
    "AsyncioFrameClock",
    "FrameClock",
    "FrameRequest",
    "ManualClock",
    "BeamSnapshot",
    "PanelSnapshot",
    "RevealPanel",
    "RevealPerformanceMonitor",
    "RevealOrchestrator",
    "SegmentAnimator",
    "TimedAnimator",
    "Segment",
    "Tween",
]
