"""
LaserPrint - Sequential Panel Reveal Engine

Drives the "laser print" construction effect: beams shoot from a shared origin
to each corner of a panel one at a time, the edges settle, a translucent fill
ramps in and finally the content appears.

Basic Usage:
    from laserprint import ManualClock, RevealOrchestrator

    clock = ManualClock()
    orchestrator = RevealOrchestrator(clock)
    orchestrator.configure([{"bounds": (30, 30, 380, 180)}], origin=(450, 275))
    orchestrator.trigger()
    clock.advance(1000)

Rendering:
    from laserprint.render import build_display_list

    shapes = build_display_list(orchestrator.snapshot(), orchestrator.origin)
"""

__version__ = "0.1.0"
__description__ = "Sequential beam-by-beam panel reveal engine"

from .animations import (
    AsyncioFrameClock,
    EasingFunction,
    FrameClock,
    ManualClock,
    PanelConfig,
    PanelPhase,
    PanelSnapshot,
    RevealOrchestrator,
    RevealPanel,
    RevealSettings,
)
from .core import ConfigurationError, LaserPrintError, Point, Rect, SchedulingError

__all__ = [
    "__version__",
    "__description__",
    "AsyncioFrameClock",
    "EasingFunction",
    "FrameClock",
    "ManualClock",
    "PanelConfig",
    "PanelPhase",
    "PanelSnapshot",
    "RevealOrchestrator",
    "RevealPanel",
    "RevealSettings",
    "ConfigurationError",
    "LaserPrintError",
    "Point",
    "Rect",
    "SchedulingError",
]
