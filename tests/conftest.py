#!/usr/bin/env python3
"""
LaserPrint - Test Configuration

Pytest configuration and shared fixtures for the reveal engine tests.
"""

import sys
from pathlib import Path
from typing import List, Tuple

import pytest
from loguru import logger

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from laserprint.animations import ManualClock, RevealOrchestrator, RevealSettings  # noqa: E402
from laserprint.core.geometry import Point, Rect  # noqa: E402


@pytest.fixture(autouse=True)
def quiet_logging():
    """Keep loguru output out of test runs unless a test adds its own sink."""
    logger.remove()
    yield
    logger.remove()


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def settings() -> RevealSettings:
    """Default timings: 80ms per corner at speed 1, 300ms fill."""
    return RevealSettings()


@pytest.fixture
def orchestrator(clock, settings) -> RevealOrchestrator:
    return RevealOrchestrator(clock, settings)


@pytest.fixture
def square_panel() -> dict:
    return {"panel_id": "square", "bounds": Rect(0, 0, 100, 100)}


@pytest.fixture
def center() -> Point:
    return Point(50, 50)


@pytest.fixture
def phase_log(orchestrator) -> List[Tuple[float, str, str, object]]:
    """Records every phase change as ``(time_ms, panel_id, phase, corner_index)``."""
    events = []

    @orchestrator.add_phase_listener
    def record(panel_id, phase, corner_index, time_ms):
        events.append((time_ms, panel_id, phase.value, corner_index))

    return events
