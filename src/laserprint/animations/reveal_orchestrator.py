"""
Reveal Orchestrator - Central Coordinator for Panel Reveals

This module provides the RevealOrchestrator class that owns a set of panels
sharing one beam origin and one frame clock, and exposes the configure,
trigger, reset and replay operations a host UI drives.
"""

import asyncio
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from loguru import logger
from pydantic import ValidationError

from ..core.error_handling import ConfigurationError
from ..core.geometry import Point
from .animation_config import PanelConfig, PanelPhase, RevealSettings
from .clock import FrameClock
from .panel_state import PanelSnapshot, PhaseListener, RevealListener, RevealPanel
from .performance_monitor import RevealPerformanceMonitor


PanelInput = Union[PanelConfig, Mapping[str, Any]]


class RevealOrchestrator:
    """Coordinates the reveal of many independent panels from one origin."""

    def __init__(self, clock: FrameClock, settings: Optional[RevealSettings] = None,
                 monitor: Optional[RevealPerformanceMonitor] = None):
        """
        Initialize the orchestrator with no panels.

        Args:
            clock: Frame clock shared by every panel
            settings: Engine-wide timing settings
            monitor: Performance monitor; one is created if omitted
        """
        self.clock = clock
        self.settings = settings or RevealSettings()
        self.monitor = monitor or RevealPerformanceMonitor(self.settings.dropped_frame_threshold_ms)
        if self.clock.monitor is None:
            self.clock.monitor = self.monitor

        self.origin: Optional[Point] = None
        self.panels: Dict[str, RevealPanel] = {}
        self.revealed_callbacks: List[RevealListener] = []
        self.phase_listeners: List[PhaseListener] = []
        self.run_count = 0

        logger.info("Reveal Orchestrator initialized")

    def configure(self, panels: Iterable[PanelInput], origin: Union[Point, Tuple[float, float], Mapping]) -> List[str]:
        """
        Replace the panel set.

        Every configuration is validated before anything changes; on error the
        previous panel set is left untouched. Existing panels are reset first
        so none of their pending callbacks can fire.

        Args:
            panels: PanelConfig instances or mappings with the same fields
            origin: Shared beam origin

        Returns:
            The panel IDs, in configuration order

        Raises:
            ConfigurationError: If any panel or the origin is invalid
        """
        origin_point = self._validate_origin(origin)
        configs = self._validate_panels(panels)

        self.reset()
        self.origin = origin_point
        self.panels = {}
        for panel_id, config in configs:
            panel = RevealPanel(panel_id, config, origin_point, self.clock, self.settings, self.monitor)
            panel.reveal_listeners.append(self._on_panel_revealed)
            panel.phase_listeners.append(self._on_phase_change)
            self.panels[panel_id] = panel

        logger.info(f"Configured {len(self.panels)} panels around origin ({origin_point.x:.0f}, {origin_point.y:.0f})")
        return list(self.panels.keys())

    def trigger(self) -> int:
        """
        Arm every panel; each starts after its own start delay.

        Returns:
            Number of panels newly armed
        """
        armed = sum(1 for panel in self.panels.values() if panel.arm())
        if armed:
            self.run_count += 1
        logger.info(f"Triggered reveal run {self.run_count}: {armed}/{len(self.panels)} panels armed")
        return armed

    def reset(self) -> int:
        """
        Reset every panel to ``PENDING`` and cancel all in-flight animation.

        Returns:
            Number of panels reset
        """
        for panel in self.panels.values():
            panel.reset()
        if self.panels:
            logger.info(f"Reset {len(self.panels)} panels")
        return len(self.panels)

    def replay(self) -> int:
        """Reset then trigger: restart the whole reveal from scratch."""
        self.reset()
        return self.trigger()

    def on_panel_revealed(self, callback: RevealListener) -> RevealListener:
        """
        Register an observer called with the panel ID when a panel is revealed.

        Returns the callback so it can be used as a decorator.
        """
        self.revealed_callbacks.append(callback)
        return callback

    def remove_revealed_callback(self, callback: RevealListener) -> None:
        if callback in self.revealed_callbacks:
            self.revealed_callbacks.remove(callback)

    def add_phase_listener(self, callback: PhaseListener) -> PhaseListener:
        """Register an observer called with ``(panel_id, phase, corner_index, time_ms)``."""
        self.phase_listeners.append(callback)
        return callback

    def remove_phase_listener(self, callback: PhaseListener) -> None:
        if callback in self.phase_listeners:
            self.phase_listeners.remove(callback)

    def get_panel(self, panel_id: str) -> RevealPanel:
        return self.panels[panel_id]

    def snapshot(self) -> List[PanelSnapshot]:
        """Render snapshots for every panel, in configuration order."""
        return [panel.snapshot() for panel in self.panels.values()]

    def state(self) -> Dict[str, Tuple[PanelPhase, Tuple[int, ...]]]:
        """Map each panel ID to its phase and settled corner indices."""
        return {panel_id: (panel.phase, panel.settled_edges) for panel_id, panel in self.panels.items()}

    @property
    def all_revealed(self) -> bool:
        return all(panel.is_revealed for panel in self.panels.values())

    async def run_until_revealed(self, timeout: Optional[float] = None) -> bool:
        """
        Wait until every panel is revealed.

        Only useful with a clock that advances on its own, such as
        AsyncioFrameClock.

        Args:
            timeout: Maximum wait in seconds

        Returns:
            True if every panel was revealed, False on timeout
        """
        if self.all_revealed:
            return True

        done = asyncio.get_running_loop().create_future()

        def _check(_panel_id: str) -> None:
            if self.all_revealed and not done.done():
                done.set_result(True)

        self.revealed_callbacks.append(_check)
        try:
            await asyncio.wait_for(done, timeout)
            return True
        except asyncio.TimeoutError:
            logger.warning(f"Reveal did not complete within {timeout}s")
            return False
        finally:
            self.remove_revealed_callback(_check)

    def get_performance_summary(self) -> Dict[str, Any]:
        summary = self.monitor.get_performance_summary()
        summary["panels"] = len(self.panels)
        summary["panels_revealed"] = sum(1 for panel in self.panels.values() if panel.is_revealed)
        summary["run_count"] = self.run_count
        summary["stale_callbacks_discarded"] = sum(
            panel.stale_callbacks_discarded for panel in self.panels.values()
        )
        return summary

    def _on_panel_revealed(self, panel_id: str) -> None:
        for callback in list(self.revealed_callbacks):
            try:
                callback(panel_id)
            except Exception as e:
                logger.error(f"Error in panel revealed callback: {e}")

        if self.all_revealed:
            logger.info(f"All {len(self.panels)} panels revealed")

    def _on_phase_change(self, panel_id: str, phase: PanelPhase, corner_index: Optional[int],
                         time_ms: float) -> None:
        for listener in list(self.phase_listeners):
            try:
                listener(panel_id, phase, corner_index, time_ms)
            except Exception as e:
                logger.error(f"Error in phase listener: {e}")

    def _validate_origin(self, origin: Any) -> Point:
        try:
            point = Point.coerce(origin)
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid origin {origin!r}: {e}",
                                     component="RevealOrchestrator", operation="configure") from e
        if not point.is_finite:
            raise ConfigurationError(f"Origin must be finite, got {point}",
                                     component="RevealOrchestrator", operation="configure")
        return point

    def _validate_panels(self, panels: Iterable[PanelInput]) -> List[Tuple[str, PanelConfig]]:
        configs: List[Tuple[str, PanelConfig]] = []
        seen = set()
        for index, raw in enumerate(panels):
            try:
                config = raw if isinstance(raw, PanelConfig) else PanelConfig.model_validate(raw)
            except ValidationError as e:
                raise ConfigurationError(
                    f"Panel {index} rejected: {e}",
                    component="RevealOrchestrator",
                    operation="configure",
                    metadata={"panel_index": index, "errors": e.errors(include_url=False)},
                ) from e

            panel_id = config.panel_id or f"panel-{index}"
            if panel_id in seen:
                raise ConfigurationError(
                    f"Duplicate panel id {panel_id!r}",
                    component="RevealOrchestrator",
                    operation="configure",
                    metadata={"panel_index": index},
                )
            seen.add(panel_id)
            configs.append((panel_id, config))
        return configs
