"""
Tests for the RevealOrchestrator

Covers configuration, trigger/reset/replay, observers and the reveal
invariants: strict corner sequencing, monotonic phases, idempotent reset,
stale callback suppression, deterministic durations and staggered starts.
"""

from unittest.mock import Mock

import pytest

from laserprint.animations import (
    ManualClock,
    PanelConfig,
    PanelPhase,
    RevealOrchestrator,
    RevealSettings,
)
from laserprint.animations.segment_animator import SegmentAnimator, TimedAnimator
from laserprint.animations.tween import Segment
from laserprint.core.error_handling import ConfigurationError, ErrorCategory
from laserprint.core.geometry import Point, Rect


class TestConfigure:
    """Test panel set configuration."""

    def test_configure_returns_ids_in_order(self, orchestrator):
        ids = orchestrator.configure(
            [{"bounds": (0, 0, 10, 10)}, {"bounds": (20, 0, 10, 10), "panel_id": "named"}],
            origin=(5, 5),
        )
        assert ids == ["panel-0", "named"]
        assert orchestrator.origin == Point(5, 5)

    def test_accepts_panel_configs(self, orchestrator):
        orchestrator.configure([PanelConfig(bounds=Rect(0, 0, 10, 10))], origin=Point(0, 0))
        assert orchestrator.get_panel("panel-0").config.bounds == Rect(0, 0, 10, 10)

    def test_all_panels_start_pending(self, orchestrator, square_panel, center):
        orchestrator.configure([square_panel], center)
        assert orchestrator.state() == {"square": (PanelPhase.PENDING, ())}

    @pytest.mark.parametrize("panel", [
        {"bounds": (0, 0, 0, 10)},
        {"bounds": (0, 0, 10, 10), "speed": 0},
        {"bounds": (0, 0, 10, 10), "speed": float("inf")},
        {"bounds": (0, 0, 10, 10), "start_delay": -1},
        {"bounds": "nope"},
        {},
    ])
    def test_invalid_panel_rejected(self, orchestrator, panel):
        with pytest.raises(ConfigurationError) as exc_info:
            orchestrator.configure([panel], origin=(0, 0))
        assert exc_info.value.category is ErrorCategory.CONFIGURATION
        assert exc_info.value.metadata["panel_index"] == 0

    @pytest.mark.parametrize("origin", [(float("nan"), 0), "centre", (1, 2, 3)])
    def test_invalid_origin_rejected(self, orchestrator, origin):
        with pytest.raises(ConfigurationError):
            orchestrator.configure([{"bounds": (0, 0, 10, 10)}], origin=origin)

    def test_duplicate_ids_rejected(self, orchestrator):
        panels = [{"bounds": (0, 0, 10, 10), "panel_id": "a"}, {"bounds": (0, 0, 10, 10), "panel_id": "a"}]
        with pytest.raises(ConfigurationError):
            orchestrator.configure(panels, origin=(0, 0))

    def test_rejected_configure_keeps_previous_panels(self, orchestrator, square_panel, center):
        orchestrator.configure([square_panel], center)
        with pytest.raises(ConfigurationError):
            orchestrator.configure([{"bounds": (0, 0, 10, 10)}, {"bounds": (0, 0, -1, 10)}], center)
        assert list(orchestrator.panels) == ["square"]
        assert orchestrator.origin == center

    def test_reconfigure_cancels_running_panels(self, orchestrator, clock, square_panel, center):
        orchestrator.configure([square_panel], center)
        orchestrator.trigger()
        clock.advance(100)
        old_panel = orchestrator.get_panel("square")

        orchestrator.configure([{"bounds": (0, 0, 10, 10), "panel_id": "fresh"}], center)
        clock.advance(1000)
        assert old_panel.phase is PanelPhase.PENDING
        assert orchestrator.state() == {"fresh": (PanelPhase.PENDING, ())}

    def test_error_to_dict(self, orchestrator):
        with pytest.raises(ConfigurationError) as exc_info:
            orchestrator.configure([{"bounds": (0, 0, 0, 0)}], origin=(0, 0))
        report = exc_info.value.to_dict()
        assert report["error_type"] == "ConfigurationError"
        assert report["error_category"] == "configuration"
        assert report["recoverable"] is False


class TestTriggerResetReplay:
    """Test the run lifecycle."""

    def test_end_to_end_square_panel(self, orchestrator, clock, square_panel, center):
        """Four 80ms corners and a 300ms fill reveal the panel at exactly 620ms."""
        orchestrator.configure([square_panel], center)
        on_revealed = Mock()
        orchestrator.on_panel_revealed(on_revealed)

        assert orchestrator.trigger() == 1
        clock.advance(620)

        phase, settled = orchestrator.state()["square"]
        assert phase is PanelPhase.REVEALED
        assert settled == (0, 1, 2, 3)
        on_revealed.assert_called_once_with("square")
        assert orchestrator.all_revealed

        clock.advance(1000)
        on_revealed.assert_called_once_with("square")

    def test_not_revealed_just_before_fill_ends(self, orchestrator, clock, square_panel, center):
        orchestrator.configure([square_panel], center)
        orchestrator.trigger()
        clock.advance(615)
        assert orchestrator.state()["square"][0] is PanelPhase.FILLING

    def test_independent_staggering(self, orchestrator, clock):
        orchestrator.configure([
            {"panel_id": "a", "bounds": (0, 0, 100, 100), "speed": 1.5},
            {"panel_id": "b", "bounds": (200, 0, 100, 100), "speed": 0.4, "start_delay": 500},
        ], origin=(150, 50))
        orchestrator.trigger()

        clock.advance_to(400)
        assert orchestrator.state()["b"] == (PanelPhase.PENDING, ())

        clock.advance_to(600)
        assert orchestrator.state()["a"] == (PanelPhase.REVEALED, (0, 1, 2, 3))
        b = orchestrator.get_panel("b")
        assert b.corner_duration == pytest.approx(200)
        assert b.phase is PanelPhase.DRAWING_CORNER
        assert b.corner_index == 0
        assert b.settled_edges == ()

        clock.advance_to(690)
        assert orchestrator.get_panel("b").settled_edges == ()
        clock.advance_to(720)
        assert orchestrator.get_panel("b").settled_edges == (0,)

    def test_trigger_twice_does_not_restart(self, orchestrator, clock, square_panel, center):
        orchestrator.configure([square_panel], center)
        orchestrator.trigger()
        clock.advance(100)
        assert orchestrator.trigger() == 0
        assert orchestrator.run_count == 1
        assert orchestrator.state()["square"] == (PanelPhase.DRAWING_CORNER, (0,))

    def test_trigger_without_panels(self, orchestrator):
        assert orchestrator.trigger() == 0
        assert orchestrator.all_revealed

    def test_reset_returns_every_panel_to_pending(self, orchestrator, clock, center):
        orchestrator.configure([{"bounds": (0, 0, 10, 10)}, {"bounds": (20, 0, 10, 10)}], center)
        orchestrator.trigger()
        clock.advance(250)
        assert orchestrator.reset() == 2
        assert all(state == (PanelPhase.PENDING, ()) for state in orchestrator.state().values())
        assert clock.pending_count == 0

    def test_reset_is_idempotent(self, orchestrator, clock, square_panel, center):
        orchestrator.configure([square_panel], center)
        orchestrator.trigger()
        clock.advance(400)
        orchestrator.reset()
        once = orchestrator.snapshot()
        orchestrator.reset()
        assert orchestrator.snapshot() == once
        assert once[0].fill_progress == 0.0
        assert once[0].beam is None

    def test_replay_restarts_from_scratch(self, orchestrator, clock, square_panel, center):
        orchestrator.configure([square_panel], center)
        revealed = []
        orchestrator.on_panel_revealed(revealed.append)
        orchestrator.trigger()
        clock.advance(700)

        assert orchestrator.replay() == 1
        assert orchestrator.state()["square"] == (PanelPhase.PENDING, ())
        clock.advance(620)
        assert orchestrator.all_revealed
        assert revealed == ["square", "square"]
        assert orchestrator.run_count == 2

    def test_rapid_replays_cancel_and_restart(self, orchestrator, clock, square_panel, center):
        orchestrator.configure([square_panel], center)
        revealed = []
        orchestrator.on_panel_revealed(revealed.append)
        orchestrator.trigger()
        for _ in range(5):
            clock.advance(100)
            orchestrator.replay()

        assert clock.pending_count == 1
        clock.advance(620)
        assert revealed == ["square"]
        assert orchestrator.get_performance_summary()["animations_cancelled"] == 5


class TestInvariants:
    """Test the ordering and stale-callback invariants directly."""

    def test_strict_corner_sequencing(self, orchestrator, clock, center):
        orchestrator.configure([{"bounds": (0, 0, 100, 60), "speed": 0.7}], center)
        orchestrator.trigger()
        panel = orchestrator.get_panel("panel-0")

        beams_seen = set()
        while not panel.is_revealed:
            clock.tick()
            snapshot = panel.snapshot()
            if snapshot.beam is not None:
                k = snapshot.beam.corner_index
                beams_seen.add(k)
                assert snapshot.settled_edges == tuple(range(k))
            assert len(snapshot.settled_edges) <= 4
        assert beams_seen == {0, 1, 2, 3}

    def test_at_most_one_active_animator(self, orchestrator, clock, square_panel, center):
        orchestrator.configure([square_panel], center)
        orchestrator.trigger()
        for _ in range(50):
            clock.tick()
            assert orchestrator.monitor.active_count <= 1

    def test_phase_ordinal_is_monotonic(self, orchestrator, clock, phase_log, center):
        orchestrator.configure([
            {"bounds": (0, 0, 50, 50), "start_delay": 30},
            {"bounds": (60, 0, 50, 50), "speed": 3},
        ], center)
        orchestrator.trigger()
        last = {panel_id: 0 for panel_id in orchestrator.panels}
        for _ in range(60):
            clock.tick()
            for panel_id, panel in orchestrator.panels.items():
                assert panel.phase_ordinal >= last[panel_id]
                last[panel_id] = panel.phase_ordinal

        orchestrator.reset()
        assert all(panel.phase_ordinal == 0 for panel in orchestrator.panels.values())

    def test_phase_listener_timeline(self, orchestrator, clock, phase_log, square_panel, center):
        orchestrator.configure([square_panel], center)
        orchestrator.trigger()
        clock.advance(620)
        phases = [(phase, index) for _, _, phase, index in phase_log]
        assert phases == [
            ("drawing_corner", 0),
            ("drawing_corner", 1),
            ("drawing_corner", 2),
            ("drawing_corner", 3),
            ("edges_settled", None),
            ("filling", None),
            ("revealed", None),
        ]
        times = [t for t, _, _, _ in phase_log]
        assert times == sorted(times)

    def test_stale_callback_after_reset_is_discarded(self, orchestrator, clock, square_panel,
                                                    center, monkeypatch):
        orchestrator.configure([square_panel], center)
        orchestrator.trigger()
        clock.advance(120)

        monkeypatch.setattr(TimedAnimator, "cancel", lambda self: False)
        orchestrator.reset()
        expected = orchestrator.snapshot()
        clock.advance(500)

        assert orchestrator.snapshot() == expected
        assert orchestrator.get_performance_summary()["stale_callbacks_discarded"] >= 1

    def test_deterministic_segment_duration(self):
        clock = ManualClock(frame_interval_ms=5)
        completions = Mock()
        segment = Segment(duration=100, origin=Point(0, 0), target=Point(10, 0))
        SegmentAnimator(clock).start(segment, completions)

        clock.advance_to(50)
        assert segment.progress == pytest.approx(0.5)
        clock.advance_to(100)
        assert segment.progress == 1.0
        clock.advance_to(250)
        assert segment.progress == 1.0
        completions.assert_called_once_with()


class TestObservers:
    """Test observer registration and isolation."""

    def test_revealed_decorator_and_removal(self, orchestrator, clock, square_panel, center):
        orchestrator.configure([square_panel], center)
        seen = []

        @orchestrator.on_panel_revealed
        def record(panel_id):
            seen.append(panel_id)

        orchestrator.remove_revealed_callback(record)
        orchestrator.trigger()
        clock.advance(700)
        assert seen == []

    def test_failing_observer_does_not_stop_others(self, orchestrator, clock, square_panel, center):
        orchestrator.configure([square_panel], center)
        orchestrator.on_panel_revealed(Mock(side_effect=RuntimeError("observer")))
        healthy = orchestrator.on_panel_revealed(Mock())
        orchestrator.add_phase_listener(Mock(side_effect=ValueError("listener")))

        orchestrator.trigger()
        clock.advance(700)
        healthy.assert_called_once_with("square")
        assert orchestrator.all_revealed

    def test_remove_phase_listener(self, orchestrator, clock, square_panel, center):
        orchestrator.configure([square_panel], center)
        listener = orchestrator.add_phase_listener(Mock())
        orchestrator.remove_phase_listener(listener)
        orchestrator.trigger()
        clock.advance(700)
        listener.assert_not_called()


class TestAnimationsDisabled:
    """Test the global animation switch."""

    def test_all_panels_reveal_on_next_tick(self, clock, center):
        orchestrator = RevealOrchestrator(clock, RevealSettings(animations_enabled=False))
        orchestrator.configure([
            {"bounds": (0, 0, 10, 10), "start_delay": 900},
            {"bounds": (20, 0, 10, 10), "speed": 0.1},
        ], center)
        orchestrator.trigger()
        assert not orchestrator.all_revealed
        clock.tick()
        assert orchestrator.all_revealed
        assert all(settled == (0, 1, 2, 3) for _, settled in orchestrator.state().values())


class TestPerformanceSummary:
    """Test the aggregated performance summary."""

    def test_summary_after_run(self, orchestrator, clock, square_panel, center):
        orchestrator.configure([square_panel], center)
        orchestrator.trigger()
        clock.advance(620)
        summary = orchestrator.get_performance_summary()
        assert summary["panels"] == 1
        assert summary["panels_revealed"] == 1
        assert summary["run_count"] == 1
        assert summary["animations_by_kind"] == {"delay": 1, "beam": 4, "fill": 1}
        assert summary["animations_completed"] == 6
        assert summary["active_animations"] == 0
        assert summary["total_frames"] == clock.frame_count
