"""
Tests for the laserprint command line.
"""

import pytest

from laserprint import __version__
from laserprint.animations import RevealSettings
from laserprint.cli import main, simulate_scene


class TestCommandLine:
    """Test the scene simulator entry point."""

    def test_list_scenes(self, capsys):
        assert main(["--list"]) == 0
        out = capsys.readouterr().out
        assert "briefing" in out
        assert "cryovat" in out

    def test_simulate_scene(self, capsys):
        assert main(["--scene", "briefing"]) == 0
        out = capsys.readouterr().out
        assert "mission-briefing" in out
        assert "all panels revealed" in out

    def test_unknown_scene(self, capsys):
        assert main(["--scene", "hangar"]) == 2
        assert "Unknown scene" in capsys.readouterr().out

    def test_invalid_frame_rate(self, capsys):
        assert main(["--scene", "briefing", "--frame-rate", "0"]) == 2
        assert "Invalid settings" in capsys.readouterr().out

    def test_invalid_log_level_from_environment(self, monkeypatch, capsys):
        monkeypatch.setenv("LASERPRINT_LOG_LEVEL", "LOUD")
        assert main(["--list"]) == 2
        assert "Invalid settings" in capsys.readouterr().out

    def test_limit_too_short(self):
        assert main(["--scene", "equipment", "--limit-ms", "100"]) == 1

    def test_custom_frame_rate(self):
        assert main(["--scene", "cryovat", "--frame-rate", "30"]) == 0

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out


class TestSimulateScene:
    """Test the simulation helper directly."""

    def test_events_are_ordered_per_panel(self):
        orchestrator, events, completed = simulate_scene("briefing", RevealSettings(), 5000)
        assert completed
        assert orchestrator.all_revealed

        zone_map = [label for _, panel_id, label in events if panel_id == "zone-map"]
        assert zone_map[0] == "drawing_corner(0)"
        assert zone_map[-1] == "revealed"
        assert len(zone_map) == 7

        times = [t for t, _, _ in events]
        assert times == sorted(times)

    def test_stagger_visible_in_timeline(self):
        _, events, _ = simulate_scene("briefing", RevealSettings(), 5000)
        first_seen = {}
        for t, panel_id, _ in events:
            first_seen.setdefault(panel_id, t)
        assert first_seen["mission-briefing"] < first_seen["zone-map"] < first_seen["intel-feed"]
        assert first_seen["intel-feed"] >= 900
