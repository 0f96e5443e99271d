"""
Tests for cycle detection and jump arithmetic.
"""

import pytest

from pyroclastic.tower_core.contour import SurfaceFingerprint
from pyroclastic.tower_core.cycle_detector import CycleDetector, CycleJump


@pytest.fixture
def surface_a():
    return SurfaceFingerprint.from_cells([(0, 0), (1, 0), (2, 1)])


@pytest.fixture
def surface_b():
    return SurfaceFingerprint.from_cells([(0, 0), (1, 1), (2, 1)])


class TestCycleDetector:
    """Test state recording and the first repeat."""

    def test_new_states_recorded(self, surface_a, surface_b):
        detector = CycleDetector()
        assert detector.observe(0, 5, surface_a, drop=10, height=17, target=1000) is None
        assert detector.observe(0, 5, surface_b, drop=11, height=18, target=1000) is None
        assert detector.observe(1, 5, surface_a, drop=12, height=19, target=1000) is None
        assert detector.observe(0, 6, surface_a, drop=13, height=20, target=1000) is None
        assert detector.states_seen == 4
        assert detector.active

    def test_repeat_produces_jump(self, surface_a):
        detector = CycleDetector()
        detector.observe(0, 5, surface_a, drop=10, height=17, target=1000)
        jump = detector.observe(0, 5, surface_a, drop=45, height=70, target=1000)

        assert jump is not None
        assert jump.first_drop == 10
        assert jump.repeat_drop == 45
        assert jump.cycle_length == 35
        assert jump.height_gain == 53
        # 955 remaining drops = 27 cycles + 10
        assert jump.repeats == 27
        assert jump.leftover == 10
        assert jump.height_bonus == 27 * 53
        assert jump.skipped_drops == 945
        assert jump.resume_drop == 1000 - 10

    def test_translated_surface_matches(self):
        """Fingerprints from different absolute heights form the same key."""
        detector = CycleDetector()
        low = SurfaceFingerprint.from_cells([(0, 3), (1, 4)])
        high = SurfaceFingerprint.from_cells([(0, 103), (1, 104)])
        detector.observe(2, 0, low, drop=5, height=5, target=50)
        assert detector.observe(2, 0, high, drop=9, height=105, target=50) is not None

    def test_detection_stops_after_first_jump(self, surface_a):
        detector = CycleDetector()
        detector.observe(0, 0, surface_a, drop=1, height=1, target=100)
        detector.observe(0, 0, surface_a, drop=6, height=9, target=100)
        assert not detector.active
        assert detector.observe(0, 0, surface_a, drop=96, height=200, target=100) is None
        assert detector.jump.repeat_drop == 6

    def test_disabled_detector(self, surface_a):
        detector = CycleDetector(enabled=False)
        assert not detector.active
        detector.observe(0, 0, surface_a, drop=1, height=1, target=100)
        assert detector.observe(0, 0, surface_a, drop=2, height=2, target=100) is None
        assert detector.jump is None

    def test_reset(self, surface_a):
        detector = CycleDetector()
        detector.observe(0, 0, surface_a, drop=1, height=1, target=100)
        detector.observe(0, 0, surface_a, drop=2, height=3, target=100)
        detector.reset()
        assert detector.active
        assert detector.jump is None
        assert detector.states_seen == 0

    def test_jump_landing_on_target(self, surface_a):
        """A cycle dividing the remaining drops leaves nothing to simulate."""
        detector = CycleDetector()
        detector.observe(0, 0, surface_a, drop=10, height=20, target=40)
        jump = detector.observe(0, 0, surface_a, drop=20, height=35, target=40)
        assert jump.repeats == 2
        assert jump.leftover == 0
        assert jump.resume_drop == 40

    def test_observe_past_target_rejected(self, surface_a):
        detector = CycleDetector()
        detector.observe(0, 0, surface_a, drop=5, height=8, target=10)
        with pytest.raises(ValueError):
            detector.observe(0, 0, surface_a, drop=12, height=20, target=10)
        assert detector.jump is None


class TestCycleJump:
    """Test derived jump values."""

    def test_derived_properties(self):
        jump = CycleJump(first_drop=15, repeat_drop=50, height_gain=53, repeats=4, leftover=7)
        assert jump.cycle_length == 35
        assert jump.height_bonus == 212
        assert jump.skipped_drops == 140
        assert jump.resume_drop == 190
