"""
Tests for surface contour tracing and fingerprints.
"""

import pytest

from pyroclastic.tower_core.config_loader import load_config
from pyroclastic.tower_core.chamber import Chamber
from pyroclastic.tower_core.contour import (
    ContourTraceError,
    SurfaceFingerprint,
    Frame,
    compute_fingerprint,
    trace_contour,
    trace_surface,
)

# Jagged top used for the invariance tests, relative to its base row
SILHOUETTE = [(0, 0), (1, 0), (1, 1), (2, 0), (4, 0), (4, 1), (4, 2), (5, 2), (6, 0)]


@pytest.fixture
def config():
    return load_config()


def make_chamber(config, solid_rows, silhouette):
    """Chamber with full rows 0..solid_rows-1 and a silhouette on top."""
    chamber = Chamber(config.chamber.width)
    for y in range(solid_rows):
        chamber.commit([(x, y) for x in range(config.chamber.width)])
    chamber.commit([(x, y + solid_rows) for x, y in silhouette])
    return chamber


class TestTraceSurface:
    """Test which rock cells the contour walk reports."""

    def test_empty_chamber(self, config):
        chamber = Chamber(config.chamber.width)
        assert trace_surface(chamber) == set()
        assert compute_fingerprint(chamber) == SurfaceFingerprint(b"")

    def test_single_minus(self, config):
        chamber = Chamber(config.chamber.width)
        chamber.commit([(2, 0), (3, 0), (4, 0), (5, 0)])
        assert trace_surface(chamber) == {(2, 0), (3, 0), (4, 0), (5, 0)}

    def test_column_against_left_wall(self, config):
        chamber = Chamber(config.chamber.width)
        chamber.commit([(0, 0), (0, 1), (0, 2), (0, 3)])
        assert trace_surface(chamber) == {(0, 0), (0, 1), (0, 2), (0, 3)}

    def test_sealed_cells_excluded(self, config):
        """Rows under a full row, and the hole among them, are not surface."""
        chamber = Chamber(config.chamber.width)
        chamber.commit([(x, 0) for x in range(7)])
        chamber.commit([(x, 1) for x in range(7) if x != 3])
        chamber.commit([(x, 2) for x in range(7)])
        assert trace_surface(chamber) == {(x, 2) for x in range(7)}

    def test_surface_contains_top_row(self, config):
        chamber = make_chamber(config, 3, SILHOUETTE)
        surface = trace_surface(chamber)
        top = chamber.height - 1
        assert (5, top) in surface
        assert (4, top) in surface

    def test_exposed_cells_in_gaps(self, config):
        """Cells at the bottom of open gaps are part of the surface."""
        chamber = make_chamber(config, 3, SILHOUETTE)
        surface = trace_surface(chamber)
        # Column 3 and column 5 are open down to the last full row
        assert (3, 2) in surface
        assert (5, 2) in surface
        assert (0, 1) not in surface


class TestFingerprint:
    """Test normalization and comparison."""

    def test_translation_invariance(self, config):
        """Congruent silhouettes at different heights fingerprint identically."""
        low = make_chamber(config, 3, SILHOUETTE)
        high = make_chamber(config, 53, SILHOUETTE)
        assert high.height == low.height + 50
        assert compute_fingerprint(low) == compute_fingerprint(high)
        assert compute_fingerprint(low).data == compute_fingerprint(high).data

    def test_one_cell_difference(self, config):
        base = make_chamber(config, 3, SILHOUETTE)
        changed = make_chamber(config, 3, SILHOUETTE + [(3, 0)])
        assert compute_fingerprint(base) != compute_fingerprint(changed)

    def test_hashable_key(self, config):
        low = make_chamber(config, 3, SILHOUETTE)
        high = make_chamber(config, 20, SILHOUETTE)
        seen = {compute_fingerprint(low): "low"}
        assert seen[compute_fingerprint(high)] == "low"

    def test_normalized_and_sorted(self):
        fingerprint = SurfaceFingerprint.from_cells([(5, 11), (3, 10), (4, 10)])
        assert fingerprint.cells == ((0, 0), (1, 0), (2, 1))
        assert fingerprint.cell_count == 3
        assert fingerprint.depth == 2

    def test_order_independent(self):
        a = SurfaceFingerprint.from_cells([(1, 1), (0, 0), (2, 0)])
        b = SurfaceFingerprint.from_cells([(2, 0), (1, 1), (0, 0)])
        assert a == b

    def test_empty(self):
        fingerprint = SurfaceFingerprint.from_cells([])
        assert fingerprint.cells == ()
        assert fingerprint.cell_count == 0
        assert fingerprint.depth == 0


class TestTraceContour:
    """Test the raw walk and its failure modes."""

    def test_frame_only(self):
        """A bare frame traces to itself."""
        frame = Frame(3, -1, 1)
        boundary = trace_contour(lambda c: c in frame, frame.start, (4, -1), 200)
        assert boundary == {
            (-1, -1), (-1, 0), (-1, 1),
            (3, -1), (3, 0), (3, 1),
            (0, -1), (1, -1), (2, -1),
        }

    def test_isolated_cell_raises(self):
        with pytest.raises(ContourTraceError):
            trace_contour(lambda c: c == (0, 0), (0, 0), (1, 0), 100)

    def test_step_limit_raises(self):
        frame = Frame(7, -1, 5)
        with pytest.raises(ContourTraceError):
            trace_contour(lambda c: c in frame, (7, -1), (8, -1), 3)


class TestFrame:
    """Test the synthetic walls and floor."""

    def test_membership(self):
        frame = Frame(7, -1, 4)
        assert (-1, -1) in frame
        assert (7, 4) in frame
        assert (3, -1) in frame
        assert (-1, 5) not in frame
        assert (7, -2) not in frame
        assert (3, 0) not in frame
        assert (8, 0) not in frame

    def test_size_and_start(self):
        frame = Frame(7, -1, 4)
        assert len(frame) == 2 * 6 + 7
        assert frame.start == (7, -1)

    def test_tall_unpruned_tower(self, config):
        """The walk handles a tall chamber whose floor is the real floor."""
        chamber = make_chamber(config, 500, SILHOUETTE)
        surface = trace_surface(chamber)
        assert (5, chamber.height - 1) in surface
        assert all(y >= 499 for _, y in surface)
