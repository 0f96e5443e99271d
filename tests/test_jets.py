"""
Tests for jet pattern parsing and cycling.
"""

import pytest

from pyroclastic.tower_core.config_loader import load_config
from pyroclastic.tower_core.jets import (
    JetDirection,
    JetPatternError,
    JetSequence,
    parse_jet_pattern,
)

SAMPLE_PATTERN = ">>><<><>><<<>><>>><<<>>><<<><<<>><>><<>>"

L = JetDirection.LEFT
R = JetDirection.RIGHT


@pytest.fixture
def config():
    return load_config()


class TestParseJetPattern:
    """Test jet symbol parsing."""

    def test_sample_pattern(self, config):
        pattern = parse_jet_pattern(SAMPLE_PATTERN, config)
        assert len(pattern) == 40
        assert pattern[:8] == [R, R, R, L, L, R, L, R]
        assert pattern[-2:] == [R, R]

    def test_direction_values(self):
        """Directions double as x displacements."""
        assert int(JetDirection.LEFT) == -1
        assert int(JetDirection.RIGHT) == 1

    def test_trailing_newline_ignored(self, config):
        assert parse_jet_pattern("<>\n", config) == [L, R]

    def test_unknown_symbol(self, config):
        with pytest.raises(JetPatternError) as exc_info:
            parse_jet_pattern("<<x>", config)
        assert exc_info.value.position == 2
        assert "'x'" in str(exc_info.value)

    def test_inner_whitespace_rejected(self, config):
        with pytest.raises(JetPatternError):
            parse_jet_pattern("<< >>", config)

    def test_empty_pattern(self, config):
        with pytest.raises(JetPatternError):
            parse_jet_pattern("  \n", config)

    def test_is_value_error(self, config):
        """Parse errors can be handled as ValueError."""
        with pytest.raises(ValueError):
            parse_jet_pattern("?", config)


class TestJetSequence:
    """Test cyclic jet replay."""

    def test_cycles_through_pattern(self):
        jets = JetSequence([R, L, L])
        seq = [jets.advance() for _ in range(7)]
        assert seq == [R, L, L, R, L, L, R]

    def test_index_tracks_next_jet(self):
        jets = JetSequence([R, L, L])
        assert jets.index == 0
        jets.advance()
        assert jets.index == 1
        jets.advance()
        jets.advance()
        assert jets.index == 0

    def test_reset(self):
        jets = JetSequence([R, L])
        jets.advance()
        jets.reset()
        assert jets.index == 0
        assert jets.advance() == R

    def test_empty_pattern_rejected(self):
        with pytest.raises(ValueError):
            JetSequence([])

    def test_length(self, config):
        jets = JetSequence(parse_jet_pattern(SAMPLE_PATTERN, config))
        assert len(jets) == 40
