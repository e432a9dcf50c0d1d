"""Tests for rendering.py - interpolated snake positions."""

import os
import sys

import numpy as np
import pytest

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from rendering import InterpolationFrame, interpolate_snake


class TestInterpolateSnake:

    def test_midway_blend(self):
        out = interpolate_snake([(5, 5), (4, 5)], [(6, 5), (5, 5)], 0.5)
        assert out.tolist() == [[5.5, 5.0], [4.5, 5.0]]

    def test_endpoints(self):
        before = [(1, 1), (1, 2)]
        after = [(2, 1), (1, 1)]
        assert interpolate_snake(before, after, 0.0).tolist() == [[1.0, 1.0], [1.0, 2.0]]
        assert interpolate_snake(before, after, 1.0).tolist() == [[2.0, 1.0], [1.0, 1.0]]

    def test_grown_segment_passes_through(self):
        """A segment that only exists after the tick is not interpolated."""
        out = interpolate_snake([(5, 5)], [(6, 5), (5, 5)], 0.25)
        assert out[0].tolist() == [5.25, 5.0]
        assert out[1].tolist() == [5.0, 5.0]

    def test_output_follows_post_tick_length(self):
        out = interpolate_snake([(3, 3), (2, 3), (1, 3)], [(3, 4)], 0.5)
        assert out.shape == (1, 2)

    def test_progress_is_clamped(self):
        out = interpolate_snake([(0, 0)], [(1, 0)], 3.0)
        assert out.tolist() == [[1.0, 0.0]]
        out = interpolate_snake([(0, 0)], [(1, 0)], -1.0)
        assert out.tolist() == [[0.0, 0.0]]

    def test_empty_after(self):
        assert interpolate_snake([(0, 0)], [], 0.5).size == 0

    def test_inputs_are_not_modified(self):
        before = [(0, 0)]
        after = [(1, 0)]
        interpolate_snake(before, after, 0.5)
        assert before == [(0, 0)]
        assert after == [(1, 0)]


class TestInterpolationFrame:

    def test_positions_use_frame_progress(self):
        frame = InterpolationFrame(((2, 2),), ((2, 3),), 0.5)
        assert np.allclose(frame.positions(), [[2.0, 2.5]])

    def test_frame_is_read_only(self):
        frame = InterpolationFrame(((0, 0),), ((1, 0),))
        with pytest.raises(AttributeError):
            frame.progress = 0.5
