"""Unit tests for output dimension resolution."""

import pytest

from photo_batch.core.geometry import resolve_dimensions, round_half_up
from photo_batch.core.models import ResizeSpec


class TestResolveDimensions:
    """Tests for resolve_dimensions."""

    @pytest.mark.parametrize("size", [(1920, 1080), (800, 1200), (1, 1), (640, 640)])
    def test_resize_disabled_keeps_source_size(self, size):
        """Test that a disabled resize returns the source dimensions."""
        resize = ResizeSpec(enabled=False, target_width=10, target_height=10)

        assert resolve_dimensions(size[0], size[1], resize) == size

    def test_stretch_uses_targets_exactly(self):
        """Test that aspect ratio is ignored when not preserved."""
        resize = ResizeSpec(
            enabled=True, target_width=300, target_height=50, preserve_aspect_ratio=False
        )

        assert resolve_dimensions(1920, 1080, resize) == (300, 50)
        assert resolve_dimensions(800, 1200, resize) == (300, 50)

    def test_landscape_locks_width(self):
        """Test landscape sources keep target width and derive height."""
        resize = ResizeSpec(enabled=True, target_width=640, target_height=640)

        assert resolve_dimensions(1920, 1080, resize) == (640, 360)

    def test_portrait_locks_height(self):
        """Test portrait sources keep target height and derive width."""
        resize = ResizeSpec(enabled=True, target_width=640, target_height=640)

        # 640 * 800 / 1200 = 426.67
        assert resolve_dimensions(800, 1200, resize) == (427, 640)

    def test_square_source_locks_height(self):
        """Test that a square source follows the height-locked branch."""
        resize = ResizeSpec(enabled=True, target_width=500, target_height=200)

        assert resolve_dimensions(1000, 1000, resize) == (200, 200)

    def test_orientation_rule_is_not_fit_within_box(self):
        """Test the locked axis follows source orientation, not the target box."""
        resize = ResizeSpec(enabled=True, target_width=1000, target_height=100)

        # A fit-within-box rule would give 178x100; the width lock gives 1000x563.
        assert resolve_dimensions(1920, 1080, resize) == (1000, 563)

    def test_tiny_ratio_never_rounds_to_zero(self):
        """Test that derived dimensions are at least one pixel."""
        resize = ResizeSpec(enabled=True, target_width=10, target_height=10)

        assert resolve_dimensions(10000, 1, resize) == (10, 1)
        assert resolve_dimensions(1, 10000, resize) == (1, 10)

    @pytest.mark.parametrize(
        "source,target,expected_height",
        [
            ((3000, 2000), 600, 400),
            ((1024, 768), 100, 75),
            ((1001, 1000), 1000, 999),
            ((4000, 3000), 333, 250),
        ],
    )
    def test_landscape_height_matches_ratio(self, source, target, expected_height):
        """Test derived landscape heights against target * h / w."""
        resize = ResizeSpec(enabled=True, target_width=target, target_height=1)

        width, height = resolve_dimensions(source[0], source[1], resize)

        assert width == target
        assert height == expected_height
        assert abs(height - target * source[1] / source[0]) <= 1

    @pytest.mark.parametrize("size", [(0, 10), (10, 0), (-5, 10)])
    def test_non_positive_source_is_rejected(self, size):
        """Test that invalid source dimensions are a caller error."""
        with pytest.raises(ValueError, match="must be positive"):
            resolve_dimensions(size[0], size[1], ResizeSpec(enabled=True))


class TestRoundHalfUp:
    """Tests for round_half_up."""

    @pytest.mark.parametrize(
        "value,expected", [(0.5, 1), (1.5, 2), (2.5, 3), (426.67, 427), (359.4, 359), (0.1, 1)]
    )
    def test_rounding(self, value, expected):
        """Test halves round up and results are never below one."""
        assert round_half_up(value) == expected
