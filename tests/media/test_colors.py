"""Unit tests for media.colors module."""

import pytest
from PIL import Image

from photo_index.media.colors import NAMED_COLORS, nearest_color_index, summarize_colors


class TestNearestColorIndex:
    """Tests for nearest_color_index()."""

    @pytest.mark.parametrize("rgb,name", [
        ((0, 0, 0), "black"),
        ((255, 255, 255), "white"),
        ((250, 0, 0), "red"),
        ((0, 0, 255), "blue"),
        ((0, 130, 0), "green"),
        ((255, 255, 10), "yellow"),
    ])
    def test_nearest_named_color(self, rgb, name):
        assert NAMED_COLORS[nearest_color_index(rgb)][0] == name

    def test_sixteen_colors(self):
        """Test that every index fits in one hex digit."""
        assert len(NAMED_COLORS) == 16


class TestSummarizeColors:
    """Tests for summarize_colors()."""

    def test_solid_red(self, rgb_image):
        summary = summarize_colors(rgb_image)

        assert summary.main_color == "red"
        assert summary.palette == "444444444"
        assert summary.luminance == "444444444"
        assert summary.saturation == 15

    def test_solid_white(self):
        summary = summarize_colors(Image.new("RGB", (90, 60), (255, 255, 255)))

        assert summary.main_color == "white"
        assert summary.palette == "222222222"
        assert summary.luminance == "fffffffff"
        assert summary.saturation == 0

    def test_grayscale_input(self):
        """Test that non-RGB modes are converted first."""
        summary = summarize_colors(Image.new("L", (9, 9), 0))

        assert summary.main_color == "black"
        assert summary.luminance == "000000000"

    def test_main_color_is_most_frequent(self):
        """Test a 3x3 image whose bottom row is black and the rest white."""
        image = Image.new("RGB", (3, 3), (255, 255, 255))
        for x in range(3):
            image.putpixel((x, 2), (0, 0, 0))

        summary = summarize_colors(image)

        assert summary.palette == "222222000"
        assert summary.main_color == "white"
