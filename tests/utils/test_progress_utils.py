"""Tests for progress formatting helpers."""

import pytest

from tickmeter.core.progress.glyphs import default_glyphs, parse_glyphs
from tickmeter.utils.progress_utils import (
    estimate_eta,
    format_duration,
    format_eta,
    format_percentage,
    format_speed,
    render_bar,
    round_half_up,
    truncate_text,
)


class TestRoundHalfUp:
    """Test cases for round_half_up."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(0.0, 0), (0.49, 0), (0.5, 1), (2.5, 3), (12.5, 13), (99.4, 99)],
    )
    def test_rounds_halves_up(self, value: float, expected: int) -> None:
        """Test halves round up instead of to even."""
        assert round_half_up(value) == expected


class TestFormatDuration:
    """Test cases for format_duration."""

    @pytest.mark.parametrize(
        ("seconds", "expected"),
        [
            (0, "0:00:00"),
            (30, "0:00:30"),
            (65.4, "0:01:05"),
            (3725, "1:02:05"),
            (360000, "100:00:00"),
        ],
    )
    def test_formats_hours_minutes_seconds(
        self, seconds: float, expected: str
    ) -> None:
        """Test H:MM:SS output with unbounded hours."""
        assert format_duration(seconds) == expected

    def test_negative_and_non_finite_are_zero(self) -> None:
        """Test invalid durations render as zero."""
        assert format_duration(-5) == "0:00:00"
        assert format_duration(float("nan")) == "0:00:00"
        assert format_duration(float("inf")) == "0:00:00"


class TestEta:
    """Test cases for estimate_eta and format_eta."""

    def test_linear_estimate(self) -> None:
        """Test 25 of 100 done in 10s leaves 30s."""
        eta = estimate_eta(10.0, 25, 100)

        assert eta == pytest.approx(30.0)
        assert format_eta(eta) == "0:00:30"

    def test_unknown_before_first_unit(self) -> None:
        """Test no estimate while nothing has completed."""
        assert estimate_eta(10.0, 0, 100) is None
        assert format_eta(None) == "N/A"

    def test_overshoot_gives_zero(self) -> None:
        """Test a count past the total never yields a negative ETA."""
        assert estimate_eta(10.0, 120, 100) == 0.0

    def test_non_finite_eta_is_unknown(self) -> None:
        """Test infinite estimates are shown as N/A."""
        assert format_eta(float("inf")) == "N/A"


class TestFormatPercentage:
    """Test cases for format_percentage."""

    @pytest.mark.parametrize(
        ("fraction", "expected"),
        [
            (0.0, "  0%"),
            (0.25, " 25%"),
            (0.125, " 13%"),
            (1.0, "100%"),
            (1.7, "100%"),
            (-0.2, "  0%"),
        ],
    )
    def test_padded_and_clamped(self, fraction: float, expected: str) -> None:
        """Test three-wide integer percent, clamped to [0, 100]."""
        assert format_percentage(fraction) == expected


class TestFormatSpeed:
    """Test cases for format_speed."""

    def test_picks_unit(self) -> None:
        """Test the largest unit keeping the number readable is used."""
        assert format_speed(2.0) == " 2.00  s/it"
        assert format_speed(0.0125) == "12.50 ms/it"
        assert format_speed(0.000004) == " 4.00 μs/it"

    def test_unknown_speed(self) -> None:
        """Test missing or zero speed renders N/A."""
        assert format_speed(None) == "N/A  s/it"
        assert format_speed(0.0) == "N/A  s/it"


class TestRenderBar:
    """Test cases for render_bar."""

    def test_ascii_boundaries(self) -> None:
        """Test empty, partial and full bars with an ASCII glyph set."""
        glyphs = parse_glyphs("[=> ]")

        assert render_bar(0.0, 10, glyphs) == "[          ]"
        assert render_bar(0.25, 10, glyphs) == "[==>       ]"
        assert render_bar(1.0, 10, glyphs) == "[==========]"

    def test_bar_width_excludes_caps(self) -> None:
        """Test the bar holds exactly bar_length cells between the caps."""
        glyphs = parse_glyphs("[=> ]")

        for fraction in (0.0, 0.13, 0.5, 0.99, 1.0):
            assert len(render_bar(fraction, 17, glyphs)) == 19

    def test_partial_glyph_follows_remainder(self) -> None:
        """Test the front cell uses the partial glyph for the remainder."""
        glyphs = default_glyphs()

        assert render_bar(0.25, 10, glyphs) == "|██▌       |"
        assert render_bar(0.05, 10, glyphs) == "|▌         |"
        assert render_bar(0.99, 10, glyphs) == "|█████████▉|"

    def test_full_bar_has_no_partial_glyph(self) -> None:
        """Test a complete bar is drawn with fill glyphs only."""
        bar = render_bar(1.0, 10, default_glyphs())

        assert bar == "|" + "█" * 10 + "|"

    def test_overflow_is_clamped(self) -> None:
        """Test fractions above one render a full bar."""
        glyphs = parse_glyphs("[=> ]")

        assert render_bar(1.4, 4, glyphs) == "[====]"

    def test_zero_width_renders_nothing(self) -> None:
        """Test a zero-length bar has no cells and no caps."""
        assert render_bar(0.5, 0, default_glyphs()) == ""


class TestTruncateText:
    """Test cases for truncate_text."""

    def test_short_text_unchanged(self) -> None:
        """Test text within the limit is returned as is."""
        assert truncate_text("short", 10) == "short"

    def test_long_text_gets_ellipsis(self) -> None:
        """Test long text is cut and ends with the ellipsis."""
        assert truncate_text("abcdefghijkl", 8) == "abcde..."

    def test_tiny_limit(self) -> None:
        """Test a limit smaller than the ellipsis."""
        assert truncate_text("abcdef", 2) == ".."
