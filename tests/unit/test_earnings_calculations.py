"""Tests for EPS parsing and surprise calculations."""

from __future__ import annotations

import math

import pytest

from tickrtime.processing.earnings.calculations import calculate_surprise, parse_eps


class TestParseEps:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (2.18, 2.18),
            (3, 3.0),
            ("1.25", 1.25),
            (" -0.40 ", -0.4),
        ],
    )
    def test_numeric_values(self, value: object, expected: float) -> None:
        assert parse_eps(value) == pytest.approx(expected)

    @pytest.mark.parametrize("value", [None, "", "N/A", "abc", True, math.nan, math.inf, [1.0]])
    def test_unusable_values_are_none(self, value: object) -> None:
        assert parse_eps(value) is None


class TestCalculateSurprise:
    def test_beat(self) -> None:
        result = calculate_surprise(2.18, 2.10)
        assert result.surprise == pytest.approx(0.08)
        assert result.surprise_percent == pytest.approx(3.8095, abs=1e-4)

    def test_missing_actual(self) -> None:
        result = calculate_surprise(None, 2.10)
        assert result.surprise is None
        assert result.surprise_percent is None

    def test_nan_input(self) -> None:
        result = calculate_surprise(math.nan, 1.0)
        assert result.surprise is None
        assert result.surprise_percent is None

    def test_zero_estimate_has_no_percent(self) -> None:
        result = calculate_surprise(0.05, 0.0)
        assert result.surprise == pytest.approx(0.05)
        assert result.surprise_percent is None

    def test_negative_estimate_uses_absolute_value(self) -> None:
        result = calculate_surprise(-0.10, -0.20)
        assert result.surprise == pytest.approx(0.10)
        assert result.surprise_percent == pytest.approx(50.0)
