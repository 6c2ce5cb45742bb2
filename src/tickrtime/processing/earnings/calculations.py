"""EPS parsing and earnings-surprise calculations."""

from __future__ import annotations

import math
from typing import NamedTuple


class SurpriseResult(NamedTuple):
    surprise: float | None
    surprise_percent: float | None


def parse_eps(value: object) -> float | None:
    """Parse an EPS value from a provider payload.

    Numbers pass through, numeric strings are parsed after trimming, and
    everything else (None, "", "N/A", NaN, booleans) becomes None. Never
    returns NaN.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        trimmed = value.strip()
        if not trimmed:
            return None
        try:
            number = float(trimmed)
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def calculate_surprise(actual: float | None, estimate: float | None) -> SurpriseResult:
    """Compute ``actual - estimate`` and the surprise as a percentage of ``|estimate|``.

    Missing or NaN inputs propagate as None. The percentage is None when the
    estimate is zero.
    """
    if actual is None or estimate is None:
        return SurpriseResult(None, None)
    if math.isnan(actual) or math.isnan(estimate):
        return SurpriseResult(None, None)

    surprise = actual - estimate
    surprise_percent = (surprise / abs(estimate)) * 100 if estimate != 0 else None
    return SurpriseResult(surprise, surprise_percent)
