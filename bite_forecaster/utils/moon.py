"""
Lunar phase helpers.

Phase convention: a float in [0.0, 1.0) where 0.0 is new moon, 0.5 is full
moon and values approach 1.0 as the cycle returns to the next new moon.

``moon_phase()`` is a mean-synodic-month approximation anchored on the new
moon of 2000-01-06 18:14 UTC.  It ignores orbital eccentricity, so the phase
can be off by up to roughly half a day; fine for a fishing forecast.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone

SYNODIC_MONTH_DAYS = 29.53058867

_REFERENCE_NEW_MOON = datetime(2000, 1, 6, 18, 14, tzinfo=timezone.utc)

# Upper bound of each named phase band (inclusive), checked in order.
_PHASE_NAMES: list[tuple[float, str]] = [
    (0.03, "New Moon"),
    (0.22, "Waxing Crescent"),
    (0.28, "First Quarter"),
    (0.47, "Waxing Gibbous"),
    (0.53, "Full Moon"),
    (0.72, "Waning Gibbous"),
    (0.78, "Last Quarter"),
    (0.97, "Waning Crescent"),
]


def moon_phase(when: datetime) -> float:
    """Return the approximate lunar phase for ``when``.

    Naive datetimes are treated as UTC.
    """
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    days = (when - _REFERENCE_NEW_MOON).total_seconds() / 86_400.0
    return (days / SYNODIC_MONTH_DAYS) % 1.0


def moon_phase_name(phase: float) -> str:
    """Map a phase value to a human-readable name such as ``"Full Moon"``."""
    if phase <= 0.03 or phase >= 0.97:
        return "New Moon"
    for upper, name in _PHASE_NAMES:
        if phase <= upper:
            return name
    return "Waning Crescent"


def moon_illumination(phase: float) -> float:
    """Illuminated fraction of the disc, in [0.0, 1.0]."""
    illumination = (1.0 - math.cos(phase * 2.0 * math.pi)) / 2.0
    return max(0.0, min(1.0, illumination))
