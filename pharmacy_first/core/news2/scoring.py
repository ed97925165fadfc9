"""
NEWS2 Per-Parameter Scoring

One pure function per physiological parameter, following the Royal
College of Physicians NEWS2 chart (2017).

Every function is total: any numeric input lands in exactly one band.
Values outside the plausible clinical range fall into the nearest
extreme band, so nothing here raises.

Bands are written as ascending upper bounds; the first bound that the
value does not exceed wins, and the trailing score covers everything
above the last bound.
"""
from __future__ import annotations

from typing import Sequence, Tuple

from .base import ConsciousnessLevel, OxygenScale

# ── Band tables: (inclusive upper bound, points) ──────────────────────────────

RESPIRATORY_RATE_BANDS: Sequence[Tuple[float, int]] = (
    (8, 3),
    (11, 1),
    (20, 0),
    (24, 2),
)
RESPIRATORY_RATE_ABOVE = 3          # ≥25

TEMPERATURE_BANDS: Sequence[Tuple[float, int]] = (
    (35.0, 3),
    (36.0, 1),
    (38.0, 0),
    (39.0, 1),
)
TEMPERATURE_ABOVE = 2               # ≥39.1

SYSTOLIC_BP_BANDS: Sequence[Tuple[float, int]] = (
    (90, 3),
    (100, 2),
    (110, 1),
    (219, 0),
)
SYSTOLIC_BP_ABOVE = 3               # ≥220

HEART_RATE_BANDS: Sequence[Tuple[float, int]] = (
    (40, 3),
    (50, 1),
    (90, 0),
    (110, 1),
    (130, 2),
)
HEART_RATE_ABOVE = 3                # ≥131

SPO2_SCALE1_BANDS: Sequence[Tuple[float, int]] = (
    (91, 3),
    (93, 2),
    (95, 1),
)
SPO2_SCALE1_ABOVE = 0               # ≥96

# Scale 2 below the 88–92% target range; independent of oxygen.
SPO2_SCALE2_BANDS: Sequence[Tuple[float, int]] = (
    (83, 3),
    (85, 2),
    (87, 1),
    (92, 0),
)
# Scale 2 at ≥93% while on supplemental oxygen (over-oxygenation).
SPO2_SCALE2_ON_OXYGEN_BANDS: Sequence[Tuple[float, int]] = (
    (94, 1),
    (96, 2),
)
SPO2_SCALE2_ON_OXYGEN_ABOVE = 3     # ≥97

SUPPLEMENTAL_OXYGEN_POINTS = 2
CONSCIOUSNESS_NOT_ALERT_POINTS = 3

MAX_PARAMETER_SCORE = 3


def _band(value: float, bands: Sequence[Tuple[float, int]], above: int) -> int:
    for upper, points in bands:
        if value <= upper:
            return points
    return above


def score_respiratory_rate(rate: float) -> int:
    """Score respiratory rate (breaths per minute)."""
    return _band(rate, RESPIRATORY_RATE_BANDS, RESPIRATORY_RATE_ABOVE)


def score_oxygen_saturation(
    saturation: float,
    scale: OxygenScale,
    supplemental_oxygen: bool,
) -> int:
    """
    Score SpO2 on the requested scale.

    Scale 1 ignores the oxygen flag. On Scale 2, saturations of 93% and
    above only score when the patient is on supplemental oxygen; on room
    air they score 0 however high they climb.
    """
    if OxygenScale(scale) is OxygenScale.SCALE1:
        return _band(saturation, SPO2_SCALE1_BANDS, SPO2_SCALE1_ABOVE)

    if saturation <= SPO2_SCALE2_BANDS[-1][0]:
        return _band(saturation, SPO2_SCALE2_BANDS, 0)
    if not supplemental_oxygen:
        return 0
    return _band(saturation, SPO2_SCALE2_ON_OXYGEN_BANDS, SPO2_SCALE2_ON_OXYGEN_ABOVE)


def score_supplemental_oxygen(supplemental_oxygen: bool) -> int:
    return SUPPLEMENTAL_OXYGEN_POINTS if supplemental_oxygen else 0


def score_temperature(temperature: float) -> int:
    """Score temperature (°C)."""
    return _band(temperature, TEMPERATURE_BANDS, TEMPERATURE_ABOVE)


def score_systolic_bp(systolic: float) -> int:
    """Score systolic blood pressure (mmHg)."""
    return _band(systolic, SYSTOLIC_BP_BANDS, SYSTOLIC_BP_ABOVE)


def score_heart_rate(rate: float) -> int:
    """Score heart rate (beats per minute)."""
    return _band(rate, HEART_RATE_BANDS, HEART_RATE_ABOVE)


def score_consciousness(level: ConsciousnessLevel) -> int:
    """Alert scores 0; any CVPU finding scores 3."""
    if ConsciousnessLevel(level) is ConsciousnessLevel.ALERT:
        return 0
    return CONSCIOUSNESS_NOT_ALERT_POINTS
