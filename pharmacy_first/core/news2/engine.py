"""
NEWS2 Aggregate Engine

Sums the seven parameter scores, classifies the total into a clinical
risk band, then applies the single-parameter red-flag rule.

Usage:
    from pharmacy_first.core.news2 import calculate_news2, NEWS2Parameters

    result = calculate_news2(params)
    print(result.total_score, result.clinical_risk.value)
"""
from __future__ import annotations

from typing import Tuple

from pharmacy_first.utils import get_logger
from .base import ClinicalRisk, NEWS2Breakdown, NEWS2Parameters, NEWS2Result
from .scoring import (
    MAX_PARAMETER_SCORE,
    score_consciousness,
    score_heart_rate,
    score_oxygen_saturation,
    score_respiratory_rate,
    score_supplemental_oxygen,
    score_systolic_bp,
    score_temperature,
)

logger = get_logger(__name__)

# ── Thresholds ────────────────────────────────────────────────────────────────
LOW_RISK_MAX    = 4     # 1–4 → low
MEDIUM_RISK_MAX = 6     # 5–6 → medium
HIGH_RISK_MIN   = 7     # ≥7  → high

# ── Clinical responses (RCP NEWS2 escalation chart) ──────────────────────────
RESPONSE_ZERO = "Continue routine monitoring"
RESPONSE_LOW = "Monitor frequency should be at least 12 hourly"
RESPONSE_MEDIUM = (
    "Urgent review by clinician with competencies in acute illness assessment. "
    "Consider escalation to critical care team"
)
RESPONSE_HIGH = (
    "Emergency assessment by clinical team with critical care competencies. "
    "Usually transfer to higher level of care"
)
RESPONSE_RED_FLAG = (
    "Urgent review by clinician (any parameter scoring 3 triggers urgent "
    "response even with low total score)"
)


def score_breakdown(params: NEWS2Parameters) -> NEWS2Breakdown:
    return NEWS2Breakdown(
        respiratory_rate=score_respiratory_rate(params.respiratory_rate),
        oxygen_saturation=score_oxygen_saturation(
            params.oxygen_saturation,
            params.oxygen_scale,
            params.supplemental_oxygen,
        ),
        supplemental_oxygen=score_supplemental_oxygen(params.supplemental_oxygen),
        temperature=score_temperature(params.temperature),
        systolic_bp=score_systolic_bp(params.systolic_bp),
        heart_rate=score_heart_rate(params.heart_rate),
        consciousness=score_consciousness(params.consciousness),
    )


def classify_total(total: int) -> Tuple[ClinicalRisk, str]:
    """Risk band and response from the aggregate score alone."""
    if total == 0:
        return ClinicalRisk.LOW, RESPONSE_ZERO
    if total <= LOW_RISK_MAX:
        return ClinicalRisk.LOW, RESPONSE_LOW
    if total <= MEDIUM_RISK_MAX:
        return ClinicalRisk.MEDIUM, RESPONSE_MEDIUM
    return ClinicalRisk.HIGH, RESPONSE_HIGH


def calculate_news2(params: NEWS2Parameters) -> NEWS2Result:
    """
    Calculate the complete NEWS2 score.

    A single parameter scoring 3 lifts an otherwise low total to medium
    risk. It never lowers a classification and leaves high risk alone.
    """
    breakdown = score_breakdown(params)
    total = sum(breakdown.values())

    risk, response = classify_total(total)

    red_flag = any(points == MAX_PARAMETER_SCORE for points in breakdown.values())
    if red_flag and total < HIGH_RISK_MIN:
        if risk is ClinicalRisk.LOW:
            logger.info(
                f"NEWS2 red flag: total={total} raised from low to medium "
                f"({breakdown.to_dict()})"
            )
            response = RESPONSE_RED_FLAG
        risk = ClinicalRisk.MEDIUM

    return NEWS2Result(
        total_score=total,
        breakdown=breakdown,
        clinical_risk=risk,
        clinical_response=response,
        red_flag=red_flag,
    )
