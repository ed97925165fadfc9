"""
NEWS2 Scoring Engine

National Early Warning Score 2: seven bedside observations in, one
aggregate score and escalation advice out.

Usage:
    from pharmacy_first.core.news2 import calculate_news2, NEWS2Parameters

    result = calculate_news2(params)
"""
from .base import (
    ClinicalRisk,
    ConsciousnessLevel,
    NEWS2Breakdown,
    NEWS2Parameters,
    NEWS2Result,
    OxygenScale,
)
from .engine import calculate_news2, classify_total, score_breakdown
from .scoring import (
    score_consciousness,
    score_heart_rate,
    score_oxygen_saturation,
    score_respiratory_rate,
    score_supplemental_oxygen,
    score_systolic_bp,
    score_temperature,
)

__all__ = [
    "ClinicalRisk",
    "ConsciousnessLevel",
    "NEWS2Breakdown",
    "NEWS2Parameters",
    "NEWS2Result",
    "OxygenScale",
    "calculate_news2",
    "classify_total",
    "score_breakdown",
    "score_consciousness",
    "score_heart_rate",
    "score_oxygen_saturation",
    "score_respiratory_rate",
    "score_supplemental_oxygen",
    "score_systolic_bp",
    "score_temperature",
]
