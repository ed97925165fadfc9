"""
NEWS2 — Base Types

Value types exchanged with the NEWS2 scoring engine. All of them are
immutable and serialise to JSON-compatible primitives.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Dict


class OxygenScale(str, Enum):
    """
    SpO2 scoring scale.

    SCALE1 – standard patients
    SCALE2 – confirmed hypercapnic respiratory failure (target 88–92%)
    """
    SCALE1 = "scale1"
    SCALE2 = "scale2"


class ConsciousnessLevel(str, Enum):
    """ALERT, or any new Confusion / Voice / Pain / Unresponsive finding."""
    ALERT = "alert"
    CVPU  = "cvpu"


class ClinicalRisk(str, Enum):
    LOW    = "low"
    MEDIUM = "medium"
    HIGH   = "high"


@dataclass(frozen=True)
class NEWS2Parameters:
    """One set of observations taken at the bedside."""
    respiratory_rate: float          # breaths/min
    oxygen_saturation: float         # %
    oxygen_scale: OxygenScale
    supplemental_oxygen: bool
    temperature: float               # °C
    systolic_bp: float               # mmHg
    heart_rate: float                # bpm
    consciousness: ConsciousnessLevel


@dataclass(frozen=True)
class NEWS2Breakdown:
    """Points awarded per parameter."""
    respiratory_rate: int
    oxygen_saturation: int
    supplemental_oxygen: int
    temperature: int
    systolic_bp: int
    heart_rate: int
    consciousness: int

    def values(self):
        return tuple(self.to_dict().values())

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class NEWS2Result:
    total_score: int
    breakdown: NEWS2Breakdown
    clinical_risk: ClinicalRisk
    clinical_response: str
    red_flag: bool = False           # some single parameter scored 3

    def to_dict(self) -> dict:
        return {
            "total_score": self.total_score,
            "breakdown": self.breakdown.to_dict(),
            "clinical_risk": self.clinical_risk.value,
            "clinical_response": self.clinical_response,
            "red_flag": self.red_flag,
        }
