"""
Patient history supplied by the caller for a consultation.

Purely advisory: shown alongside decision nodes but never used to pick
a branch.
"""
from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict, Mapping, Optional


class Severity(str, Enum):
    MILD     = "mild"
    MODERATE = "moderate"
    SEVERE   = "severe"


@dataclass(frozen=True)
class PatientHistory:
    age: Optional[int] = None
    duration_days: Optional[int] = None
    bilateral: Optional[bool] = None
    otorrhoea: Optional[bool] = None
    penicillin_allergy: Optional[bool] = None
    severity: Optional[Severity] = None
    fever: Optional[bool] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PatientHistory":
        """
        Build from snake_case or camelCase keys; unknown keys are ignored.

        Raises:
            ValueError: severity is not mild / moderate / severe.
        """
        aliases = {
            "durationDays": "duration_days",
            "penicillinAllergy": "penicillin_allergy",
        }
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in data.items():
            name = aliases.get(key, key)
            if name in known and value is not None:
                values[name] = value
        if "severity" in values:
            values["severity"] = Severity(values["severity"])
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            data[f.name] = value.value if isinstance(value, Enum) else value
        return data
