"""
API request/response models.
"""
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from pharmacy_first.core.news2 import ConsciousnessLevel, NEWS2Parameters, OxygenScale
from pharmacy_first.core.pathways import PatientHistory


class HealthResponse(BaseModel):
    status: str
    version: str
    timestamp: str
    uptime_seconds: float


class PatientHistoryInput(BaseModel):
    """Optional clinical facts shown alongside the pathway."""
    age: Optional[int] = Field(default=None, ge=0, le=130)
    duration_days: Optional[int] = Field(default=None, ge=0)
    bilateral: Optional[bool] = None
    otorrhoea: Optional[bool] = None
    penicillin_allergy: Optional[bool] = None
    severity: Optional[Literal["mild", "moderate", "severe"]] = None
    fever: Optional[bool] = None

    def to_history(self) -> PatientHistory:
        return PatientHistory.from_dict(self.model_dump(exclude_none=True))


class TraversalRequest(BaseModel):
    """Answers replayed from the pathway root, one per step."""
    answers: List[Optional[Union[bool, int, str]]] = Field(default_factory=list)
    history: Optional[PatientHistoryInput] = None


class TraversalResponse(BaseModel):
    pathway: str
    current: Dict[str, Any]
    path: List[str]
    answers: List[Optional[Union[bool, int, str]]]
    is_terminal: bool
    available_answers: List[str]
    history: Optional[Dict[str, Any]] = None


class NEWS2Request(BaseModel):
    respiratory_rate: float = Field(..., allow_inf_nan=False, description="breaths/min")
    oxygen_saturation: float = Field(..., allow_inf_nan=False, description="SpO2 %")
    oxygen_scale: OxygenScale = OxygenScale.SCALE1
    supplemental_oxygen: bool = False
    temperature: float = Field(..., allow_inf_nan=False, description="°C")
    systolic_bp: float = Field(..., allow_inf_nan=False, description="mmHg")
    heart_rate: float = Field(..., allow_inf_nan=False, description="bpm")
    consciousness: ConsciousnessLevel = ConsciousnessLevel.ALERT

    def to_parameters(self) -> NEWS2Parameters:
        return NEWS2Parameters(**self.model_dump())


class NEWS2Response(BaseModel):
    total_score: int
    breakdown: Dict[str, int]
    clinical_risk: Literal["low", "medium", "high"]
    clinical_response: str
    red_flag: bool


class InferRequest(BaseModel):
    image: Optional[str] = None
    apply_medical_enhancement: Optional[bool] = None
