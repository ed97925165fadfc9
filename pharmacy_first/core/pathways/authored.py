"""
Authored Pathway JSON Models

Strict pydantic models for the scalar fields of an authored pathway
document, keyed exactly as authored (camelCase). Nothing is coerced:
"5" is not an integer and 1 is not a boolean.

Branch structure, node ids and inheritance are not modelled here; the
tree parser in document.py owns those.
"""
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    ValidationError,
)

from pharmacy_first.utils import MalformedPathwayError

AuthoredT = TypeVar("AuthoredT", bound="AuthoredModel")


class AuthoredModel(BaseModel):
    """Base for authored shapes. Keys not modelled are left to the caller."""
    model_config = ConfigDict(extra="ignore", frozen=True)


# ── Document level ────────────────────────────────────────────────────────────

class AuthoredMetadata(AuthoredModel):
    version: StrictStr
    last_updated: StrictStr = Field(alias="lastUpdated")
    sources: List[StrictStr]
    nice_guideline: StrictStr = Field(alias="niceGuideline")


class AuthoredSelfCare(AuthoredModel):
    self_care: Optional[List[StrictStr]] = Field(default=None, alias="selfCare")
    education: Optional[List[StrictStr]] = None
    safety_net: Optional[List[StrictStr]] = Field(default=None, alias="safetyNet")
    referral: Optional[List[StrictStr]] = None


class AuthoredDocument(AuthoredModel):
    """Top-level object. Unknown keys are kept in `model_extra`."""
    model_config = ConfigDict(extra="allow", frozen=True)

    pathway: StrictStr = Field(min_length=1)
    metadata: AuthoredMetadata
    notes: List[StrictStr]
    decision_tree: Any = Field(alias="decisionTree")
    pgds: Optional[Dict[str, Any]] = None
    self_care_and_safety_netting: Optional[AuthoredSelfCare] = Field(
        default=None, alias="selfCareAndSafetyNetting"
    )


# ── Node fields (per node type) ───────────────────────────────────────────────

class AuthoredDecisionFields(AuthoredModel):
    title: Optional[StrictStr] = None
    question: Optional[StrictStr] = None
    details: Any = None
    additional: Any = None


class AuthoredActionFields(AuthoredModel):
    title: Optional[StrictStr] = None
    actions: Optional[List[StrictStr]] = None
    safety_net: Optional[StrictBool] = Field(default=None, alias="safetyNet")


class AuthoredTreatmentFields(AuthoredModel):
    title: Optional[StrictStr] = None
    drug: Optional[StrictStr] = None
    duration_days: Optional[StrictInt] = Field(default=None, alias="durationDays")
    dose: Any = None  # drug-specific, passed through untouched
    formulations: Optional[List[StrictStr]] = None
    route: Optional[StrictStr] = None
    legal_category: Optional[StrictStr] = Field(default=None, alias="legalCategory")
    plus: Optional[List[StrictStr]] = None
    follow_up: Optional[StrictStr] = Field(default=None, alias="followUp")
    safety_net: Optional[StrictBool] = Field(default=None, alias="safetyNet")
    referral_if_worsen: Optional[StrictBool] = Field(default=None, alias="referralIfWorsen")
    inherits: Optional[StrictStr] = None


def validate_authored(
    model: Type[AuthoredT],
    raw: Any,
    node_id: Optional[str] = None,
) -> AuthoredT:
    """
    Validate one authored object against `model`.

    Raises:
        MalformedPathwayError: naming the node (if any) and the first
            offending field, e.g. details["field"] == "durationDays".
    """
    try:
        return model.model_validate(raw)
    except ValidationError as exc:
        error = exc.errors()[0]
        location = ".".join(str(part) for part in error["loc"])
        field = next((part for part in reversed(error["loc"]) if isinstance(part, str)), None)
        raise MalformedPathwayError(
            f"{location or model.__name__}: {error['msg']}",
            node_id=node_id,
            details={"field": field, "location": location, "error_count": exc.error_count()},
        ) from exc
