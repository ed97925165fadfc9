from .schemas import (
    HealthResponse,
    InferRequest,
    NEWS2Request,
    NEWS2Response,
    PatientHistoryInput,
    TraversalRequest,
    TraversalResponse,
)

__all__ = [
    "HealthResponse",
    "InferRequest",
    "NEWS2Request",
    "NEWS2Response",
    "PatientHistoryInput",
    "TraversalRequest",
    "TraversalResponse",
]
