"""
Utilities Package - Logging and Exception Handling
"""
from .logging import current_pathway, get_logger, pathway_context, setup_logging
from .exceptions import (
    PathwayServiceError,
    MalformedPathwayError,
    InvalidTraversalError,
    TraversalTerminatedError,
    UnmatchedAnswerError,
    PathwayNotFoundError,
    InferenceProxyError,
)

__all__ = [
    "current_pathway",
    "get_logger",
    "pathway_context",
    "setup_logging",
    "PathwayServiceError",
    "MalformedPathwayError",
    "InvalidTraversalError",
    "TraversalTerminatedError",
    "UnmatchedAnswerError",
    "PathwayNotFoundError",
    "InferenceProxyError",
]
