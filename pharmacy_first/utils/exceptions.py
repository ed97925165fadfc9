"""
Custom Exception Hierarchy

Specific exception types for the pathway and scoring service, each
carrying structured error information for API responses.
"""
from typing import Any, Dict, Optional


class PathwayServiceError(Exception):
    """Base exception for all pathway service errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details
        }


class MalformedPathwayError(PathwayServiceError):
    """
    Authored pathway content violates the document shape or node invariants.

    Fatal for the document: nothing may be traversed against it.
    """

    def __init__(
        self,
        message: str,
        node_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="MALFORMED_PATHWAY",
            details={"node_id": node_id, **(details or {})}
        )
        self.node_id = node_id


class InvalidTraversalError(PathwayServiceError):
    """Recoverable traversal error; the caller should re-prompt."""

    def __init__(
        self,
        message: str,
        node_id: Optional[str] = None,
        code: str = "INVALID_TRAVERSAL",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code=code,
            details={"node_id": node_id, **(details or {})}
        )
        self.node_id = node_id


class TraversalTerminatedError(InvalidTraversalError):
    """Advance was requested on an action or treatment node."""

    def __init__(self, node_id: str):
        super().__init__(
            message=f"Pathway already terminated at node '{node_id}'",
            node_id=node_id,
            code="TRAVERSAL_TERMINATED",
        )


class UnmatchedAnswerError(InvalidTraversalError):
    """The supplied answer does not select any branch of the node."""

    def __init__(
        self,
        message: str,
        node_id: Optional[str] = None,
        answer: Any = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            node_id=node_id,
            code="UNMATCHED_ANSWER",
            details={"answer": answer, **(details or {})}
        )
        self.answer = answer


class PathwayNotFoundError(PathwayServiceError):
    """No pathway is registered under the requested slug."""

    def __init__(self, slug: str):
        super().__init__(
            message=f"Pathway not found: {slug}",
            code="PATHWAY_NOT_FOUND",
            details={"slug": slug}
        )
        self.slug = slug


class InferenceProxyError(PathwayServiceError):
    """Errors while relaying a request to the image-classification service."""

    def __init__(
        self,
        message: str,
        stage: str = "unknown",
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="INFERENCE_PROXY_ERROR",
            details={"stage": stage, **(details or {})}
        )
        self.stage = stage
        self.status_code = status_code
