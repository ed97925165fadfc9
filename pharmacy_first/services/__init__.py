"""
Outbound service integrations.
"""
from .inference_proxy import InferenceProxyService, build_payload, normalise_stage

__all__ = [
    "InferenceProxyService",
    "build_payload",
    "normalise_stage",
]
