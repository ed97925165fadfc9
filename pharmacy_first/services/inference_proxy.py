"""
Image-classification relay.

Forwards an otoscope image (base64) to one of two remote PyTorch
services and hands the response straight back:

    binary      – screening: normal vs abnormal ear drum
    multiclass  – diagnostic: which condition

No decision logic lives here; the relay only validates the request body,
shapes the payload for the chosen stage and normalises the reply.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple

import httpx

from pharmacy_first.config import settings
from pharmacy_first.utils import InferenceProxyError, get_logger

logger = get_logger(__name__)

BINARY = "binary"
MULTICLASS = "multiclass"


def normalise_stage(stage: Optional[str]) -> str:
    """Anything other than 'multiclass' (case-insensitive) means binary."""
    return MULTICLASS if (stage or BINARY).strip().lower() == MULTICLASS else BINARY


def build_payload(stage: str, body: Mapping[str, Any]) -> Dict[str, Any]:
    image = body.get("image")
    if not image or not isinstance(image, str):
        raise InferenceProxyError(
            "Missing image (base64) in body",
            stage=stage,
            status_code=400,
        )
    if stage == BINARY:
        enhance = body.get("apply_medical_enhancement")
        return {"image": image, "apply_medical_enhancement": True if enhance is None else enhance}
    return {"image": image}


class InferenceProxyService:
    """
    Thin async client for the remote classifiers.

    `transport` lets tests substitute an httpx.MockTransport.
    """

    def __init__(
        self,
        binary_endpoint: Optional[str] = None,
        multiclass_endpoint: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.endpoints = {
            BINARY: binary_endpoint or settings.binary_endpoint,
            MULTICLASS: multiclass_endpoint or settings.multiclass_endpoint,
        }
        self.timeout_seconds = timeout_seconds or settings.inference_timeout_seconds
        self._transport = transport

    async def relay(self, stage: Optional[str], body: Mapping[str, Any]) -> Tuple[int, Any]:
        """
        Send the request upstream.

        Returns:
            (status_code, data) where status is 200 on upstream success and
            the upstream status otherwise. Non-JSON replies are wrapped as
            {"raw": text}.

        Raises:
            InferenceProxyError: missing image (400) or upstream unreachable (502).
        """
        stage = normalise_stage(stage)
        payload = build_payload(stage, body)
        endpoint = self.endpoints[stage]

        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport) as client:
                response = await client.post(endpoint, json=payload)
        except httpx.HTTPError as exc:
            logger.error(f"Inference relay [{stage}] to {endpoint} failed: {exc}")
            raise InferenceProxyError(
                f"Inference service unavailable: {exc}",
                stage=stage,
                status_code=502,
                details={"endpoint": endpoint},
            ) from exc

        text = response.text
        data: Any = {"raw": text}
        if "application/json" in response.headers.get("content-type", ""):
            try:
                data = response.json()
            except ValueError:
                logger.warning(f"Inference relay [{stage}]: upstream sent invalid JSON")

        if not response.is_success:
            logger.warning(f"Inference relay [{stage}]: upstream returned {response.status_code}")
            return response.status_code or 500, data
        return 200, data
