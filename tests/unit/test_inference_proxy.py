"""
Unit Tests for the Image-Classification Relay

Upstream calls go through httpx.MockTransport.
"""
import json

import httpx
import pytest

from pharmacy_first.services import InferenceProxyService, build_payload, normalise_stage
from pharmacy_first.utils import InferenceProxyError

BINARY_URL = "https://binary.test/predict"
MULTI_URL = "https://multi.test/predict"


def _service(handler) -> InferenceProxyService:
    return InferenceProxyService(
        binary_endpoint=BINARY_URL,
        multiclass_endpoint=MULTI_URL,
        timeout_seconds=5,
        transport=httpx.MockTransport(handler),
    )


class TestPayload:

    @pytest.mark.parametrize("stage,expected", [
        ("binary", "binary"), ("MULTICLASS", "multiclass"),
        ("other", "binary"), (None, "binary"), ("", "binary"),
    ])
    def test_normalise_stage(self, stage, expected):
        assert normalise_stage(stage) == expected

    def test_binary_defaults_enhancement(self):
        assert build_payload("binary", {"image": "abc"}) == {
            "image": "abc",
            "apply_medical_enhancement": True,
        }

    def test_binary_keeps_explicit_enhancement(self):
        payload = build_payload("binary", {"image": "abc", "apply_medical_enhancement": False})
        assert payload["apply_medical_enhancement"] is False

    def test_multiclass_sends_image_only(self):
        assert build_payload("multiclass", {"image": "abc", "apply_medical_enhancement": True}) == {
            "image": "abc",
        }

    @pytest.mark.parametrize("body", [{}, {"image": ""}, {"image": 42}])
    def test_missing_image(self, body):
        with pytest.raises(InferenceProxyError) as exc_info:
            build_payload("binary", body)

        assert exc_info.value.status_code == 400


@pytest.mark.asyncio
class TestRelay:

    async def test_json_response(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"prediction": "normal", "confidence": 0.93})

        status, data = await _service(handler).relay("binary", {"image": "abc"})

        assert status == 200
        assert data == {"prediction": "normal", "confidence": 0.93}
        assert seen["url"] == BINARY_URL
        assert seen["body"] == {"image": "abc", "apply_medical_enhancement": True}

    async def test_multiclass_endpoint(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert str(request.url) == MULTI_URL
            return httpx.Response(200, json={"label": "aom"})

        status, data = await _service(handler).relay("multiclass", {"image": "abc"})

        assert status == 200
        assert data == {"label": "aom"}

    async def test_non_json_wrapped(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="plain text", headers={"content-type": "text/plain"})

        status, data = await _service(handler).relay("binary", {"image": "abc"})

        assert status == 200
        assert data == {"raw": "plain text"}

    async def test_upstream_error_status_passed_through(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503, json={"detail": "warming up"})

        status, data = await _service(handler).relay("binary", {"image": "abc"})

        assert status == 503
        assert data == {"detail": "warming up"}

    async def test_upstream_unreachable(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(InferenceProxyError) as exc_info:
            await _service(handler).relay("binary", {"image": "abc"})

        assert exc_info.value.status_code == 502
        assert exc_info.value.stage == "binary"
