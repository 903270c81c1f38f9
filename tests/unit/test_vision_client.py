import asyncio
import base64
import json
from collections.abc import Callable

import httpx
import pytest

from batchrecord.config.exceptions import ConfigurationError
from batchrecord.core.errors import ErrorDetail, ErrorStage
from batchrecord.recognition.base import NO_TEXT_FOUND
from batchrecord.recognition.vision_client import GoogleVisionClient, read_full_text

Handler = Callable[[httpx.Request], httpx.Response]


def _recognize(handler: Handler, image: bytes = b"image") -> str | ErrorDetail:
    async def scenario() -> str | ErrorDetail:
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
            client = GoogleVisionClient(api_key="test-key", http_client=http_client)
            return await client.recognize(image)

    return asyncio.run(scenario())


def _annotation(text: str) -> dict[str, object]:
    return {"responses": [{"fullTextAnnotation": {"text": text}}]}


class TestRequest:
    def test_sends_base64_image_with_text_detection(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=_annotation("ok"))

        _recognize(handler, image=b"\x89PNG-bytes")

        request = seen[0]
        body = json.loads(request.content)
        assert request.method == "POST"
        assert request.url.host == "vision.googleapis.com"
        assert request.url.params["key"] == "test-key"
        assert body["requests"][0]["image"]["content"] == base64.b64encode(
            b"\x89PNG-bytes"
        ).decode()
        assert body["requests"][0]["features"] == [{"type": "TEXT_DETECTION"}]


class TestSuccess:
    def test_returns_full_text_annotation(self) -> None:
        result = _recognize(lambda request: httpx.Response(200, json=_annotation("Batch No: 42")))
        assert result == "Batch No: 42"

    def test_no_text_returns_sentinel(self) -> None:
        result = _recognize(lambda request: httpx.Response(200, json={"responses": [{}]}))
        assert result == NO_TEXT_FOUND

    def test_empty_responses_returns_sentinel(self) -> None:
        result = _recognize(lambda request: httpx.Response(200, json={}))
        assert result == NO_TEXT_FOUND


class TestFailure:
    def test_http_error_uses_provider_message(self) -> None:
        result = _recognize(
            lambda request: httpx.Response(403, json={"error": {"message": "quota exceeded"}})
        )
        assert result == ErrorDetail(stage=ErrorStage.NETWORK, message="quota exceeded")

    def test_http_error_without_body(self) -> None:
        result = _recognize(lambda request: httpx.Response(500, text="oops"))
        assert result == ErrorDetail(stage=ErrorStage.NETWORK, message="HTTP error! status: 500")

    def test_timeout_is_network_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        result = _recognize(handler)
        assert isinstance(result, ErrorDetail)
        assert result.stage is ErrorStage.NETWORK
        assert "timed out" in result.message

    def test_connection_error_is_network_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        result = _recognize(handler)
        assert isinstance(result, ErrorDetail)
        assert result.stage is ErrorStage.NETWORK
        assert "connection refused" in result.message

    def test_per_image_error_is_recognition_failure(self) -> None:
        result = _recognize(
            lambda request: httpx.Response(
                200, json={"responses": [{"error": {"message": "Bad image data."}}]}
            )
        )
        assert result == ErrorDetail(stage=ErrorStage.RECOGNITION, message="Bad image data.")

    def test_non_json_success_is_recognition_failure(self) -> None:
        result = _recognize(lambda request: httpx.Response(200, text="<html>"))
        assert isinstance(result, ErrorDetail)
        assert result.stage is ErrorStage.RECOGNITION


class TestConfiguration:
    def test_missing_api_key_fails_fast(self) -> None:
        with pytest.raises(ConfigurationError, match="ocr_api_key"):
            GoogleVisionClient(api_key="")


class TestReadFullText:
    def test_ignores_text_annotations_field(self) -> None:
        payload = {"responses": [{"textAnnotations": [{"description": "word"}]}]}
        assert read_full_text(payload) == NO_TEXT_FOUND

    def test_keeps_line_breaks(self) -> None:
        assert read_full_text(_annotation("Line 1\nLine 2\n")) == "Line 1\nLine 2\n"
