import base64
from typing import Any

import httpx

from batchrecord.config.exceptions import ConfigurationError
from batchrecord.core.errors import ErrorDetail, IntakeError
from batchrecord.logging.logger import Log
from batchrecord.recognition.base import NO_TEXT_FOUND, BaseTextRecognizer
from batchrecord.recognition.exceptions import RecognitionError, RecognitionNetworkError

DEFAULT_ENDPOINT = "https://vision.googleapis.com/v1/images:annotate"


class GoogleVisionClient(BaseTextRecognizer):
    """OCR adapter for the Google Cloud Vision ``images:annotate`` REST API.

    The text is read from ``responses[0].fullTextAnnotation.text``, which keeps
    the page's block and line breaks, rather than ``textAnnotations[0]``.
    """

    def __init__(
        self,
        *,
        api_key: str,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout_seconds: float = 30,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        if not api_key:
            raise ConfigurationError(
                "ocr_api_key is required for ocr_provider=google_vision"
            )
        self._api_key = api_key
        self._endpoint = endpoint
        self._timeout_seconds = timeout_seconds
        self._owns_client = http_client is None
        self._client = http_client if http_client is not None else httpx.AsyncClient()

    async def recognize(self, image_bytes: bytes) -> str | ErrorDetail:
        try:
            text = await self._annotate(image_bytes)
        except IntakeError as exc:
            Log.error(f"Text recognition failed: {exc}", stage=exc.stage.value)
            return exc.to_detail()
        Log.info(f"Recognized {len(text)} chars of text")
        return text

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _annotate(self, image_bytes: bytes) -> str:
        try:
            response = await self._client.post(
                self._endpoint,
                params={"key": self._api_key},
                json=build_annotate_request(image_bytes),
                timeout=self._timeout_seconds,
            )
        except httpx.TimeoutException as exc:
            raise RecognitionNetworkError(
                f"OCR request timed out after {self._timeout_seconds}s"
            ) from exc
        except httpx.HTTPError as exc:
            raise RecognitionNetworkError(f"OCR network error: {exc}") from exc

        if not response.is_success:
            raise RecognitionNetworkError(_http_error_message(response))
        try:
            payload = response.json()
        except ValueError as exc:
            raise RecognitionError("OCR response is not valid JSON") from exc
        return read_full_text(payload)


def build_annotate_request(image_bytes: bytes) -> dict[str, Any]:
    content = base64.b64encode(image_bytes).decode("ascii")
    return {
        "requests": [
            {
                "image": {"content": content},
                "features": [{"type": "TEXT_DETECTION"}],
            }
        ]
    }


def read_full_text(payload: Any) -> str:
    """Pull the full-text annotation out of an annotate response.

    Raises:
        RecognitionError: if the response reports a per-image error or has an
            unexpected shape.
    """
    if not isinstance(payload, dict):
        raise RecognitionError("OCR response must be a JSON object")
    responses = payload.get("responses") or []
    first = responses[0] if isinstance(responses, list) and responses else {}
    if not isinstance(first, dict):
        raise RecognitionError("OCR response entry must be a JSON object")
    error = first.get("error")
    if isinstance(error, dict) and error.get("message"):
        raise RecognitionError(str(error["message"]))
    annotation = first.get("fullTextAnnotation") or {}
    text = annotation.get("text") if isinstance(annotation, dict) else None
    if not isinstance(text, str) or not text:
        return NO_TEXT_FOUND
    return text


def _http_error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
    return f"HTTP error! status: {response.status_code}"
