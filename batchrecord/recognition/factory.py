from typing import ClassVar

import httpx

from batchrecord.config.settings import Settings
from batchrecord.recognition.base import BaseTextRecognizer
from batchrecord.recognition.example_recognizer import ExampleTextRecognizer
from batchrecord.recognition.vision_client import GoogleVisionClient


class RecognizerFactory:
    """Creates the configured OCR adapter."""

    PROVIDERS: ClassVar[tuple[str, ...]] = ("google_vision", "example")

    @classmethod
    def create(
        cls,
        settings: Settings,
        http_client: httpx.AsyncClient | None = None,
    ) -> BaseTextRecognizer:
        provider = settings.ocr_provider.lower()
        if provider == "example":
            return ExampleTextRecognizer()
        if provider == "google_vision":
            return GoogleVisionClient(
                api_key=settings.ocr_api_key,
                endpoint=settings.ocr_endpoint,
                timeout_seconds=settings.ocr_timeout_seconds,
                http_client=http_client,
            )
        raise ValueError(
            f"Unknown OCR provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
        )
