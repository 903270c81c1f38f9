"""Example OCR adapter.

Returns fixed text without network calls. Useful for local development and
for exercising the pipeline without a Vision API key.
"""

from typing import ClassVar

from batchrecord.core.errors import ErrorDetail
from batchrecord.recognition.base import BaseTextRecognizer


class ExampleTextRecognizer(BaseTextRecognizer):
    DEFAULT_TEXT: ClassVar[str] = (
        "BATCH MANUFACTURING RECORD\n"
        "Product: Saline Solution 0.9%\n"
        "Batch No: 42\n"
        "Step 3 Mixing: Sodium Chloride 9.0 g, Water for Injection 1000 mL\n"
        "Step 4 pH Adjustment: target pH 7.0, measured pH 6.8, 0.1N NaOH 2 mL"
    )

    def __init__(self, text: str | None = None) -> None:
        self._text = text if text is not None else self.DEFAULT_TEXT

    async def recognize(self, image_bytes: bytes) -> str | ErrorDetail:
        _ = image_bytes
        return self._text
