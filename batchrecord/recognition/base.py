from abc import ABC, abstractmethod

from batchrecord.core.errors import ErrorDetail

NO_TEXT_FOUND = "No text found"


class BaseTextRecognizer(ABC):
    """Contract for all OCR adapters."""

    @abstractmethod
    async def recognize(self, image_bytes: bytes) -> str | ErrorDetail:
        """Recognize the text in an image.

        Args:
            image_bytes: Raw image file content.

        Returns:
            The recognized text, ``NO_TEXT_FOUND`` when the image holds no
            text, or an ErrorDetail. Never raises for provider failures.
        """

    async def aclose(self) -> None:
        """Release network resources held by the adapter."""
