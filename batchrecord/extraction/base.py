from abc import ABC, abstractmethod

from batchrecord.core.errors import ErrorDetail
from batchrecord.extraction.models import StructuredRecordSet


class BaseStructuredExtractor(ABC):
    """Contract for turning recognized text into a StructuredRecordSet."""

    @abstractmethod
    async def extract(self, recognized_text: str) -> StructuredRecordSet | ErrorDetail:
        """Extract metadata, mixing step and pH adjustment records.

        Returns:
            The record set, or an ErrorDetail. Never raises for provider or
            parse failures.
        """

    async def aclose(self) -> None:
        """Release network resources held by the extractor."""
