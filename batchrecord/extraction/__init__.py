from batchrecord.extraction.base import BaseStructuredExtractor
from batchrecord.extraction.extractor import StructuredExtractor
from batchrecord.extraction.factory import ExtractorFactory
from batchrecord.extraction.models import Section, StructuredRecordSet

__all__ = [
    "BaseStructuredExtractor",
    "ExtractorFactory",
    "Section",
    "StructuredExtractor",
    "StructuredRecordSet",
]
