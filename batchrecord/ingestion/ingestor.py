import uuid
from collections.abc import Iterable
from pathlib import PurePath

from batchrecord.config.settings import Settings
from batchrecord.ingestion.exceptions import (
    FileReadError,
    FileTooLargeError,
    FileValidationError,
    UnsupportedFileTypeError,
)
from batchrecord.ingestion.file_loader import FileLoader
from batchrecord.ingestion.models import (
    FileCategory,
    IngestionResult,
    RawFile,
    RejectedFile,
    UploadedFile,
    classify,
)
from batchrecord.ingestion.previews import PreviewRegistry
from batchrecord.logging.logger import Log


class FileIngestor:
    """Validates raw files and turns them into UploadedFile records."""

    def __init__(
        self,
        previews: PreviewRegistry,
        *,
        max_size_bytes: int = 10 * 1024 * 1024,
        accepted_extensions: Iterable[str] = (),
        file_loader: FileLoader | None = None,
    ) -> None:
        self._previews = previews
        self._max_size_bytes = max_size_bytes
        self._accepted_extensions = frozenset(ext.lower() for ext in accepted_extensions)
        self._file_loader = file_loader if file_loader is not None else FileLoader()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        previews: PreviewRegistry,
        file_loader: FileLoader | None = None,
    ) -> "FileIngestor":
        return cls(
            previews,
            max_size_bytes=settings.max_upload_size_bytes,
            accepted_extensions=settings.accepted_extension_list,
            file_loader=file_loader,
        )

    def ingest(self, raw_files: Iterable[RawFile]) -> IngestionResult:
        """Admit every valid file; a rejected file never blocks the others."""
        result = IngestionResult()
        for raw in raw_files:
            try:
                result.accepted.append(self._ingest_one(raw))
            except (FileValidationError, FileReadError) as exc:
                Log.warning(f"Rejected upload: {exc}", filename=raw.name)
                result.rejected.append(RejectedFile(name=raw.name, reason=str(exc)))
        Log.info(
            f"Ingested {len(result.accepted)} files, rejected {len(result.rejected)}"
        )
        return result

    def _ingest_one(self, raw: RawFile) -> UploadedFile:
        self._validate(raw)
        category, subtype = classify(raw.content_type)
        preview_ref = None
        if category is FileCategory.IMAGE:
            preview_ref = self._previews.allocate(
                raw.content_type, self._file_loader.load_raw(raw)
            )
        return UploadedFile(
            id=uuid.uuid4().hex,
            name=raw.name,
            category=category,
            subtype=subtype,
            content_type=raw.content_type,
            size_bytes=raw.size_bytes,
            byte_source=raw.data if raw.data is not None else raw.path,
            preview_ref=preview_ref,
        )

    def _validate(self, raw: RawFile) -> None:
        if raw.size_bytes > self._max_size_bytes:
            limit_mb = self._max_size_bytes / (1024 * 1024)
            raise FileTooLargeError(
                raw.name,
                f"{raw.name} exceeds the maximum upload size of {limit_mb:g}MB",
            )
        if self._accepted_extensions:
            extension = PurePath(raw.name).suffix.lower()
            if extension not in self._accepted_extensions:
                raise UnsupportedFileTypeError(
                    raw.name,
                    f"{raw.name} has unsupported type '{extension or raw.content_type}'",
                )
