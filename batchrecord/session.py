from collections.abc import Iterable
from typing import Any

import httpx

from batchrecord.config.exceptions import ConfigurationError
from batchrecord.config.settings import Settings
from batchrecord.core.errors import ErrorDetail
from batchrecord.extraction.factory import ExtractorFactory
from batchrecord.ingestion.file_loader import FileLoader
from batchrecord.ingestion.ingestor import FileIngestor
from batchrecord.ingestion.models import IngestionResult, RawFile, UploadedFile
from batchrecord.ingestion.previews import PreviewRegistry
from batchrecord.ingestion.working_set import WorkingSet
from batchrecord.logging.logger import Log
from batchrecord.pipeline.exceptions import PipelineError
from batchrecord.pipeline.pipeline import ExtractionPipeline
from batchrecord.pipeline.states import ExtractionState, Ready
from batchrecord.publishing.sheet_publisher import SheetPublisher
from batchrecord.recognition.factory import RecognizerFactory
from batchrecord.store.data_store import StructuredDataStore


class IntakeSession:
    """Ties the working set, pipeline, working copy and publisher together.

    Owns the selection pointer. The pipeline never touches it; the working
    copy is (re)loaded from the pipeline's Ready result whenever the selected
    file is Ready and not already loaded.
    """

    def __init__(
        self,
        *,
        ingestor: FileIngestor,
        previews: PreviewRegistry,
        pipeline: ExtractionPipeline,
        store: StructuredDataStore | None = None,
        publisher: SheetPublisher | None = None,
        auto_extract: bool = True,
    ) -> None:
        self._ingestor = ingestor
        self._previews = previews
        self._pipeline = pipeline
        self._store = store if store is not None else StructuredDataStore()
        self._publisher = publisher
        self._auto_extract = auto_extract
        self._working_set = WorkingSet(previews, on_discard=self._on_discard)
        self._selected_id: str | None = None

    @property
    def files(self) -> list[UploadedFile]:
        return list(self._working_set)

    @property
    def previews(self) -> PreviewRegistry:
        return self._previews

    @property
    def pipeline(self) -> ExtractionPipeline:
        return self._pipeline

    @property
    def store(self) -> StructuredDataStore:
        return self._store

    @property
    def selected(self) -> UploadedFile | None:
        if self._selected_id is None:
            return None
        return self._working_set.get(self._selected_id)

    def add_files(self, raw_files: Iterable[RawFile]) -> IngestionResult:
        result = self._ingestor.ingest(raw_files)
        for file in result.accepted:
            self._working_set.add(file)
        return result

    def remove_file(self, file_id: str) -> UploadedFile | None:
        return self._working_set.remove(file_id)

    def remove_by_name(self, name: str) -> UploadedFile | None:
        return self._working_set.remove_by_name(name)

    def state(self, file_id: str) -> ExtractionState:
        return self._pipeline.state(file_id)

    def select(self, file_id: str) -> ExtractionState:
        file = self._require(file_id)
        self._selected_id = file.id
        if self._auto_extract:
            self._pipeline.select(file)
        self.refresh_selection()
        return self._pipeline.state(file.id)

    def extract(self, file_id: str) -> ExtractionState:
        file = self._require(file_id)
        self._pipeline.request_extraction(file)
        return self._pipeline.state(file.id)

    def retry(self, file_id: str) -> ExtractionState:
        file = self._require(file_id)
        self._pipeline.retry(file)
        return self._pipeline.state(file.id)

    async def wait(self, file_id: str) -> ExtractionState:
        state = await self._pipeline.wait(file_id)
        self.refresh_selection()
        return state

    def refresh_selection(self) -> None:
        """Load the selected file's Ready records unless they are already loaded."""
        if self._selected_id is None:
            self._store.clear()
            return
        if self._store.file_id == self._selected_id:
            return
        state = self._pipeline.state(self._selected_id)
        if isinstance(state, Ready):
            self._store.load(state.records, file_id=self._selected_id)
        else:
            self._store.clear()

    async def publish(self) -> Any | ErrorDetail:
        """Publish the working copy. The working copy is left intact either way.

        Webhook failures come back as an ErrorDetail.

        Raises:
            ConfigurationError: if no webhook URL is configured.
            DataStoreError: if no record set is loaded, i.e. the selected file
                is not Ready.
        """
        if self._publisher is None:
            raise ConfigurationError("sheet_webhook_url is required to publish")
        return await self._publisher.publish(self._store.serialize())

    async def aclose(self) -> None:
        self._working_set.clear()
        await self._pipeline.aclose()
        if self._publisher is not None:
            await self._publisher.aclose()

    def _require(self, file_id: str) -> UploadedFile:
        file = self._working_set.get(file_id)
        if file is None:
            raise PipelineError(f"Unknown file id: {file_id}")
        return file

    def _on_discard(self, file_id: str) -> None:
        self._pipeline.forget(file_id)
        if self._selected_id == file_id:
            self._selected_id = None
        if self._store.file_id == file_id:
            self._store.clear()
        Log.debug("Discarded file from working set", file_id=file_id)


def build_session(
    settings: Settings,
    http_client: httpx.AsyncClient | None = None,
) -> IntakeSession:
    """Build an IntakeSession with all configured adapters.

    Raises:
        ConfigurationError: if OCR or extraction credentials are missing.
    """
    previews = PreviewRegistry()
    file_loader = FileLoader()
    pipeline = ExtractionPipeline(
        recognizer=RecognizerFactory.create(settings, http_client=http_client),
        extractor=ExtractorFactory.create(settings),
        file_loader=file_loader,
    )
    publisher = None
    if settings.sheet_webhook_url:
        publisher = SheetPublisher(
            webhook_url=settings.sheet_webhook_url,
            timeout_seconds=settings.publish_timeout_seconds,
            http_client=http_client,
        )
    return IntakeSession(
        ingestor=FileIngestor.from_settings(settings, previews, file_loader),
        previews=previews,
        pipeline=pipeline,
        publisher=publisher,
        auto_extract=settings.auto_extract,
    )
