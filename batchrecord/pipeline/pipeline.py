import asyncio
from functools import partial

from batchrecord.core.errors import ErrorDetail, ErrorStage
from batchrecord.extraction.base import BaseStructuredExtractor
from batchrecord.ingestion.exceptions import FileReadError
from batchrecord.ingestion.file_loader import FileLoader
from batchrecord.ingestion.models import UploadedFile
from batchrecord.logging.logger import Log
from batchrecord.pipeline.exceptions import InvalidTransitionError
from batchrecord.pipeline.states import (
    NOT_STARTED,
    ExtractingStructure,
    ExtractionState,
    Failed,
    NotStarted,
    Ready,
    RecognizingText,
)
from batchrecord.recognition.base import BaseTextRecognizer


class ExtractionPipeline:
    """Runs OCR then structured extraction for each image, one file at a time per id.

    States per file id: NotStarted -> RecognizingText -> ExtractingStructure
    -> Ready | Failed, and Failed -> RecognizingText on retry.

    Triggers must be called from a running event loop. They schedule the work
    as a task and return it; a second trigger for a file already in flight
    returns the same task. Results are written to the state map by file id
    whether or not the file is still selected, unless the file was forgotten.
    """

    def __init__(
        self,
        recognizer: BaseTextRecognizer,
        extractor: BaseStructuredExtractor,
        file_loader: FileLoader | None = None,
    ) -> None:
        self._recognizer = recognizer
        self._extractor = extractor
        self._file_loader = file_loader if file_loader is not None else FileLoader()
        self._states: dict[str, ExtractionState] = {}
        self._in_flight: dict[str, asyncio.Task[ExtractionState]] = {}

    def state(self, file_id: str) -> ExtractionState:
        return self._states.get(file_id, NOT_STARTED)

    def is_in_flight(self, file_id: str) -> bool:
        return file_id in self._in_flight

    def select(self, file: UploadedFile) -> ExtractionState:
        """Auto-extract policy: start extraction for a not-yet-processed image."""
        self.request_extraction(file)
        return self.state(file.id)

    def request_extraction(self, file: UploadedFile) -> asyncio.Task[ExtractionState] | None:
        """Start extraction unless it is running, done, failed or not applicable.

        Returns the in-flight task, or None when nothing runs for this file.
        """
        if not file.is_image:
            Log.debug(f"Skipping extraction for document {file.name}", file_id=file.id)
            return None
        task = self._in_flight.get(file.id)
        if task is not None:
            return task
        if not isinstance(self.state(file.id), NotStarted):
            return None
        return self._start(file)

    def retry(self, file: UploadedFile) -> asyncio.Task[ExtractionState]:
        """Re-enter text recognition for a failed file.

        Raises:
            InvalidTransitionError: if the file is not in the Failed state.
        """
        current = self.state(file.id)
        if not isinstance(current, Failed):
            raise InvalidTransitionError(
                f"Cannot retry {file.name}: extraction is {current.label}"
            )
        Log.info(f"Retrying extraction for {file.name}", file_id=file.id)
        return self._start(file)

    async def wait(self, file_id: str) -> ExtractionState:
        """Wait for any in-flight extraction of the file and return its state."""
        task = self._in_flight.get(file_id)
        if task is not None:
            await asyncio.shield(task)
        return self.state(file_id)

    async def wait_all(self) -> None:
        tasks = list(self._in_flight.values())
        if tasks:
            await asyncio.gather(*(asyncio.shield(task) for task in tasks))

    def forget(self, file_id: str) -> None:
        """Drop a file's state; a result still in flight will be discarded."""
        self._states.pop(file_id, None)
        if self._in_flight.pop(file_id, None) is not None:
            Log.info("Forgot file with extraction in flight", file_id=file_id)

    async def aclose(self) -> None:
        await self._recognizer.aclose()
        await self._extractor.aclose()

    def _start(self, file: UploadedFile) -> asyncio.Task[ExtractionState]:
        self._set_state(file, RecognizingText())
        task = asyncio.get_running_loop().create_task(
            self._run(file), name=f"extract-{file.id}"
        )
        self._in_flight[file.id] = task
        task.add_done_callback(partial(self._on_done, file))
        return task

    async def _run(self, file: UploadedFile) -> ExtractionState:
        try:
            image_bytes = await asyncio.to_thread(self._file_loader.load, file)
        except FileReadError as exc:
            return self._settle(file, Failed(exc.to_detail()))

        text = await self._recognizer.recognize(image_bytes)
        if isinstance(text, ErrorDetail):
            return self._settle(file, Failed(text))
        state = self._settle(file, ExtractingStructure(recognized_text=text))
        if not self._is_current(file):
            return state

        records = await self._extractor.extract(text)
        if isinstance(records, ErrorDetail):
            return self._settle(file, Failed(records))
        return self._settle(file, Ready(records=records, recognized_text=text))

    def _is_current(self, file: UploadedFile) -> bool:
        return self._in_flight.get(file.id) is asyncio.current_task()

    def _settle(self, file: UploadedFile, state: ExtractionState) -> ExtractionState:
        if self._is_current(file):
            self._set_state(file, state)
        else:
            Log.info(
                f"Discarding {state.label} result for forgotten file {file.name}",
                file_id=file.id,
            )
        return state

    def _set_state(self, file: UploadedFile, state: ExtractionState) -> None:
        previous = self.state(file.id)
        self._states[file.id] = state
        if isinstance(state, Failed):
            Log.error(
                f"{file.name}: {previous.label} -> failed: {state.error.message}",
                file_id=file.id,
                stage=state.error.stage.value,
            )
        else:
            Log.info(f"{file.name}: {previous.label} -> {state.label}", file_id=file.id)

    def _on_done(self, file: UploadedFile, task: asyncio.Task[ExtractionState]) -> None:
        is_current = self._in_flight.get(file.id) is task
        if is_current:
            del self._in_flight[file.id]
        if task.cancelled():
            detail = ErrorDetail(ErrorStage.NETWORK, "Extraction was cancelled")
        elif task.exception() is not None:
            detail = ErrorDetail(ErrorStage.EXTRACTION, f"Unexpected error: {task.exception()}")
        else:
            return
        if is_current:
            self._set_state(file, Failed(detail))
        else:
            Log.error(detail.message, file_id=file.id)
