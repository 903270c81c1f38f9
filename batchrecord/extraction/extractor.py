"""AI-powered structured extraction of batch-record text."""

from collections.abc import Sequence
from pathlib import Path

from batchrecord.core.errors import ErrorDetail, IntakeError
from batchrecord.extraction.base import BaseStructuredExtractor
from batchrecord.extraction.client_base import BaseExtractionClient
from batchrecord.extraction.models import StructuredRecordSet
from batchrecord.extraction.parsers import PARSE_STRATEGIES, ParseStrategy, parse_reply
from batchrecord.extraction.prompt_loader import load_extraction_prompt, load_system_prompt
from batchrecord.extraction.validator import build_record_set
from batchrecord.logging.logger import Log


class StructuredExtractor(BaseStructuredExtractor):
    """Sends recognized text to a generative-text provider and parses the reply."""

    def __init__(
        self,
        *,
        client: BaseExtractionClient,
        model: str,
        temperature: float = 0.0,
        max_tokens: int = 2048,
        prompt_path: Path | None = None,
        system_prompt_path: Path | None = None,
        strategies: Sequence[ParseStrategy] = PARSE_STRATEGIES,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = max(0.0, min(0.2, temperature))
        self._max_tokens = max_tokens
        self._prompt = load_extraction_prompt(prompt_path)
        self._system_prompt = load_system_prompt(system_prompt_path)
        self._strategies = tuple(strategies)

    async def extract(self, recognized_text: str) -> StructuredRecordSet | ErrorDetail:
        try:
            records = await self._extract(recognized_text)
        except IntakeError as exc:
            Log.error(f"Structured extraction failed: {exc}", stage=exc.stage.value)
            return exc.to_detail()
        Log.info(
            f"Structured extraction complete: {len(records.sections())} sections",
            model=self._model,
        )
        return records

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _extract(self, recognized_text: str) -> StructuredRecordSet:
        prompt = self.build_prompt(recognized_text)
        Log.debug(f"Extraction prompt:\n{prompt}")

        reply = await self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
            system_prompt=self._system_prompt,
            user_prompt=prompt,
        )
        Log.debug(f"AI raw reply:\n{reply}")

        return build_record_set(parse_reply(reply, self._strategies))

    def build_prompt(self, recognized_text: str) -> str:
        return f"{self._prompt}\n\n{recognized_text}"
