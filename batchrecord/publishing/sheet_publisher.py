import json
from typing import Any

import httpx

from batchrecord.config.exceptions import ConfigurationError
from batchrecord.core.errors import ErrorDetail, IntakeError
from batchrecord.logging.logger import Log
from batchrecord.publishing.exceptions import PublishError
from batchrecord.store.data_store import SerializedSnapshot


class SheetPublisher:
    """Posts a serialized working copy to a spreadsheet webhook."""

    def __init__(
        self,
        *,
        webhook_url: str,
        timeout_seconds: float = 30,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        if not webhook_url:
            raise ConfigurationError("sheet_webhook_url is required to publish")
        self._webhook_url = webhook_url
        self._timeout_seconds = timeout_seconds
        self._owns_client = http_client is None
        self._client = http_client if http_client is not None else httpx.AsyncClient()

    async def publish(self, snapshot: SerializedSnapshot) -> Any | ErrorDetail:
        """Post the snapshot; return the webhook's answer or an ErrorDetail."""
        try:
            result = await self._post(snapshot)
        except IntakeError as exc:
            Log.error(f"Error adding data to sheet: {exc}")
            return exc.to_detail()
        Log.info("Data successfully added to sheet", timestamp=snapshot.timestamp)
        return result

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _post(self, snapshot: SerializedSnapshot) -> Any:
        try:
            response = await self._client.post(
                self._webhook_url,
                files=build_form_fields(snapshot),
                timeout=self._timeout_seconds,
                follow_redirects=True,
            )
        except httpx.TimeoutException as exc:
            raise PublishError(
                f"Sheet webhook timed out after {self._timeout_seconds}s"
            ) from exc
        except httpx.HTTPError as exc:
            raise PublishError(f"Sheet webhook network error: {exc}") from exc

        if not response.is_success:
            raise PublishError(f"Failed to add data to sheet: {response.status_code}")
        return read_webhook_response(response.text)


def build_form_fields(snapshot: SerializedSnapshot) -> dict[str, tuple[None, str]]:
    """Multipart fields: one JSON string per present section, then the timestamp."""
    fields: dict[str, tuple[None, str]] = {}
    for section, data in snapshot.records.sections().items():
        fields[section.value] = (None, json.dumps(data, ensure_ascii=False, separators=(",", ":")))
    fields["timestamp"] = (None, snapshot.timestamp)
    return fields


def read_webhook_response(text: str) -> Any:
    """Parsed JSON body, or a success wrapper around a body that is not JSON."""
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return {"status": "success", "message": text}
