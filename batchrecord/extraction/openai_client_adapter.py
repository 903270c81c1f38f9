import httpx
import openai

from batchrecord.extraction.client_base import BaseExtractionClient
from batchrecord.extraction.exceptions import ExtractionError, ExtractionNetworkError


class OpenAIClientAdapter(BaseExtractionClient):
    """Extraction client built on the async OpenAI-compatible chat API.

    Each call sends exactly one request; the SDK's own retries are disabled.
    """

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: float,
        base_url: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._client = openai.AsyncOpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
            max_retries=0,
            http_client=http_client,
        )

    async def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        max_tokens: int,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        try:
            response = await self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                max_tokens=max_tokens,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
            )
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise ExtractionNetworkError(f"AI provider network error: {exc}") from exc
        except openai.APIError as exc:
            raise ExtractionNetworkError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise ExtractionError("AI returned no choices")
        content = response.choices[0].message.content
        if not content:
            raise ExtractionError("AI returned empty response")
        return content

    async def aclose(self) -> None:
        await self._client.close()
