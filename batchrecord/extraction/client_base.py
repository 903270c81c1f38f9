from abc import ABC, abstractmethod


class BaseExtractionClient(ABC):
    """Contract for provider-specific generative-text clients."""

    @abstractmethod
    async def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        max_tokens: int,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        """Return the provider's reply as plain text.

        Raises:
            ExtractionNetworkError: on transport failure, timeout or API error.
            ExtractionError: if the provider returned no content.
        """

    async def aclose(self) -> None:
        """Release network resources held by the client."""
