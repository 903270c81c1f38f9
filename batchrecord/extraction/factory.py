from typing import ClassVar

from batchrecord.config.exceptions import ConfigurationError
from batchrecord.config.settings import Settings
from batchrecord.extraction.base import BaseStructuredExtractor
from batchrecord.extraction.example_client_adapter import ExampleClientAdapter
from batchrecord.extraction.extractor import StructuredExtractor
from batchrecord.extraction.openai_client_adapter import OpenAIClientAdapter


class ExtractorFactory:
    """Creates the configured structured extractor."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "together": "https://api.together.xyz/v1",
        "deepseek": "https://api.deepseek.com/v1",
        "ollama": "http://localhost:11434/v1",
    }
    KEYLESS_PROVIDERS: ClassVar[frozenset[str]] = frozenset({"ollama"})

    @classmethod
    def create(cls, settings: Settings) -> BaseStructuredExtractor:
        """Create a configured extractor from application settings.

        Raises:
            ConfigurationError: if the provider's key, model or URL is missing.
            ValueError: if the provider is unknown.
        """
        provider = settings.extraction_provider.lower()
        if provider == "example":
            return StructuredExtractor(client=ExampleClientAdapter(), model="example")
        base_url = cls._resolve_base_url(provider, settings)
        api_key = cls._resolve_api_key(provider, settings)
        model = cls._resolve_model_name(provider, settings)
        client = OpenAIClientAdapter(
            api_key=api_key,
            timeout_seconds=settings.extraction_timeout_seconds,
            base_url=base_url,
        )
        return StructuredExtractor(
            client=client,
            model=model,
            temperature=settings.extraction_temperature,
            max_tokens=settings.extraction_max_tokens,
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        override = settings.extraction_base_url.strip()
        if provider == "openai":
            return override or None
        if provider == "openai_compatible":
            if not override:
                raise ConfigurationError(
                    "extraction_base_url is required for "
                    "extraction_provider=openai_compatible"
                )
            return override
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return override or default_base_url
        supported = [
            "example",
            "openai",
            "openai_compatible",
            *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS),
        ]
        raise ValueError(
            f"Unknown extraction provider '{provider}'. Choose from: {supported}"
        )

    @classmethod
    def _resolve_api_key(cls, provider: str, settings: Settings) -> str:
        key = settings.extraction_api_key.strip()
        if key:
            return key
        if provider in cls.KEYLESS_PROVIDERS:
            return provider
        raise ConfigurationError(
            f"extraction_api_key is required for extraction_provider={provider}"
        )

    @classmethod
    def _resolve_model_name(cls, provider: str, settings: Settings) -> str:
        model = settings.extraction_model_name.strip()
        if not model:
            raise ConfigurationError(
                f"extraction_model_name is required for extraction_provider={provider}"
            )
        return model
