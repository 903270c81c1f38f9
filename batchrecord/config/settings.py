from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ACCEPTED_EXTENSIONS = ".pdf,.doc,.docx,.txt,.png,.jpg,.jpeg,.gif"


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    max_upload_size_mb: int = 10
    accepted_extensions: str = DEFAULT_ACCEPTED_EXTENSIONS
    auto_extract: bool = True

    ocr_provider: str = "google_vision"
    ocr_api_key: str = ""
    ocr_endpoint: str = "https://vision.googleapis.com/v1/images:annotate"
    ocr_timeout_seconds: int = 30

    extraction_provider: str = "openai"
    extraction_api_key: str = ""
    extraction_model_name: str = ""
    extraction_base_url: str = ""
    extraction_timeout_seconds: int = 60
    extraction_temperature: float = 0.0
    extraction_max_tokens: int = 2048

    sheet_webhook_url: str = ""
    publish_timeout_seconds: int = 30

    @property
    def max_upload_size_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024

    @property
    def accepted_extension_list(self) -> list[str]:
        """Normalized lowercase extensions, each with a leading dot."""
        extensions = []
        for raw in self.accepted_extensions.split(","):
            ext = raw.strip().lower()
            if not ext:
                continue
            extensions.append(ext if ext.startswith(".") else f".{ext}")
        return extensions
