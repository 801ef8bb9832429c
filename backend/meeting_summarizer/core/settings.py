from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    LOG_LEVEL: str = "INFO"

    # HTTP server
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    CORS_ORIGINS: str = "*"

    # Provider credentials (absent = provider disabled)
    HUGGINGFACE_API_KEY: str | None = None
    GEMINI_API_KEY: str | None = None

    # Models
    HF_SUMMARY_MODEL: str = "mistralai/Mistral-7B-Instruct-v0.2"
    HF_ASR_MODEL: str = "openai/whisper-large-v2"
    GEMINI_MODEL: str = "gemini-1.5-pro"

    # Endpoints
    HF_API_BASE: str = "https://api-inference.huggingface.co/models"
    GEMINI_API_BASE: str = "https://generativelanguage.googleapis.com/v1beta/models"

    # Comma-separated; providers without a credential are skipped
    SUMMARY_PROVIDER_ORDER: str = "huggingface,gemini"

    # Outbound calls
    PROVIDER_TIMEOUT_SECONDS: float = 60.0
    ASR_MAX_ATTEMPTS: int = 5
    ASR_MAX_TOTAL_WAIT_SECONDS: float = 120.0

    # Uploads
    MAX_UPLOAD_BYTES: int = 50 * 1024 * 1024

    @property
    def has_huggingface(self) -> bool:
        return bool(self.HUGGINGFACE_API_KEY)

    @property
    def has_gemini(self) -> bool:
        return bool(self.GEMINI_API_KEY)

    @property
    def provider_order(self) -> list[str]:
        return [p.strip().lower() for p in self.SUMMARY_PROVIDER_ORDER.split(",") if p.strip()]

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()


def get_settings() -> Settings:
    """Dependency accessor; tests override this to inject credentials."""
    return settings
