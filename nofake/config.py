from functools import lru_cache

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "NoFake"
    log_level: str = "INFO"
    cors_origins: str = "*"

    oracle_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("google_generative_ai_api_key", "oracle_api_key"),
    )
    oracle_model: str = "gemini-1.5-flash"
    oracle_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    oracle_timeout_seconds: float = 30.0
    oracle_temperature: float = 0.4
    oracle_max_output_tokens: int = 2048

    verify_citation_urls: bool = False
    url_check_timeout_seconds: float = 4.0

    @field_validator("oracle_api_key", "oracle_model", mode="before")
    @classmethod
    def _strip(cls, value: object) -> str:
        return str(value or "").strip()

    @field_validator("oracle_base_url", mode="before")
    @classmethod
    def _normalize_base_url(cls, value: object) -> str:
        raw = str(value or "").strip().rstrip("/")
        return raw or "https://generativelanguage.googleapis.com/v1beta"

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: object) -> str:
        level = str(value or "INFO").strip().upper()
        if level in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            return level
        return "INFO"

    @property
    def oracle_configured(self) -> bool:
        return bool(self.oracle_api_key)

    @property
    def cors_origins_list(self) -> list[str]:
        raw = (self.cors_origins or "").strip()
        if not raw or raw == "*":
            return ["*"]
        return [origin.strip() for origin in raw.split(",") if origin.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
