"""Global configuration using Pydantic settings."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LanguageCode = Literal["es", "en", "pt", "fr", "de", "it"]

MAX_UPLOAD_BYTES = 100 * 1024 * 1024
RENDER_TIMEOUT_SECONDS = 30.0


class Settings(BaseSettings):
    """Application wide settings loaded from environment variables."""

    upload_dir: Path = Field(default_factory=lambda: Path("uploads"))
    documents_dir: Path = Field(default_factory=lambda: Path("documents"))
    language: LanguageCode = "es"
    transcription_backend: str = "deepgram"
    notes_backend: str = "openai"
    deepgram_api_key: Optional[str] = None
    deepgram_url: str = "https://api.deepgram.com/v1/listen"
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4.1-mini"
    openai_api_style: Literal["responses", "chat"] = "responses"
    max_upload_bytes: int = MAX_UPLOAD_BYTES
    render_timeout_seconds: float = RENDER_TIMEOUT_SECONDS
    render_workers: int = 2
    transcription_timeout_seconds: float = 600.0
    generation_timeout_seconds: float = 180.0
    document_title: str = "Executive minutes"
    page_margin: float = 50.0
    host: str = "0.0.0.0"
    port: int = 10000

    model_config = SettingsConfigDict(
        env_prefix="MINUTAI_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    def ensure_directories(self) -> None:
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        self.documents_dir.mkdir(parents=True, exist_ok=True)


_settings: Optional[Settings] = None


_MODEL_CONFIG: Dict[str, Any] = dict(Settings.model_config or {})
_ENV_PREFIX: str = (_MODEL_CONFIG.get("env_prefix") or "").upper()
_CASE_SENSITIVE: bool = bool(_MODEL_CONFIG.get("case_sensitive", True))


@dataclass
class EnvironmentSetting:
    """Metadata about a configuration option backed by an environment variable."""

    field: str
    env_name: str
    value: Any
    default: Any
    annotation: Any


def _env_key(field: str) -> str:
    key = f"{_ENV_PREFIX}{field}" if _ENV_PREFIX else field
    return key if _CASE_SENSITIVE else key.upper()


def _field_default(field_info) -> Any:
    if field_info.is_required():
        return None
    return field_info.get_default(call_default_factory=True)


def list_environment_settings(settings: Optional[Settings] = None) -> Iterable[EnvironmentSetting]:
    """Return metadata for all environment-backed settings."""

    settings = settings or get_settings()
    for name, field in Settings.model_fields.items():
        yield EnvironmentSetting(
            field=name,
            env_name=_env_key(name),
            value=getattr(settings, name),
            default=_field_default(field),
            annotation=field.annotation,
        )


def get_settings() -> Settings:
    """Return a singleton instance of the application settings."""

    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


__all__ = [
    "EnvironmentSetting",
    "LanguageCode",
    "MAX_UPLOAD_BYTES",
    "RENDER_TIMEOUT_SECONDS",
    "Settings",
    "get_settings",
    "list_environment_settings",
]
