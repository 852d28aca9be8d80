from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from minutai.config import MAX_UPLOAD_BYTES, Settings, list_environment_settings


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MINUTAI_LANGUAGE", raising=False)
    settings = Settings(_env_file=None)

    assert settings.language == "es"
    assert settings.max_upload_bytes == MAX_UPLOAD_BYTES == 100 * 1024 * 1024
    assert settings.render_timeout_seconds == 30.0
    assert settings.port == 10000


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("MINUTAI_LANGUAGE", "fr")
    monkeypatch.setenv("MINUTAI_UPLOAD_DIR", str(tmp_path / "incoming"))

    settings = Settings(_env_file=None)

    assert settings.language == "fr"
    assert settings.upload_dir == tmp_path / "incoming"


def test_unsupported_language_is_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, language="ja")


def test_environment_settings_listing(tmp_path: Path) -> None:
    settings = Settings(_env_file=None, upload_dir=tmp_path, openai_model="gpt-test")

    entries = {entry.field: entry for entry in list_environment_settings(settings)}

    assert entries["openai_model"].env_name == "MINUTAI_OPENAI_MODEL"
    assert entries["openai_model"].value == "gpt-test"
    assert entries["openai_model"].default == "gpt-4.1-mini"
    assert entries["upload_dir"].default == Path("uploads")
    assert entries["documents_dir"].default == Path("documents")
    assert entries["deepgram_api_key"].default is None
