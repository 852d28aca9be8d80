"""Typer CLI entry point for MinutAI."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer

from .config import Settings, get_settings, list_environment_settings
from .core.pipeline.orchestrator import MeetingPipeline, create_pipeline
from .core.render.base import RenderError
from .data.models import ProgressEvent
from .data.storage import UploadStore, UploadValidationError
from .logging import configure_logging, get_logger
from .services.factory import ServiceConfigurationError

app = typer.Typer(help="MinutAI meeting minutes pipeline")
LOGGER = get_logger(__name__)


def _settings_with_overrides(
    language: Optional[str] = None,
    transcription_backend: Optional[str] = None,
    notes_backend: Optional[str] = None,
) -> Settings:
    settings = get_settings()
    overrides = {
        key: value
        for key, value in {
            "language": language,
            "transcription_backend": transcription_backend,
            "notes_backend": notes_backend,
        }.items()
        if value is not None
    }
    if not overrides:
        return settings
    return Settings(**{**settings.model_dump(), **overrides})


def _build_pipeline(settings: Settings) -> MeetingPipeline:
    try:
        return create_pipeline(settings)
    except (ServiceConfigurationError, RuntimeError) as exc:
        raise typer.BadParameter(str(exc)) from exc


def _echo_event(event: ProgressEvent) -> None:
    if event.kind == "progress":
        typer.echo(f"[{event.payload['stage']}] {event.payload['message']}")
    elif event.kind == "error":
        typer.echo(f"Error: {event.payload['message']} ({event.payload['details']})", err=True)
    else:
        typer.echo(json.dumps(event.payload, ensure_ascii=False, indent=2))


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, help="Bind address"),
    port: Optional[int] = typer.Option(None, help="Port to listen on"),
) -> None:
    """Start the HTTP server."""

    configure_logging()
    import uvicorn

    from .api import create_app

    settings = get_settings()
    application = create_app(settings, _build_pipeline(settings))
    bind_host = host or settings.host
    bind_port = port or settings.port
    LOGGER.info("MinutAI listening on http://%s:%s (model %s)", bind_host, bind_port, application.state.pipeline.model)
    uvicorn.run(application, host=bind_host, port=bind_port)


@app.command()
def process(
    audio: Path = typer.Argument(..., help="Path to the meeting recording"),
    language: Optional[str] = typer.Option(None, help="Transcription language: es/en/pt/fr/de/it"),
    transcription_backend: Optional[str] = typer.Option(None, help="Transcription backend: deepgram/dummy"),
    notes_backend: Optional[str] = typer.Option(None, help="Notes backend: openai/dummy"),
) -> None:
    """Run the full pipeline on a local audio file."""

    configure_logging()
    settings = _settings_with_overrides(language, transcription_backend, notes_backend)
    pipeline = _build_pipeline(settings)
    try:
        upload = UploadStore(settings.upload_dir).import_file(audio, settings.max_upload_bytes)
    except UploadValidationError as exc:
        raise typer.BadParameter(str(exc)) from exc

    for event in asyncio.run(pipeline.process(upload)):
        _echo_event(event)
        if event.is_terminal and event.kind == "error":
            raise typer.Exit(code=1)


@app.command()
def render(markdown_file: Path = typer.Argument(..., help="Markdown summary to render")) -> None:
    """Render an edited markdown summary into a new PDF."""

    configure_logging()
    settings = _settings_with_overrides(transcription_backend="dummy", notes_backend="dummy")
    pipeline = _build_pipeline(settings)
    if not markdown_file.is_file():
        raise typer.BadParameter(f"Markdown file not found: {markdown_file}")
    try:
        document = asyncio.run(pipeline.regenerate(markdown_file.read_text(encoding="utf-8")))
    except UploadValidationError as exc:
        raise typer.BadParameter(str(exc)) from exc
    except RenderError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(f"PDF written to {document.path}")


@app.command("settings")
def show_settings() -> None:
    """List configuration options and their environment variable names."""

    configure_logging()
    for entry in list_environment_settings():
        value = "***" if "api_key" in entry.field and entry.value else entry.value
        typer.echo(f"{entry.env_name:<40} {value}")


if __name__ == "__main__":  # pragma: no cover
    app()
