"""Meeting pipeline coordinating transcription, generation, and rendering."""

from __future__ import annotations

import asyncio
import contextlib
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Callable, Dict, List, Optional

from ...config import Settings
from ...data.models import (
    PipelineStage,
    ProgressEvent,
    RenderedDocument,
    StoredUpload,
    StructuredMinutes,
    Transcript,
)
from ...data.storage import DocumentStore, UploadValidationError
from ...logging import get_logger
from ...services.factory import resolve_notes_backend, resolve_transcription_backend
from ...services.notes.minutes import MinutesGenerator
from ...services.prompts import (
    build_diarized_text,
    build_record_prompt,
    build_summary_prompt,
    resolve_language,
)
from ...services.transcription.base import TranscriptionProvider
from ..render.base import RenderError, RenderTimeoutError
from ..render.pdf import render_pdf

LOGGER = get_logger(__name__)

Renderer = Callable[[str, str, datetime, float], bytes]

PROCESSING_FAILED = "Failed to process the audio"
RENDER_TIMED_OUT = "Rendering the PDF timed out"


class MeetingPipeline:
    """Runs one upload through transcription, minutes, summary and PDF rendering.

    Stages run strictly in sequence. The upload is deleted on every exit path
    before the terminal event is emitted.
    """

    def __init__(
        self,
        settings: Settings,
        transcription: TranscriptionProvider,
        generator: MinutesGenerator,
        documents: DocumentStore,
        renderer: Optional[Renderer] = None,
    ) -> None:
        self.settings = settings
        self.transcription = transcription
        self.generator = generator
        self.documents = documents
        self.renderer = renderer or render_pdf
        # A timed-out render keeps its worker until it returns; only this pool is held up.
        self._render_executor = ThreadPoolExecutor(
            max_workers=settings.render_workers, thread_name_prefix="minutai-render"
        )
        self.language = resolve_language(settings.language)

    @property
    def model(self) -> str:
        return self.generator.model

    @staticmethod
    def validate_upload(upload: Optional[StoredUpload]) -> StoredUpload:
        if upload is None or not upload.path.is_file():
            raise UploadValidationError("No file was received")
        return upload

    async def run(self, upload: StoredUpload) -> AsyncIterator[ProgressEvent]:
        stage = PipelineStage.RECEIVED
        try:
            self.validate_upload(upload)

            stage = PipelineStage.TRANSCRIBING
            yield ProgressEvent.progress(stage, "Transcribing and diarizing audio")
            transcript = await self._transcribe(upload)
            diarized_text = build_diarized_text(transcript)

            stage = PipelineStage.GENERATING_RECORD
            yield ProgressEvent.progress(
                stage,
                f"Transcript ready ({transcript.utterance_count} utterances); generating structured minutes",
            )
            minutes = await self.generator.generate_record(
                build_record_prompt(diarized_text, self.language)
            )

            stage = PipelineStage.GENERATING_SUMMARY
            yield ProgressEvent.progress(stage, "Writing executive summary")
            summary = await self.generator.generate_summary(
                build_summary_prompt(diarized_text, self.language)
            )

            stage = PipelineStage.RENDERING
            yield ProgressEvent.progress(stage, "Rendering PDF")
            document = await self._render(summary, self.documents.name_for_upload(upload))

            stage = PipelineStage.COMPLETE
            terminal = ProgressEvent.complete(
                self._result_payload(transcript, diarized_text, minutes, summary, document)
            )
            LOGGER.info("Pipeline finished for %s -> %s", upload.original_name, document.name)
        except UploadValidationError as exc:
            terminal = ProgressEvent.error(stage, str(exc), str(exc))
        except RenderTimeoutError as exc:
            LOGGER.error("Rendering timed out for %s: %s", upload.original_name, exc)
            terminal = ProgressEvent.error(stage, RENDER_TIMED_OUT, str(exc))
        except Exception as exc:
            LOGGER.exception("Pipeline failed during %s", stage.value)
            terminal = ProgressEvent.error(stage, PROCESSING_FAILED, str(exc) or type(exc).__name__)
        finally:
            self._discard_upload(upload)
        yield terminal

    async def process(self, upload: StoredUpload) -> List[ProgressEvent]:
        """Run the pipeline and collect every event."""

        return [event async for event in self.run(upload)]

    async def regenerate(self, markdown: str) -> RenderedDocument:
        """Render edited markdown into a new document without touching the providers."""

        if not markdown or not markdown.strip():
            raise UploadValidationError("Markdown content is required")
        return await self._render(markdown, self.documents.name_for_edit())

    async def _transcribe(self, upload: StoredUpload) -> Transcript:
        try:
            transcript = await self.transcription.transcribe(upload, self.language)
        except Exception as exc:
            LOGGER.warning("Transcription failed; continuing with an empty transcript: %s", exc)
            return Transcript()
        if transcript.is_empty:
            LOGGER.warning("Transcription of %s returned no text", upload.original_name)
        return transcript

    async def _render(self, markdown: str, name: str) -> RenderedDocument:
        timeout = self.settings.render_timeout_seconds
        generated_at = datetime.now(timezone.utc)
        try:
            data = await asyncio.wait_for(
                asyncio.get_running_loop().run_in_executor(
                    self._render_executor,
                    self.renderer,
                    markdown,
                    self.settings.document_title,
                    generated_at,
                    self.settings.page_margin,
                ),
                timeout=timeout,
            )
        except asyncio.TimeoutError as exc:
            raise RenderTimeoutError(f"PDF rendering exceeded {timeout:g}s") from exc
        except Exception as exc:
            raise RenderError(f"PDF rendering failed: {exc}") from exc
        try:
            return self.documents.write(name, data)
        except OSError as exc:
            raise RenderError(f"Could not store the PDF: {exc}") from exc

    def _result_payload(
        self,
        transcript: Transcript,
        diarized_text: str,
        minutes: StructuredMinutes,
        summary: str,
        document: RenderedDocument,
    ) -> Dict[str, Any]:
        return {
            "model": self.model,
            "minutes": minutes,
            "summary_markdown": summary,
            "pdf_url": document.locator,
            "speakers": transcript.speaker_labels,
            "utterance_count": transcript.utterance_count,
            "diarization": {
                "transcript": transcript.full_text,
                "diarized_text": diarized_text,
                "utterances_count": transcript.utterance_count,
                "utterances": [
                    {**utterance.model_dump(), "label": utterance.label}
                    for utterance in transcript.utterances
                ],
            },
        }

    def _discard_upload(self, upload: Optional[StoredUpload]) -> None:
        if upload is None:
            return
        with contextlib.suppress(OSError):
            upload.path.unlink()


def create_pipeline(settings: Settings) -> MeetingPipeline:
    """Build a pipeline with the backends selected in ``settings``."""

    settings.ensure_directories()
    return MeetingPipeline(
        settings=settings,
        transcription=resolve_transcription_backend(settings.transcription_backend, settings),
        generator=MinutesGenerator(resolve_notes_backend(settings.notes_backend, settings)),
        documents=DocumentStore(settings.documents_dir),
    )


__all__ = ["MeetingPipeline", "PROCESSING_FAILED", "RENDER_TIMED_OUT", "create_pipeline"]
