"""FastAPI application exposing processing, regeneration, and downloads."""

from __future__ import annotations

from typing import AsyncIterator, Optional

from fastapi import FastAPI, File, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, StreamingResponse
from pydantic import BaseModel

from ..config import Settings, get_settings
from ..core.pipeline.orchestrator import MeetingPipeline, create_pipeline
from ..core.render.base import RenderError, RenderTimeoutError
from ..data.models import StoredUpload
from ..data.storage import UploadStore, UploadTooLargeError, UploadValidationError
from ..logging import get_logger

LOGGER = get_logger(__name__)


class RegenerateRequest(BaseModel):
    markdown: Optional[str] = None


def _error_response(status_code: int, message: str, details: Optional[str] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": message, "details": details or message},
    )


def create_app(
    settings: Optional[Settings] = None,
    pipeline: Optional[MeetingPipeline] = None,
) -> FastAPI:
    settings = settings or get_settings()
    pipeline = pipeline or create_pipeline(settings)
    uploads = UploadStore(settings.upload_dir)

    app = FastAPI(title="MinutAI")
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
    app.state.settings = settings
    app.state.pipeline = pipeline

    async def _event_stream(upload: StoredUpload) -> AsyncIterator[str]:
        events = pipeline.run(upload)
        try:
            async for event in events:
                yield event.to_sse()
        finally:
            await events.aclose()

    @app.post("/api/process")
    async def process(file: Optional[UploadFile] = File(None)):
        if file is None or not file.filename:
            return _error_response(400, "No file was received")
        limit = settings.max_upload_bytes
        if file.size is not None and file.size > limit:
            await file.close()
            return _error_response(413, "File too large", f"Maximum upload size is {limit} bytes")
        try:
            stored = await uploads.save(file, file.filename, limit)
        except UploadTooLargeError as exc:
            return _error_response(413, "File too large", str(exc))
        except UploadValidationError as exc:
            return _error_response(400, str(exc))
        finally:
            await file.close()

        LOGGER.info("Processing upload %s (%s)", stored.original_name, stored.mime_type)
        return StreamingResponse(
            _event_stream(stored),
            media_type="text/event-stream",
            headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
        )

    @app.post("/api/regenerate")
    async def regenerate(payload: RegenerateRequest):
        try:
            document = await pipeline.regenerate(payload.markdown or "")
        except UploadValidationError as exc:
            return _error_response(400, str(exc))
        except RenderTimeoutError as exc:
            return _error_response(504, "Rendering the PDF timed out", str(exc))
        except RenderError as exc:
            LOGGER.exception("Regeneration failed")
            return _error_response(500, "Failed to render the PDF", str(exc))
        except Exception as exc:
            LOGGER.exception("Regeneration failed unexpectedly")
            return _error_response(500, "Failed to render the PDF", str(exc) or type(exc).__name__)
        return {"pdf_url": document.locator, "name": document.name}

    @app.get("/download/{name}")
    async def download(name: str):
        path = pipeline.documents.resolve(name)
        if path is None:
            return _error_response(404, "Not found")
        return FileResponse(path, media_type="application/pdf", filename=path.name)

    @app.get("/api/health")
    async def health():
        return {"ok": True, "model": pipeline.model}

    return app


__all__ = ["RegenerateRequest", "create_app"]
