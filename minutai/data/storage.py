"""Filesystem storage for uploaded audio and generated documents."""

from __future__ import annotations

import mimetypes
import re
import shutil
import time
import uuid
from pathlib import Path
from typing import Optional, Protocol
from urllib.parse import quote

from .models import RenderedDocument, StoredUpload

DOWNLOAD_PREFIX = "/download/"
UPLOAD_CHUNK_BYTES = 1024 * 1024
DEFAULT_AUDIO_MIME = "audio/mpeg"


class UploadValidationError(ValueError):
    """Raised when a request is rejected before the pipeline starts."""


class UploadTooLargeError(UploadValidationError):
    """Raised when an upload exceeds the configured size limit."""


class AsyncReadable(Protocol):
    async def read(self, size: int = -1) -> bytes:  # pragma: no cover - protocol
        ...


def _timestamp() -> str:
    return str(time.time_ns() // 1_000_000)


def _unique_suffix() -> str:
    return uuid.uuid4().hex[:6]


def _safe_name(name: str) -> str:
    base = Path(name or "audio").name
    return re.sub(r"\s+", "_", base) or "audio"


def guess_mime_type(path: Path) -> str:
    mime_type, _ = mimetypes.guess_type(str(path))
    return mime_type or DEFAULT_AUDIO_MIME


class UploadStore:
    """Writes each upload under a unique, time-prefixed name."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def new_path(self, original_name: str) -> Path:
        return self.directory / f"{_timestamp()}-{_unique_suffix()}-{_safe_name(original_name)}"

    async def save(self, source: AsyncReadable, original_name: str, max_bytes: int) -> StoredUpload:
        if not original_name:
            raise UploadValidationError("No file was received")
        path = self.new_path(original_name)
        written = 0
        handle = open(path, "xb")
        try:
            with handle:
                while True:
                    chunk = await source.read(UPLOAD_CHUNK_BYTES)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > max_bytes:
                        raise UploadTooLargeError(
                            f"File exceeds the {max_bytes // (1024 * 1024)} MB limit"
                        )
                    handle.write(chunk)
        except BaseException:
            path.unlink(missing_ok=True)
            raise
        if written == 0:
            path.unlink(missing_ok=True)
            raise UploadValidationError("The uploaded file is empty")
        return StoredUpload(path=path, original_name=original_name, mime_type=guess_mime_type(path))

    def import_file(self, source: Path, max_bytes: int) -> StoredUpload:
        """Copy a local file into the upload area so the pipeline owns the copy."""

        source = Path(source)
        if not source.is_file():
            raise UploadValidationError(f"Audio file not found: {source}")
        if source.stat().st_size > max_bytes:
            raise UploadTooLargeError(f"File exceeds the {max_bytes // (1024 * 1024)} MB limit")
        path = self.new_path(source.name)
        with open(source, "rb") as reader, open(path, "xb") as writer:
            shutil.copyfileobj(reader, writer)
        return StoredUpload(path=path, original_name=source.name, mime_type=guess_mime_type(path))


class DocumentStore:
    """Write-once PDF storage addressed by download locators."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def locator(name: str) -> str:
        return f"{DOWNLOAD_PREFIX}{quote(name)}"

    def name_for_upload(self, upload: StoredUpload) -> str:
        return f"{upload.path.name}.pdf"

    def name_for_edit(self) -> str:
        return f"{_timestamp()}-edited-{_unique_suffix()}.pdf"

    def write(self, name: str, data: bytes) -> RenderedDocument:
        path = self.directory / _safe_name(name)
        with open(path, "xb") as handle:
            handle.write(data)
        return RenderedDocument(name=path.name, path=path, locator=self.locator(path.name))

    def resolve(self, name: str) -> Optional[Path]:
        if not name or name != Path(name).name or name in {".", ".."}:
            return None
        path = self.directory / name
        if not path.is_file():
            return None
        return path


__all__ = [
    "DocumentStore",
    "UploadStore",
    "UploadTooLargeError",
    "UploadValidationError",
    "guess_mime_type",
]
