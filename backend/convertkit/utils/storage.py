"""Staging-directory helpers.

All uploads and intermediate outputs of a request live in one shared staging
directory.  Names are random (``uuid4``) so concurrent requests never collide
and no locking is needed.
"""

from __future__ import annotations

import logging
import shutil
import uuid
from pathlib import Path

from fastapi import UploadFile

from ..exceptions import CleanupFailed, UploadTooLarge
from ..models.job import UploadedFile

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


def ensure_dir_exists(path: Path) -> Path:
    """Ensure that the given directory exists, creating it if necessary."""
    path.mkdir(parents=True, exist_ok=True)
    return path


class TemporaryStorage:
    """Allocates unique staging paths and removes them again."""

    def __init__(self, root: Path, max_upload_bytes: int) -> None:
        self.root = Path(root)
        self.max_upload_bytes = max_upload_bytes

    def _new_path(self, suffix: str = "") -> Path:
        ensure_dir_exists(self.root)
        return self.root / f"{uuid.uuid4().hex}{suffix}"

    async def stage(self, upload: UploadFile, suffix: str = "") -> UploadedFile:
        """Stream ``upload`` into a fresh staging file.

        Raises :class:`UploadTooLarge` as soon as the ceiling is crossed; the
        partially written file is removed before the error propagates.
        """
        file_path = self._new_path(suffix)
        bytes_written = 0
        logger.info("Staging upload '%s' to '%s'", upload.filename, file_path)
        try:
            with open(file_path, "wb") as f:
                while True:
                    chunk = await upload.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    bytes_written += len(chunk)
                    if self.max_upload_bytes and bytes_written > self.max_upload_bytes:
                        logger.warning(
                            "Upload '%s' exceeded max size of %d bytes",
                            upload.filename,
                            self.max_upload_bytes,
                        )
                        raise UploadTooLarge(
                            "File too large",
                            f"Uploads are limited to {self.max_upload_bytes // (1024 * 1024)} MB.",
                        )
                    f.write(chunk)
        except BaseException:
            self.release(file_path)
            raise

        logger.info("Staged '%s' (%d bytes) at '%s'", upload.filename, bytes_written, file_path)
        return UploadedFile(
            path=file_path,
            original_name=Path(upload.filename or "").name,
            content_type=upload.content_type,
            size=bytes_written,
        )

    def allocate_output_path(self, extension: str) -> Path:
        """Return an unused path for a strategy that writes its result to disk."""
        if extension and not extension.startswith("."):
            extension = f".{extension}"
        return self._new_path(extension)

    def allocate_directory(self, label: str = "") -> Path:
        path = self._new_path(f"-{label}" if label else "")
        path.mkdir()
        return path

    def _remove(self, path: Path) -> None:
        try:
            if path.is_dir():
                shutil.rmtree(path)
            else:
                path.unlink(missing_ok=True)
        except OSError as exc:
            raise CleanupFailed(path, exc) from exc

    def release(self, path: Path) -> None:
        """Best-effort removal of a staged file or directory.  Never raises."""
        try:
            self._remove(Path(path))
        except CleanupFailed as exc:
            logger.error("Failed to delete temp path %s: %s", exc.path, exc.reason)
        else:
            logger.debug("Released %s", path)
