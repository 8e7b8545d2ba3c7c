"""Error taxonomy shared by strategies, the pipeline and the HTTP layer."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from fastapi import status


class AppBaseException(Exception):
    """Domain-level base exception so we can map to JSON responses easily."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, error: str, details: Optional[str] = None) -> None:
        super().__init__(error if details is None else f"{error}: {details}")
        self.error = error
        self.details = details

    def to_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.error}
        if self.details is not None:
            body["details"] = self.details
        return body


class InvalidInput(AppBaseException):
    """Missing file/field or a value outside an allow-list."""

    status_code = status.HTTP_400_BAD_REQUEST


class UploadTooLarge(AppBaseException):
    status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE


class ConversionFailed(AppBaseException):
    """The engine, codec or external process could not produce a result."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class CleanupFailed(Exception):
    """Removal of a staged path failed.  Logged, never sent to the client."""

    def __init__(self, path: Path, reason: BaseException) -> None:
        super().__init__(f"Could not remove {path}: {reason}")
        self.path = path
        self.reason = reason
