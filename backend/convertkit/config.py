"""Application-wide configuration loader.

Every knob the pipeline needs (staging location, upload ceiling, external
binaries, process timeout) lives on a single :class:`Settings` object.  The
application factory receives one explicitly and threads it through the
storage manager, the strategies and the pipeline controller, so nothing
downstream reads the environment on its own.
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path


def _env(key: str, default: str) -> str:
    # Empty values injected by docker-compose (``KEY=""``) must not override
    # the in-code default, hence ``or`` rather than ``getenv(key, default)``.
    return os.getenv(key) or default


def _default_staging_dir() -> Path:
    return Path(_env("STAGING_DIR", os.path.join(tempfile.gettempdir(), "convertkit-uploads")))


def _default_cors_origins() -> list[str]:
    raw = _env("CORS_ORIGINS", "http://localhost:5173")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@dataclass
class Settings:
    """Settings helper that gracefully falls back to sane defaults.

    Values are read when an instance is created, so tests can build their
    own ``Settings(STAGING_DIR=tmp_path)`` without touching the environment.
    """

    STAGING_DIR: Path = field(default_factory=_default_staging_dir)
    MAX_UPLOAD_SIZE_MB: int = field(default_factory=lambda: int(_env("MAX_UPLOAD_SIZE_MB", "25")))
    FFMPEG_PATH: str = field(default_factory=lambda: _env("FFMPEG_PATH", "ffmpeg"))
    SOFFICE_PATH: str = field(default_factory=lambda: _env("SOFFICE_PATH", "soffice"))
    # 0 disables the timeout and lets a hung child block the request forever.
    PROCESS_TIMEOUT_SECONDS: float = field(
        default_factory=lambda: float(_env("PROCESS_TIMEOUT_SECONDS", "300"))
    )
    CORS_ORIGINS: list[str] = field(default_factory=_default_cors_origins)
    LOG_DIR: str = field(default_factory=lambda: _env("LOG_DIR", "backend/logs"))
    LOG_LEVEL: str = field(default_factory=lambda: _env("LOG_LEVEL", "INFO"))

    def __post_init__(self) -> None:
        self.STAGING_DIR = Path(self.STAGING_DIR)

    @property
    def max_upload_size_bytes(self) -> int:
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    @property
    def process_timeout(self) -> float | None:
        return self.PROCESS_TIMEOUT_SECONDS or None


settings = Settings()
