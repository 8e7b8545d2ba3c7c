"""Shared fixtures: an app per test with its own staging directory."""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from convertkit.config import Settings
from convertkit.main import create_app


@pytest.fixture
def staging_dir(tmp_path: Path) -> Path:
    return tmp_path / "staging"


@pytest.fixture
def settings(staging_dir: Path, tmp_path: Path) -> Settings:
    return Settings(
        STAGING_DIR=staging_dir,
        MAX_UPLOAD_SIZE_MB=25,
        FFMPEG_PATH="ffmpeg",
        SOFFICE_PATH="soffice",
        PROCESS_TIMEOUT_SECONDS=30,
        LOG_DIR=str(tmp_path / "logs"),
    )


@pytest.fixture
def client(settings: Settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client
