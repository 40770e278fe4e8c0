"""This module contains shared fixtures for all unit tests."""

from pathlib import Path

import pytest
from pytest import MonkeyPatch

ISOLATED_VARIABLES = (
    "GEMINI_API_KEY",
    "GEMINI_MODELS",
    "GEMINI_MAX_RETRIES_PER_MODEL",
    "STORAGE_TYPE",
    "UPLOAD_DIR",
    "JWT_SECRET",
    "JWT_ALGORITHM",
    "FAILED_JSON_DUMP_PATH",
    "CHAT_TRACE_LOG_PATH",
    "POSTGRES_DB_SCHEMA",
)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: MonkeyPatch, tmp_path: Path) -> None:
    """Runs every unit test with default settings inside a scratch directory.

    No API key or bucket name leaks in from the developer shell, and the
    relative `uploads` directory and `.env` lookup resolve under `tmp_path`.
    """
    for variable in ISOLATED_VARIABLES:
        monkeypatch.delenv(variable, raising=False)
    monkeypatch.chdir(tmp_path)
