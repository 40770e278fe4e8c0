"""
Unit tests for the ConfigProvider.
"""

from pathlib import Path
from unittest.mock import patch

from licitasaas.providers.config import Config, ConfigProvider
from pytest import MonkeyPatch


def test_get_config_returns_config_instance() -> None:
    """
    Tests that get_config returns an instance of Config.
    """
    with patch("licitasaas.providers.config.Config") as mock_config_constructor:
        config = ConfigProvider.get_config()
        mock_config_constructor.assert_called_once()
        assert config is not None


def test_defaults_follow_the_pipeline_settings() -> None:
    """Tests the default retry and generation settings."""
    config = Config()

    assert config.GEMINI_API_KEY is None
    assert config.GEMINI_MAX_RETRIES_PER_MODEL == 4
    assert config.GEMINI_BACKOFF_STEP_SECONDS == 3.0
    assert config.GEMINI_BACKOFF_MAX_SECONDS == 15.0
    assert config.GEMINI_ANALYSIS_TEMPERATURE == 0.1
    assert config.GEMINI_CHAT_TEMPERATURE == 0.35
    assert config.STORAGE_TYPE == "LOCAL"


def test_diagnostic_paths_are_derived_from_upload_dir(monkeypatch: MonkeyPatch, tmp_path: Path) -> None:
    """Tests that the dump and trace files default to the upload directory."""
    monkeypatch.setenv("UPLOAD_DIR", str(tmp_path))

    config = Config()

    assert config.FAILED_JSON_DUMP_PATH == tmp_path / "failed-json-dump.txt"
    assert config.CHAT_TRACE_LOG_PATH == tmp_path / "chat-trace.log"


def test_explicit_diagnostic_path_is_kept(monkeypatch: MonkeyPatch, tmp_path: Path) -> None:
    """Tests that an explicit dump path is not overridden."""
    monkeypatch.setenv("FAILED_JSON_DUMP_PATH", str(tmp_path / "elsewhere.txt"))

    config = Config()

    assert config.FAILED_JSON_DUMP_PATH == tmp_path / "elsewhere.txt"
    assert config.CHAT_TRACE_LOG_PATH == Path("uploads") / "chat-trace.log"


def test_model_plan_is_read_from_environment(monkeypatch: MonkeyPatch) -> None:
    """Tests that GEMINI_MODELS accepts a JSON list."""
    monkeypatch.setenv("GEMINI_MODELS", '["gemini-2.5-flash", "gemini-2.0-flash"]')

    config = Config()

    assert config.GEMINI_MODELS == ["gemini-2.5-flash", "gemini-2.0-flash"]
