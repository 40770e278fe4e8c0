"""This module defines the configuration management for the application.

It uses Pydantic's BaseSettings to create a strongly-typed configuration
class that reads from environment variables and .env files. This ensures
all required configuration is present and valid at startup.
"""

from pathlib import Path

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

FAILED_JSON_DUMP_FILE_NAME = "failed-json-dump.txt"
CHAT_TRACE_LOG_FILE_NAME = "chat-trace.log"


class Config(BaseSettings):
    """A Pydantic model for managing application settings.

    It automatically loads configuration from environment variables and .env files.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    LOG_LEVEL: str = "INFO"

    POSTGRES_DRIVER: str = "postgresql"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: str = "5432"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "licitasaas"
    POSTGRES_DB_SCHEMA: str | None = None

    JWT_SECRET: str = "change-me"
    JWT_ALGORITHM: str = "HS256"

    GEMINI_API_KEY: str | None = None
    GEMINI_MODELS: list[str] = ["gemini-2.5-flash"]
    GEMINI_MAX_RETRIES_PER_MODEL: int = 4
    GEMINI_BACKOFF_STEP_SECONDS: float = 3.0
    GEMINI_BACKOFF_MAX_SECONDS: float = 15.0

    GEMINI_ANALYSIS_TEMPERATURE: float = 0.1
    GEMINI_ANALYSIS_MAX_OUTPUT_TOKENS: int = 16384
    GEMINI_CHAT_TEMPERATURE: float = 0.35
    GEMINI_CHAT_MAX_OUTPUT_TOKENS: int = 32768

    STORAGE_TYPE: str = "LOCAL"
    UPLOAD_DIR: Path = Path("uploads")
    GCP_GCS_HOST: str | None = None
    GCP_GCS_BUCKET_UPLOADS: str = "licitasaas-uploads"

    FAILED_JSON_DUMP_PATH: Path | None = None
    CHAT_TRACE_LOG_PATH: Path | None = None

    @model_validator(mode="after")
    def set_derived_diagnostic_paths(self) -> "Config":
        """Places the diagnostic artifacts inside the upload directory.

        Explicit values set through the environment are left untouched.

        Returns:
            The modified Config object.
        """
        if self.FAILED_JSON_DUMP_PATH is None:
            self.FAILED_JSON_DUMP_PATH = self.UPLOAD_DIR / FAILED_JSON_DUMP_FILE_NAME

        if self.CHAT_TRACE_LOG_PATH is None:
            self.CHAT_TRACE_LOG_PATH = self.UPLOAD_DIR / CHAT_TRACE_LOG_FILE_NAME

        return self


class ConfigProvider:
    """A provider class that acts as a factory for the application's configuration.

    It does not hold state but provides a method to create fresh config instances.
    """

    @staticmethod
    def get_config() -> Config:
        """Factory method that instantiates and returns a new Config object.

        Calling this function will always create a new instance of the Config model,
        which forces Pydantic to reload and re-validate all settings from the
        current environment variables.

        Returns:
            A new, validated Config object.
        """
        return Config()
