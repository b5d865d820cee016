"""docmap settings.

Loaded from environment variables (prefix ``DOCMAP_``) or a ``.env`` file:

- DOCMAP_CSV_SEPARATOR: field separator for table exports (default: ",")
- DOCMAP_EXPORT_DIR: where exported files are written (default: system temp dir)
- DOCMAP_PREVIEW_ROWS: rows shown in UI previews (default: 3)
- DOCMAP_LOG_LEVEL: logging level (default: "INFO")
- DOCMAP_SERVER_NAME / DOCMAP_SERVER_PORT: Gradio bind address (default: 127.0.0.1:7860)
"""
from __future__ import annotations

import tempfile
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix='DOCMAP_', env_file='.env', extra='ignore')

    csv_separator: str = Field(default=',', description="Field separator for table exports")
    export_dir: str = Field(default_factory=tempfile.gettempdir, description="Directory for exported files")
    preview_rows: int = Field(default=3, ge=1, description="Rows shown in previews")
    log_level: str = Field(default='INFO', description="Logging level")
    server_name: str = Field(default='127.0.0.1', description="Gradio bind host")
    server_port: int = Field(default=7860, ge=1, le=65535, description="Gradio bind port")

    @field_validator('csv_separator')
    @classmethod
    def _check_separator(cls, value: str) -> str:
        if not value:
            raise ValueError("csv_separator must not be empty")
        if '\n' in value or '"' in value:
            raise ValueError("csv_separator must not contain a newline or a double quote")
        return value

    @field_validator('log_level')
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {'CRITICAL', 'ERROR', 'WARNING', 'INFO', 'DEBUG'}:
            raise ValueError(f"unknown log level: {value}")
        return level


@lru_cache()
def get_settings() -> Settings:
    return Settings()
