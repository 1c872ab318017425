from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_CATALOG_CSV_URL = (
    "https://docs.google.com/spreadsheets/d/"
    "1bUYDRHaBekQVFvcqp5kv4XRXZ6M1HuUmHu76LADAUV0/export?format=csv"
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
        env_prefix="ASTROBIO_"
    )

    # ------------------------------------------------------------------
    # Gemini / models
    # ------------------------------------------------------------------
    GEMINI_API_KEY: Optional[SecretStr] = Field(
        default=None,
        description=(
            "API key for the Gemini API. If unset, the plain GEMINI_API_KEY "
            "environment variable is used instead."
        ),
    )

    GEMINI_MODEL: str = Field(
        default="gemini-2.0-flash",
        description="Model used for PDF keyword and citation extraction.",
    )

    GEMINI_FEATURE_MODEL: str = Field(
        default="gemini-2.5-flash",
        description="Model used for URL-based paper features (summary, quiz, ...).",
    )

    GEMINI_TEMPERATURE: float = Field(
        default=0.2,
        description="Sampling temperature for all model calls.",
    )

    GEMINI_TIMEOUT_SECONDS: float = Field(
        default=120.0,
        description="HTTP timeout for a single model call.",
    )

    # ------------------------------------------------------------------
    # Paper catalog
    # ------------------------------------------------------------------
    CATALOG_CSV_URL: str = Field(
        default=DEFAULT_CATALOG_CSV_URL,
        description="CSV export URL of the paper catalog spreadsheet.",
    )

    CATALOG_CSV_PATH: Optional[Path] = Field(
        default=None,
        description="Local catalog CSV. Takes precedence over CATALOG_CSV_URL.",
    )

    CATALOG_TIMEOUT_SECONDS: float = Field(
        default=30.0,
        description="HTTP timeout when fetching the catalog CSV.",
    )

    # ------------------------------------------------------------------
    # Cross-reference analysis
    # ------------------------------------------------------------------
    MAX_UPLOAD_BYTES: int = Field(
        default=50 * 1024 * 1024,
        description="Largest accepted upload, in bytes.",
    )

    RELATED_PAPERS_LIMIT: int = Field(
        default=10,
        description="How many ranked related papers are kept in a result.",
    )

    CITATION_CANDIDATE_LIMIT: int = Field(
        default=5,
        description=(
            "How many of the top related papers get a citation-extraction "
            "call. Bounds the number of model calls per upload."
        ),
    )

    CITATION_CALLS_PER_SECOND: float = Field(
        default=1.0,
        description="Sustained rate of citation-extraction calls.",
    )

    CITATION_BURST: int = Field(
        default=1,
        description="Token bucket capacity for citation-extraction calls.",
    )

    CITATION_BACKOFF_SECONDS: float = Field(
        default=5.0,
        description="Extra pause imposed after the model answers HTTP 429.",
    )

    # ------------------------------------------------------------------
    # HTTP API
    # ------------------------------------------------------------------
    API_KEY: Optional[SecretStr] = Field(
        default=None,
        description="API key for header-based auth. If None, auth is disabled.",
    )

    RATE_LIMIT_MAX_REQUESTS: int = Field(
        default=30,
        description="Requests per client per window on AI endpoints.",
    )

    RATE_LIMIT_WINDOW_SECONDS: float = Field(
        default=60.0,
        description="Length of the fixed rate-limit window.",
    )

    @property
    def gemini_api_key(self) -> Optional[str]:
        """
        Resolved Gemini key: prefixed setting first, then GEMINI_API_KEY.
        """
        if self.GEMINI_API_KEY is not None:
            return self.GEMINI_API_KEY.get_secret_value()
        return os.getenv("GEMINI_API_KEY")


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Singleton-style accessor so we only construct Settings once.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


settings = get_settings()
