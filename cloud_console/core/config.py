# cloud_console/core/config.py
"""
Central configuration for the Cloud Console mock API.

This module defines a single `settings` object (Pydantic BaseSettings) that reads
configuration from environment variables and a local `.env` file.

Nothing here is persisted: every resource lives in process memory, so the
settings only shape startup behavior (sample data, simulator ranges) and the
HTTP surface (CORS, body size guard).
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables and optional `.env`.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # -----------------------
    # Runtime
    # -----------------------
    ENV: str = Field(default="dev", description="Environment: dev|test|prod")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level (e.g., INFO, DEBUG)")

    # -----------------------
    # API / CORS
    # -----------------------
    CORS_ALLOW_ORIGINS: List[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://localhost:3000"],
        description="Allowed CORS origins for the dashboard frontend",
    )

    MAX_REQUEST_MB: int = Field(
        default=5,
        ge=1,
        le=100,
        description="Max request body size in megabytes",
    )

    @property
    def MAX_REQUEST_BYTES(self) -> int:
        """Derived request size limit in bytes."""
        return int(self.MAX_REQUEST_MB) * 1024 * 1024

    # -----------------------
    # Store
    # -----------------------
    SEED_SAMPLE_DATA: bool = Field(
        default=True,
        description="Load demo functions/collections/users when the app starts",
    )

    # -----------------------
    # Simulations
    # -----------------------
    ENDPOINT_TEST_MIN_MS: int = Field(default=100, ge=0, description="Lowest simulated response time (inclusive)")
    ENDPOINT_TEST_MAX_MS: int = Field(default=600, ge=1, description="Highest simulated response time (exclusive)")
    ENDPOINT_TEST_SEED: Optional[int] = Field(
        default=None,
        description="Seed for the endpoint test random source (unset = nondeterministic)",
    )
    QUERY_PREVIEW_LIMIT: int = Field(
        default=3,
        ge=1,
        le=100,
        description="How many documents the query stub returns",
    )

    # -----------------------
    # Validators / normalizers
    # -----------------------
    @field_validator("ENV")
    @classmethod
    def _normalize_env(cls, v: str) -> str:
        return (v or "dev").strip().lower()

    @field_validator("LOG_LEVEL")
    @classmethod
    def _normalize_log_level(cls, v: str) -> str:
        return (v or "INFO").strip().upper()

    @field_validator("CORS_ALLOW_ORIGINS")
    @classmethod
    def _clean_cors_origins(cls, v: List[str]) -> List[str]:
        cleaned = []
        for origin in v or []:
            o = (origin or "").strip()
            if o:
                cleaned.append(o)
        return cleaned

    @model_validator(mode="after")
    def _check_latency_range(self) -> "Settings":
        if self.ENDPOINT_TEST_MIN_MS >= self.ENDPOINT_TEST_MAX_MS:
            raise ValueError("ENDPOINT_TEST_MIN_MS must be lower than ENDPOINT_TEST_MAX_MS")
        return self


# Singleton instance imported across the codebase.
settings = Settings()
