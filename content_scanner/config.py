"""
Central application configuration.

Every tunable value lives here as a typed, documented field.
Any field can be overridden at runtime via an environment variable of the
same name (case-insensitive), e.g.:

    MAX_UPLOAD_MB=8 uvicorn content_scanner.main:app    # bigger uploads
    export RATE_LIMIT_MAX_REQUESTS=100                   # staging override

A `.env` file at the project root is loaded automatically.

Scan windows used by the detection core (100 B / 200 KB / 300 KB) are
algorithmic and live in content_scanner/detection/constants.py instead.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,   # MAX_UPLOAD_MB == max_upload_mb
        extra="ignore",         # silently drop unknown env vars
    )

    # ------------------------------------------------------------------ #
    # Logging                                                             #
    # ------------------------------------------------------------------ #
    log_level: str = Field(
        "INFO", description="Root log level passed to logging.basicConfig"
    )

    # ------------------------------------------------------------------ #
    # Byte retrieval                                                      #
    # ------------------------------------------------------------------ #
    max_upload_mb: int = Field(
        4, description="Max MB for multipart uploads to /api/scan"
    )
    max_fetch_kb: int = Field(
        300, description="Bytes (KB) streamed from a remote URL: metadata lives here"
    )
    fetch_timeout_sec: float = Field(
        8.0, description="Total timeout for one remote fetch (seconds)"
    )
    fetch_user_agent: str = Field(
        "AI-Content-Scanner/2.0", description="User-Agent sent on remote fetches"
    )
    http_session_timeout_sec: float = Field(
        30.0, description="Default timeout of the shared aiohttp session"
    )

    # ------------------------------------------------------------------ #
    # Batch scanning                                                      #
    # ------------------------------------------------------------------ #
    batch_max_urls: int = Field(
        50, description="Max URLs accepted by /api/scan-batch"
    )

    # ------------------------------------------------------------------ #
    # Rate Limiting                                                       #
    # ------------------------------------------------------------------ #
    rate_limit_window_sec: int = Field(
        60, description="Sliding window for per-IP request counting (seconds)"
    )
    rate_limit_max_requests: int = Field(
        30, description="Max /api/* requests per IP within the window"
    )
    rate_limit_memory_limit: int = Field(
        10_000, description="Max keys before the in-memory rate-limit map is pruned"
    )
    upstash_redis_host: Optional[str] = Field(
        None, description="Upstash REST URL; unset → in-memory limiter"
    )
    upstash_redis_password: Optional[str] = Field(
        None, description="Upstash REST token"
    )

    # ------------------------------------------------------------------ #
    # Derived byte-level properties (computed from MB/KB fields)          #
    # ------------------------------------------------------------------ #
    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    @property
    def max_fetch_bytes(self) -> int:
        return self.max_fetch_kb * 1000


# Single shared instance; import this everywhere.
settings = Settings()
