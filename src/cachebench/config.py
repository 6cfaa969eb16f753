"""Configuration settings for cachebench.

All settings come from CACHEBENCH_* environment variables with local-dev
defaults.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Literal

DEFAULT_ORIGIN_URL = "http://localhost:8080"
DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000"

SourceKind = Literal["http", "mock"]


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _env_source() -> SourceKind:
    raw = os.environ.get("CACHEBENCH_SOURCE", "http").strip().lower()
    if raw not in ("http", "mock"):
        raise ValueError(f"CACHEBENCH_SOURCE must be 'http' or 'mock', got {raw!r}")
    return raw  # type: ignore[return-value]


@dataclass(frozen=True)
class Settings:
    """Runtime settings."""

    origin_url: str = DEFAULT_ORIGIN_URL
    timeout_s: float = 10.0
    source: SourceKind = "http"
    recent_limit: int = 10
    hit_threshold_ms: float = 100.0
    log_level: str = "INFO"
    cors_origins: list[str] = field(
        default_factory=lambda: DEFAULT_CORS_ORIGINS.split(",")
    )

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from the environment.

        Raises:
            ValueError: If a numeric or enumerated variable is malformed.
        """
        cors = os.environ.get("CACHEBENCH_CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
        return cls(
            origin_url=os.environ.get("CACHEBENCH_ORIGIN_URL", DEFAULT_ORIGIN_URL),
            timeout_s=_env_float("CACHEBENCH_TIMEOUT_S", 10.0),
            source=_env_source(),
            recent_limit=_env_int("CACHEBENCH_RECENT_LIMIT", 10),
            hit_threshold_ms=_env_float("CACHEBENCH_HIT_THRESHOLD_MS", 100.0),
            log_level=os.environ.get("CACHEBENCH_LOG_LEVEL", "INFO").upper(),
            cors_origins=[o.strip() for o in cors.split(",") if o.strip()],
        )


def configure_logging(level: str | int = logging.INFO) -> None:
    """Install a single stream handler on the root logger.

    Does nothing if the root logger already has a stream handler.
    """
    root = logging.getLogger()
    if any(isinstance(h, logging.StreamHandler) for h in root.handlers):
        return
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    root.setLevel(level)
    root.addHandler(handler)
