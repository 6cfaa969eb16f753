"""Pydantic models for cachebench.

Wire models: the origin's performance payload (consumed by the HTTP sample
source) and the session API responses.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class OriginDataResponse(BaseModel):
    """Payload of the origin's timed data endpoints.

    Field names follow the origin's camelCase JSON.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    data: list[Any] = Field(default_factory=list)
    response_time: float | None = Field(default=None, alias="responseTime", ge=0)
    cache_enabled: bool | None = Field(default=None, alias="cacheEnabled")
    cache_hit: bool | None = Field(default=None, alias="cacheHit")


class OriginErrorResponse(BaseModel):
    """Error body returned by the origin."""

    model_config = ConfigDict(extra="ignore")

    message: str | None = None
    error: str | None = None


class SampleDetail(BaseModel):
    """Sample for API response."""

    variant: Literal["cached", "uncached"]
    latency_ms: float
    cache_hit: bool | None
    item_count: int
    captured_at: datetime


class VariantStatisticsDetail(BaseModel):
    """Per-variant statistics for API response."""

    count: int
    avg_latency_ms: float


class CachedVariantStatisticsDetail(VariantStatisticsDetail):
    """Cached-variant statistics for API response."""

    hits: int
    hit_rate: float  # percentage


class StatisticsDetail(BaseModel):
    """Statistics snapshot for API response."""

    cached: CachedVariantStatisticsDetail
    uncached: VariantStatisticsDetail
    total_requests: int


class SessionStateDetail(BaseModel):
    """Session controller state for API response."""

    kind: Literal["idle", "running", "error"]
    variant: Literal["cached", "uncached"] | None
    message: str | None


class SessionViewResponse(BaseModel):
    """Full session view for API response."""

    state: SessionStateDetail
    recent_samples: list[SampleDetail]
    statistics: StatisticsDetail
    last_error: str | None


class RunTestResponse(BaseModel):
    """Result of a single test run."""

    sample: SampleDetail
    view: SessionViewResponse


class MessageResponse(BaseModel):
    """Plain message response."""

    message: str
