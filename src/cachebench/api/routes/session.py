"""Session API endpoints.

GET    /api/session                - Current view (state, recent samples, statistics)
POST   /api/session/tests/{variant} - Run one test against a variant
POST   /api/session/cache/clear    - Clear the origin cache
DELETE /api/session/results        - Clear the sample history
"""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException

from cachebench.api.app import get_controller, get_snapshot_sink
from cachebench.core.errors import BusyError
from cachebench.models.domain import Sample, SessionState, SessionView, Statistics
from cachebench.models.types import (
    CachedVariantStatisticsDetail,
    MessageResponse,
    RunTestResponse,
    SampleDetail,
    SessionStateDetail,
    SessionViewResponse,
    StatisticsDetail,
    VariantStatisticsDetail,
)
from cachebench.session.controller import SessionController
from cachebench.session.sinks import SnapshotSink

router = APIRouter()


def _sample_detail(sample: Sample) -> SampleDetail:
    return SampleDetail(
        variant=sample.variant,
        latency_ms=sample.latency_ms,
        cache_hit=sample.cache_hit,
        item_count=sample.item_count,
        captured_at=sample.captured_at,
    )


def _statistics_detail(statistics: Statistics) -> StatisticsDetail:
    return StatisticsDetail(
        cached=CachedVariantStatisticsDetail(
            count=statistics.cached.count,
            avg_latency_ms=statistics.cached.avg_latency_ms,
            hits=statistics.cached.hits,
            hit_rate=statistics.cached.hit_rate,
        ),
        uncached=VariantStatisticsDetail(
            count=statistics.uncached.count,
            avg_latency_ms=statistics.uncached.avg_latency_ms,
        ),
        total_requests=statistics.total_requests,
    )


def _build_view_response(
    state: SessionState,
    view: SessionView,
    last_error: str | None,
) -> SessionViewResponse:
    """Build SessionViewResponse from domain objects.

    Args:
        state: Controller state.
        view: Published session view.
        last_error: Most recent failure message, if any.

    Returns:
        SessionViewResponse model.
    """
    return SessionViewResponse(
        state=SessionStateDetail(kind=state.kind, variant=state.variant, message=state.message),
        recent_samples=[_sample_detail(s) for s in view.recent_samples],
        statistics=_statistics_detail(view.statistics),
        last_error=last_error,
    )


@router.get("/session", response_model=SessionViewResponse)
def get_session_view(
    controller: SessionController = Depends(get_controller),
    sink: SnapshotSink = Depends(get_snapshot_sink),
) -> SessionViewResponse:
    """Get the current session view.

    Never blocks on an in-flight test; returns the last published view.
    """
    return _build_view_response(controller.state, sink.view, sink.last_error)


@router.post("/session/tests/{variant}", response_model=RunTestResponse)
def run_test(
    variant: Literal["cached", "uncached"],
    controller: SessionController = Depends(get_controller),
    sink: SnapshotSink = Depends(get_snapshot_sink),
) -> RunTestResponse:
    """Run one test against a variant.

    Args:
        variant: "cached" or "uncached".
        controller: Session controller (injected).
        sink: Snapshot sink (injected).

    Returns:
        RunTestResponse with the recorded sample and updated view.

    Raises:
        HTTPException: 409 if a test is already running, 502 if the origin
            request failed.
    """
    try:
        sample = controller.run_test(variant)
    except BusyError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e

    if sample is None:
        raise HTTPException(status_code=502, detail=controller.last_error)

    return RunTestResponse(
        sample=_sample_detail(sample),
        view=_build_view_response(controller.state, sink.view, sink.last_error),
    )


@router.post("/session/cache/clear", response_model=MessageResponse)
def clear_cache(
    controller: SessionController = Depends(get_controller),
) -> MessageResponse:
    """Clear the origin cache.

    Raises:
        HTTPException: 409 if busy, 502 if the origin request failed.
    """
    try:
        cleared = controller.clear_cache()
    except BusyError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e

    if not cleared:
        raise HTTPException(status_code=502, detail=controller.last_error)

    return MessageResponse(message="Cache cleared successfully")


@router.delete("/session/results", response_model=SessionViewResponse)
def clear_results(
    controller: SessionController = Depends(get_controller),
    sink: SnapshotSink = Depends(get_snapshot_sink),
) -> SessionViewResponse:
    """Clear the sample history.

    Raises:
        HTTPException: 409 if busy.
    """
    try:
        controller.clear_results()
    except BusyError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e

    return _build_view_response(controller.state, sink.view, sink.last_error)
