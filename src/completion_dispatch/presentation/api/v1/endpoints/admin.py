"""Operator endpoints for usage accounting and the response cache."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from .....core.exceptions import UsageSinkError
from .....infrastructure.cache import ResponseCache
from .....infrastructure.monitoring import UsageRecorder
from ....schemas import ClearResponse, FlushResponse
from ...dependencies import get_response_cache, get_usage_recorder

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post("/usage/flush", response_model=FlushResponse)
async def flush_usage(recorder: UsageRecorder = Depends(get_usage_recorder)) -> FlushResponse:
    """Write buffered usage records to the durable sink.

    Raises:
        HTTPException: 503 when the sink rejects the write; records stay buffered
    """
    try:
        flushed = recorder.flush()
    except UsageSinkError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message) from e
    return FlushResponse(flushed=flushed)


@router.delete("/usage", response_model=ClearResponse)
async def clear_usage(recorder: UsageRecorder = Depends(get_usage_recorder)) -> ClearResponse:
    """Reset the durable usage sink."""
    try:
        recorder.clear_sink()
    except UsageSinkError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message) from e
    return ClearResponse(cleared="usage")


@router.delete("/cache", response_model=ClearResponse)
async def clear_cache(cache: ResponseCache = Depends(get_response_cache)) -> ClearResponse:
    """Drop every cached answer."""
    cache.clear()
    return ClearResponse(cleared="cache")
