"""Status API routes."""

from __future__ import annotations

from fastapi import APIRouter, Request

from kubenotify.api.schemas import FilterSummary, HealthResponse, ReceiptModel, StatusResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    from kubenotify import __version__

    return HealthResponse(status="ok", version=__version__)


@router.get("/status", response_model=StatusResponse)
async def status(request: Request) -> StatusResponse:
    from kubenotify import __version__

    pipeline = request.app.state.pipeline
    stats = pipeline.stats
    filter_config = pipeline.filter_config

    receipt = None
    if stats.last_receipt is not None:
        receipt = ReceiptModel(channel=stats.last_receipt.channel, ts=stats.last_receipt.ts)

    return StatusResponse(
        version=__version__,
        watch_namespace=request.app.state.watch_namespace,
        received=stats.received,
        notified=stats.notified,
        suppressed=dict(stats.suppressed),
        last_receipt=receipt,
        last_notified_at=stats.last_notified_at,
        filter=FilterSummary(
            target_reasons=list(filter_config.target_reasons),
            allowed_name_patterns=list(filter_config.allowed_name_patterns),
            max_age_minutes=filter_config.max_age_minutes,
            always_allow_substring=filter_config.always_allow_substring,
        ),
    )
