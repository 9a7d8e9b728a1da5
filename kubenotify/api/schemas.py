"""Response models for the status API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    error: str
    detail: str


class HealthResponse(BaseModel):
    status: str
    version: str


class ReceiptModel(BaseModel):
    channel: str
    ts: str


class FilterSummary(BaseModel):
    target_reasons: list[str]
    allowed_name_patterns: list[str]
    max_age_minutes: int
    always_allow_substring: str


class StatusResponse(BaseModel):
    """Pipeline counters since process start."""

    version: str
    watch_namespace: str
    received: int
    notified: int
    suppressed: dict[str, int]
    last_receipt: ReceiptModel | None = None
    last_notified_at: datetime | None = None
    filter: FilterSummary
