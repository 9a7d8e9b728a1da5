"""Shared fixtures for kubenotify integration tests.

Provides raw watch-notification factories, a recording Slack stand-in and
a pipeline wired to a real DeliveryManager, so the tests exercise the full
watch -> decode -> classify -> format -> deliver path without a cluster or
a Slack workspace.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from kubenotify.models.config import FilterConfig
from kubenotify.models.notifications import DeliveryReceipt, NotificationPayload
from kubenotify.notifications.manager import DeliveryManager, NotificationChannel
from kubenotify.pipeline import EventPipeline

from ..conftest import watch_line

# ---------------------------------------------------------------------------
# Timestamp helpers
# ---------------------------------------------------------------------------

NOW = datetime(2026, 3, 4, 12, 0, 0, tzinfo=UTC)


def _rfc3339(value: datetime) -> str:
    return value.strftime("%Y-%m-%dT%H:%M:%SZ")


# ---------------------------------------------------------------------------
# Raw watch notification factories
# ---------------------------------------------------------------------------


def make_raw_event(
    name: str = "web-7f8c9-x2kj.17a2b3c4d5e6f708",
    namespace: str = "shop",
    reason: str = "Pulled",
    message: str = "Successfully pulled image registry.local/web:1.4.2",
    component: str = "kubelet",
    kind: str = "Pod",
    count: int = 1,
    age: timedelta = timedelta(seconds=10),
) -> dict[str, Any]:
    """Create a raw core/v1 Event object as the API server returns it."""
    last = NOW - age
    return {
        "apiVersion": "v1",
        "kind": "Event",
        "metadata": {"name": name, "namespace": namespace, "resourceVersion": "4242"},
        "involvedObject": {"kind": kind, "name": name.split(".")[0], "namespace": namespace},
        "reason": reason,
        "message": message,
        "source": {"component": component, "host": "node-1"},
        "firstTimestamp": _rfc3339(last - timedelta(seconds=count - 1)),
        "lastTimestamp": _rfc3339(last),
        "count": count,
        "type": "Normal",
    }


def make_watch_line(event_type: str = "ADDED", **kwargs: Any) -> bytes:
    """Encode a raw Event as one line of the API server watch stream."""
    return watch_line(event_type, make_raw_event(**kwargs))


# ---------------------------------------------------------------------------
# Delivery stand-ins
# ---------------------------------------------------------------------------


class RecordingChannel(NotificationChannel):
    """Accepts every payload and hands out increasing Slack-style timestamps."""

    def __init__(self, channel: str = "C0SHOPOPS") -> None:
        self.channel = channel
        self.sent: list[NotificationPayload] = []

    @property
    def channel_name(self) -> str:
        return "recording"

    async def send(self, payload: NotificationPayload) -> DeliveryReceipt:
        self.sent.append(payload)
        return DeliveryReceipt(channel=self.channel, ts=f"1741089600.{len(self.sent):06d}")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def filter_config() -> FilterConfig:
    return FilterConfig(
        target_reasons=("Pulled", "Killing"),
        allowed_name_patterns=("web-", "api-"),
        max_age_minutes=1,
        always_allow_substring="killed",
    )


@pytest.fixture
def recording_channel() -> RecordingChannel:
    return RecordingChannel()


@pytest.fixture
def pipeline(filter_config: FilterConfig, recording_channel: RecordingChannel) -> EventPipeline:
    return EventPipeline(
        filter_config=filter_config,
        delivery=DeliveryManager(recording_channel),
        clock=lambda: NOW,
    )
