"""Tests for EventPipeline: classify -> format -> deliver."""

from __future__ import annotations

from collections.abc import AsyncIterator
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from kubenotify.errors import TerminalDeliveryError
from kubenotify.models.config import FilterConfig
from kubenotify.models.events import EventRecord
from kubenotify.models.notifications import ColorHint, DeliveryReceipt, ViewKind
from kubenotify.pipeline import EventPipeline

_NOW = datetime(2026, 3, 4, 12, 0, 0, tzinfo=UTC)
_RECEIPT = DeliveryReceipt(channel="C0123", ts="1741089600.000100")


def _make_event(
    reason: str = "Pulled",
    name: str = "web-7f8.17a2",
    message: str = "Successfully pulled image nginx:1.2",
    count: int = 1,
    age: timedelta = timedelta(0),
) -> EventRecord:
    return EventRecord(
        source_component="kubelet",
        involved_object_kind="Pod",
        name=name,
        namespace="shop",
        reason=reason,
        message=message,
        first_seen=_NOW - age,
        last_seen=_NOW - age,
        count=count,
    )


def _make_delivery(side_effect: Exception | None = None) -> MagicMock:
    delivery = MagicMock()
    delivery.deliver = AsyncMock(return_value=_RECEIPT, side_effect=side_effect)
    return delivery


def _make_pipeline(delivery: MagicMock, view: ViewKind = ViewKind.COMPOSITE) -> EventPipeline:
    return EventPipeline(
        filter_config=FilterConfig(target_reasons=("Pulled",), allowed_name_patterns=("web-",)),
        delivery=delivery,
        view=view,
        clock=lambda: _NOW,
    )


async def _iterate(events: list[EventRecord]) -> AsyncIterator[EventRecord]:
    for event in events:
        yield event


class TestHandle:
    async def test_notify_delivers_formatted_payload(self) -> None:
        delivery = _make_delivery()
        pipeline = _make_pipeline(delivery)

        receipt = await pipeline.handle(_make_event())

        assert receipt == _RECEIPT
        payload = delivery.deliver.await_args.args[0]
        assert payload.color is ColorHint.GOOD
        assert payload.fallback_text == "Successfully pulled image nginx:1.2"
        assert payload.fields[1].value == "nginx:1.2"
        assert pipeline.stats.notified == 1
        assert pipeline.stats.last_receipt == _RECEIPT
        assert pipeline.stats.last_notified_at == _NOW

    async def test_view_is_passed_to_formatter(self) -> None:
        delivery = _make_delivery()
        pipeline = _make_pipeline(delivery, view=ViewKind.GENERAL)

        await pipeline.handle(_make_event())

        payload = delivery.deliver.await_args.args[0]
        assert payload.fields[0].title == "Namespace"

    @pytest.mark.parametrize(
        ("event", "gate"),
        [
            (_make_event(reason="Created"), "reason"),
            (_make_event(name="db-1.17a2"), "name"),
            (_make_event(count=2), "repeat"),
            (_make_event(age=timedelta(minutes=3)), "stale"),
        ],
    )
    async def test_suppressed_events_are_counted_not_delivered(self, event: EventRecord, gate: str) -> None:
        delivery = _make_delivery()
        pipeline = _make_pipeline(delivery)

        assert await pipeline.handle(event) is None

        delivery.deliver.assert_not_awaited()
        assert pipeline.stats.received == 1
        assert pipeline.stats.notified == 0
        assert pipeline.stats.suppressed[gate] == 1

    async def test_delivery_error_propagates(self) -> None:
        pipeline = _make_pipeline(_make_delivery(side_effect=TerminalDeliveryError("invalid_auth")))
        with pytest.raises(TerminalDeliveryError):
            await pipeline.handle(_make_event())
        assert pipeline.stats.notified == 0


class TestRun:
    async def test_processes_events_in_order(self) -> None:
        delivered: list[str] = []

        async def _deliver(payload):  # type: ignore[no-untyped-def]
            delivered.append(payload.fields[0].value)
            return _RECEIPT

        delivery = MagicMock()
        delivery.deliver = AsyncMock(side_effect=_deliver)
        pipeline = _make_pipeline(delivery)

        events = [
            _make_event(name="web-a"),
            _make_event(name="db-b"),
            _make_event(name="web-c"),
            _make_event(name="web-d", message="Back-off pulling image", count=4),
            _make_event(name="web-e"),
        ]
        await pipeline.run(_iterate(events))

        assert delivered == ["web-a", "web-c", "web-e"]
        assert pipeline.stats.received == 5
        assert pipeline.stats.notified == 3

    async def test_stops_at_first_delivery_error(self) -> None:
        delivery = _make_delivery(side_effect=TerminalDeliveryError("channel_not_found"))
        pipeline = _make_pipeline(delivery)

        with pytest.raises(TerminalDeliveryError):
            await pipeline.run(_iterate([_make_event(name="web-a"), _make_event(name="web-b")]))
        assert pipeline.stats.received == 1

    async def test_empty_stream(self) -> None:
        pipeline = _make_pipeline(_make_delivery())
        await pipeline.run(_iterate([]))
        assert pipeline.stats.received == 0
