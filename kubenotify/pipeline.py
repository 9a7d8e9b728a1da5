"""Event pipeline: classify -> format -> deliver, one event at a time.

Each event is fully handled, delivery included, before the next one is
pulled from the source, so Slack receives messages in watch order.
Delivery errors propagate to the caller untouched.
"""

from __future__ import annotations

from collections.abc import AsyncIterable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

import structlog

from kubenotify.models.config import FilterConfig
from kubenotify.models.events import EventRecord
from kubenotify.models.notifications import DeliveryReceipt, ViewKind
from kubenotify.notifications.formatter import format_notification
from kubenotify.notifications.manager import DeliveryManager
from kubenotify.observability.logging import event_log_fields
from kubenotify.observability.metrics import events_received_total, events_suppressed_total
from kubenotify.rules.classifier import Gate, classify

_log = structlog.get_logger(component="pipeline")


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class PipelineStats:
    """Running counters exposed by the status API."""

    received: int = 0
    notified: int = 0
    suppressed: dict[str, int] = field(default_factory=lambda: {gate.value: 0 for gate in Gate})
    last_receipt: DeliveryReceipt | None = None
    last_notified_at: datetime | None = None


class EventPipeline:
    """Runs every incoming EventRecord through the classifier and, when it
    says so, the formatter and the delivery manager.

    Args:
        filter_config: Static filter settings.
        delivery:      Sends payloads to Slack.
        view:          Field group the formatter emits.
        clock:         Returns "now" for the staleness check (UTC).
    """

    def __init__(
        self,
        filter_config: FilterConfig,
        delivery: DeliveryManager,
        view: ViewKind = ViewKind.COMPOSITE,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._filter = filter_config
        self._delivery = delivery
        self._view = view
        self._clock = clock
        self.stats = PipelineStats()

    @property
    def filter_config(self) -> FilterConfig:
        return self._filter

    async def handle(self, event: EventRecord) -> DeliveryReceipt | None:
        """Process one event; returns the receipt if a message was sent."""
        self.stats.received += 1
        events_received_total.inc()

        decision = classify(event, self._filter, self._clock())
        if not decision.notify:
            gate = decision.suppressed_by or Gate.REASON
            self.stats.suppressed[gate.value] += 1
            events_suppressed_total.labels(gate=gate.value).inc()
            if gate is Gate.STALE:
                _log.info(
                    "event_suppressed",
                    gate=gate.value,
                    age_minutes=decision.age_minutes,
                    message=event.message,
                    **event_log_fields(event),
                )
            else:
                _log.debug("event_suppressed", gate=gate.value, **event_log_fields(event))
            return None

        payload = format_notification(event, decision.color, self._view)
        receipt = await self._delivery.deliver(payload)

        self.stats.notified += 1
        self.stats.last_receipt = receipt
        self.stats.last_notified_at = self._clock()
        _log.info(
            "notification_sent",
            channel=receipt.channel,
            ts=receipt.ts,
            color=payload.color.value,
            **event_log_fields(event),
        )
        return receipt

    async def run(self, events: AsyncIterable[EventRecord]) -> None:
        """Consume *events* until the source is exhausted."""
        async for event in events:
            await self.handle(event)
        _log.info("pipeline_finished", received=self.stats.received, notified=self.stats.notified)
