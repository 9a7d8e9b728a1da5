"""Notification channel contract and delivery manager.

NotificationChannel -- ABC every channel must implement.
DeliveryManager     -- Sends a payload through one channel, retrying
                       transient failures up to a configured limit.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable

import structlog

from kubenotify.errors import DeliveryError, TransientDeliveryError
from kubenotify.models.notifications import DeliveryReceipt, NotificationPayload
from kubenotify.observability.metrics import delivery_retries_total, notifications_total

_log = structlog.get_logger(component="notifications.manager")


class NotificationChannel(ABC):
    """Abstract base class for all notification channels.

    ``send`` raises ``TransientDeliveryError`` for failures worth retrying
    and ``TerminalDeliveryError`` for everything else.
    """

    @property
    @abstractmethod
    def channel_name(self) -> str:
        """Human-readable channel identifier used in metrics and logs."""

    @abstractmethod
    async def send(self, payload: NotificationPayload) -> DeliveryReceipt:
        """Deliver *payload* and return the remote acknowledgment."""

    async def close(self) -> None:  # noqa: B027
        """Release any held connections. Default: nothing to release."""


class DeliveryManager:
    """Delivers payloads through a single channel.

    With ``max_retries=0`` the first failure propagates. Otherwise each
    ``TransientDeliveryError`` is retried; the only wait between attempts is
    the ``Retry-After`` the server asked for. Terminal errors, and the last
    transient error once retries run out, propagate to the caller.
    """

    def __init__(
        self,
        channel: NotificationChannel,
        max_retries: int = 0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._channel = channel
        self._max_retries = max_retries
        self._sleep = sleep

    @property
    def channel(self) -> NotificationChannel:
        return self._channel

    async def deliver(self, payload: NotificationPayload) -> DeliveryReceipt:
        attempt = 0
        while True:
            try:
                receipt = await self._channel.send(payload)
            except TransientDeliveryError as exc:
                if attempt >= self._max_retries:
                    notifications_total.labels(success="false").inc()
                    raise
                attempt += 1
                delivery_retries_total.inc()
                _log.warning(
                    "notification_retry",
                    channel=self._channel.channel_name,
                    attempt=attempt,
                    max_retries=self._max_retries,
                    retry_after=exc.retry_after,
                    error=str(exc),
                )
                if exc.retry_after:
                    await self._sleep(exc.retry_after)
                continue
            except DeliveryError:
                notifications_total.labels(success="false").inc()
                raise

            notifications_total.labels(success="true").inc()
            return receipt

    async def stop(self) -> None:
        await self._channel.close()
