"""Slack notification channel for kubenotify.

Posts a single legacy attachment to one configured channel via the Web
API's ``chat.postMessage`` using a bot token. The attachment carries its
own fallback text, so no top-level ``text`` is sent.
"""

from __future__ import annotations

import aiohttp
import structlog
from slack_sdk.errors import SlackApiError, SlackClientError
from slack_sdk.web.async_client import AsyncWebClient

from kubenotify.errors import TerminalDeliveryError, TransientDeliveryError
from kubenotify.models.notifications import DeliveryReceipt, NotificationPayload
from kubenotify.notifications.manager import NotificationChannel

_log = structlog.get_logger(component="notifications.slack")

_TRANSIENT_SLACK_ERRORS = frozenset(
    {
        "ratelimited",
        "service_unavailable",
        "internal_error",
        "fatal_error",
        "request_timeout",
    }
)


class SlackNotificationChannel(NotificationChannel):
    """Delivers payloads with ``chat.postMessage``.

    Args:
        token:   Bot token (``xoxb-...``).
        channel: Destination channel id or name.
        timeout: Request timeout in seconds. Defaults to 30.
        client:  Pre-built client; tests inject a mock here.
    """

    def __init__(
        self,
        token: str,
        channel: str,
        timeout: int = 30,
        client: AsyncWebClient | None = None,
    ) -> None:
        if not token:
            raise ValueError("Slack token must not be empty")
        if not channel:
            raise ValueError("Slack channel must not be empty")
        self._channel = channel
        self._client = client or AsyncWebClient(token=token, timeout=timeout)

    @property
    def channel_name(self) -> str:
        return "slack"

    async def send(self, payload: NotificationPayload) -> DeliveryReceipt:
        """Post *payload* and return Slack's (channel, ts) acknowledgment.

        Raises:
            TransientDeliveryError: rate limiting, Slack-side 5xx, timeouts
                and connection failures.
            TerminalDeliveryError:  any other API or client error.
        """
        try:
            response = await self._client.chat_postMessage(
                channel=self._channel,
                attachments=[payload.to_attachment()],
            )
        except SlackApiError as exc:
            raise _classify_api_error(exc) from exc
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise TransientDeliveryError(f"Slack request failed: {exc!r}") from exc
        except SlackClientError as exc:
            raise TerminalDeliveryError(f"Slack client error: {exc}") from exc

        receipt = DeliveryReceipt(channel=str(response.get("channel", "")), ts=str(response.get("ts", "")))
        _log.debug("slack_message_posted", channel=receipt.channel, ts=receipt.ts)
        return receipt


def _classify_api_error(exc: SlackApiError) -> TransientDeliveryError | TerminalDeliveryError:
    response = exc.response
    status = getattr(response, "status_code", 0) or 0
    error = str(response.get("error", "")) if response is not None else ""
    retry_after = _retry_after(getattr(response, "headers", None) or {})

    if status == 429 or status >= 500 or error in _TRANSIENT_SLACK_ERRORS:
        return TransientDeliveryError(
            f"Slack API error {status}: {error or 'unknown'}",
            retry_after=retry_after,
        )
    return TerminalDeliveryError(f"Slack API error {status}: {error or 'unknown'}")


def _retry_after(headers: dict[str, object]) -> float | None:
    for key, value in headers.items():
        if str(key).lower() == "retry-after":
            try:
                return float(str(value))
            except ValueError:
                return None
    return None
