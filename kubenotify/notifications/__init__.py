"""Notification system for kubenotify.

Turns classified EventRecords into Slack messages.

Exports:
    format_notification      -- Pure EventRecord -> NotificationPayload transform.
    NotificationChannel      -- Abstract base for channel implementations.
    DeliveryManager          -- Sends through one channel, retrying transient
                                failures when configured to.
    SlackNotificationChannel -- ``chat.postMessage`` channel using a bot token.
    build_delivery_manager   -- Factory used by the application bootstrap.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import structlog

from kubenotify.notifications.formatter import (
    deployed_image_tag,
    format_notification,
    resolve_color,
)
from kubenotify.notifications.manager import DeliveryManager, NotificationChannel
from kubenotify.notifications.slack import SlackNotificationChannel

if TYPE_CHECKING:
    from kubenotify.models.config import SlackConfig

_log = structlog.get_logger(component="notifications")

__all__ = [
    "DeliveryManager",
    "NotificationChannel",
    "SlackNotificationChannel",
    "build_delivery_manager",
    "deployed_image_tag",
    "format_notification",
    "resolve_color",
]


def build_delivery_manager(config: SlackConfig) -> DeliveryManager:
    """Build a DeliveryManager around the Slack channel.

    ``config.token_secret_ref`` names the environment variable that holds
    the bot token (``SLACK_TOKEN`` by default).

    Raises:
        ValueError: if the token or the channel is missing.
    """
    token = os.environ.get(config.token_secret_ref, "") if config.token_secret_ref else ""
    if not token:
        raise ValueError(f"Slack token env var {config.token_secret_ref!r} is empty or unset")

    channel = SlackNotificationChannel(
        token=token,
        channel=config.channel,
        timeout=config.timeout_seconds,
    )
    _log.info("slack_channel_enabled", channel=config.channel, max_retries=config.max_retries)
    return DeliveryManager(channel=channel, max_retries=config.max_retries)
