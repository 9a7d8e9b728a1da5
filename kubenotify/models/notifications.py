"""Notification payload data structures."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class ColorHint(StrEnum):
    """Attachment color understood by Slack.

    ``NONE`` leaves the color unset: the formatter may still infer one, and
    if it does not the client renders its default.
    """

    NONE = ""
    GOOD = "good"
    DANGER = "danger"


class ViewKind(StrEnum):
    """Which group of fields the formatter emits."""

    COMPOSITE = "composite"
    DEPLOYMENT = "deployment"
    GENERAL = "general"


@dataclass(frozen=True)
class PayloadField:
    """A single title/value pair of an attachment."""

    title: str
    value: str
    short: bool = False


@dataclass(frozen=True)
class NotificationPayload:
    """Structured notification ready for delivery."""

    fallback_text: str
    color: ColorHint = ColorHint.NONE
    fields: tuple[PayloadField, ...] = ()

    def to_attachment(self) -> dict[str, object]:
        """Render as a Slack legacy attachment."""
        attachment: dict[str, object] = {
            "fallback": self.fallback_text,
            "fields": [{"title": f.title, "value": f.value, "short": f.short} for f in self.fields],
        }
        if self.color:
            attachment["color"] = self.color.value
        return attachment


@dataclass(frozen=True)
class DeliveryReceipt:
    """Acknowledgment returned by the chat API for a delivered message."""

    channel: str
    ts: str
