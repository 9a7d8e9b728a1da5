"""Notification formatter -- turns an EventRecord into a Slack attachment payload.

Two field groups exist: the deployment view (pod name and the image tag
that was just pulled) and the general view (namespace, message, object,
name, reason, component). The composite view, which is the default,
emits both in that order.
"""

from __future__ import annotations

from kubenotify.models.events import EventRecord
from kubenotify.models.notifications import ColorHint, NotificationPayload, PayloadField, ViewKind

IMAGE_PULLED_PREFIX = "Successfully pulled image "


def deployed_image_tag(message: str) -> str:
    """Strip the image-pulled prefix; messages without it are returned unchanged."""
    return message.removeprefix(IMAGE_PULLED_PREFIX)


def deployment_fields(event: EventRecord) -> list[PayloadField]:
    return [
        PayloadField(title="Pod-Name", value=event.name),
        PayloadField(title="Deployed-Image-Tag", value=deployed_image_tag(event.message)),
    ]


def general_fields(event: EventRecord) -> list[PayloadField]:
    return [
        PayloadField(title="Namespace", value=event.namespace, short=True),
        PayloadField(title="Message", value=event.message),
        PayloadField(title="Object", value=event.involved_object_kind, short=True),
        PayloadField(title="Name", value=event.name, short=True),
        PayloadField(title="Reason", value=event.reason, short=True),
        PayloadField(title="Component", value=event.source_component, short=True),
    ]


def resolve_color(event: EventRecord, color: ColorHint = ColorHint.NONE) -> ColorHint:
    """Use *color* if set, otherwise guess from the reason prefix."""
    if color:
        return color
    if event.reason.startswith("Success"):
        return ColorHint.GOOD
    if event.reason.startswith("Fail"):
        return ColorHint.DANGER
    return ColorHint.NONE


def format_notification(
    event: EventRecord,
    color: ColorHint = ColorHint.NONE,
    view: ViewKind = ViewKind.COMPOSITE,
) -> NotificationPayload:
    """Build the payload for *event*. Never fails; empty strings stay empty."""
    fields: list[PayloadField] = []
    if view in (ViewKind.COMPOSITE, ViewKind.DEPLOYMENT):
        fields.extend(deployment_fields(event))
    if view in (ViewKind.COMPOSITE, ViewKind.GENERAL):
        fields.extend(general_fields(event))

    return NotificationPayload(
        fallback_text=event.message,
        color=resolve_color(event, color),
        fields=tuple(fields),
    )
