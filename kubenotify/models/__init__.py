"""Core data structures for kubenotify."""

from kubenotify.models.config import (
    APIConfig,
    FilterConfig,
    KubeNotifyConfig,
    LogConfig,
    SlackConfig,
    WatchConfig,
)
from kubenotify.models.events import EventRecord, WatchEventType
from kubenotify.models.notifications import (
    ColorHint,
    DeliveryReceipt,
    NotificationPayload,
    PayloadField,
    ViewKind,
)

__all__ = [
    "APIConfig",
    "ColorHint",
    "DeliveryReceipt",
    "EventRecord",
    "FilterConfig",
    "KubeNotifyConfig",
    "LogConfig",
    "NotificationPayload",
    "PayloadField",
    "SlackConfig",
    "ViewKind",
    "WatchConfig",
    "WatchEventType",
]
