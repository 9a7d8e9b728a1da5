"""Prometheus metrics for kubenotify."""

from __future__ import annotations

from prometheus_client import Counter

events_received_total = Counter(
    "kubenotify_events_received_total",
    "Events decoded from the watch stream.",
)

events_suppressed_total = Counter(
    "kubenotify_events_suppressed_total",
    "Events the classifier decided not to notify about, by suppressing gate.",
    ["gate"],
)

notifications_total = Counter(
    "kubenotify_notifications_total",
    "Notification delivery attempts that completed, by outcome.",
    ["success"],
)

delivery_retries_total = Counter(
    "kubenotify_delivery_retries_total",
    "Delivery retries issued after a transient failure.",
)
