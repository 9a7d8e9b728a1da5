"""Core event data structures and enumerations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class WatchEventType(StrEnum):
    """Notification type attached to each item of a Kubernetes watch stream."""

    ADDED = "ADDED"
    MODIFIED = "MODIFIED"
    DELETED = "DELETED"
    ERROR = "ERROR"


@dataclass(frozen=True)
class EventRecord:
    """Canonical event representation.

    Produced by the collector's decoder, consumed by the classifier and the
    formatter. Immutable: discarded once the classify -> format -> deliver
    cycle for it has completed.

    ``name`` is the Event object's own ``metadata.name`` (which embeds the
    pod name as its prefix), not the involved object's name.
    """

    source_component: str
    involved_object_kind: str
    name: str
    namespace: str
    reason: str
    message: str
    first_seen: datetime
    last_seen: datetime
    count: int = 1
    event_type: WatchEventType = WatchEventType.ADDED
