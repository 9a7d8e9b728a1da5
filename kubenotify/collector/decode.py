"""Map raw core/v1 Event objects from the watch stream to EventRecords.

Older events carry ``firstTimestamp``/``lastTimestamp``/``count``; events
written through the events.k8s.io API may only have ``eventTime`` and a
``series`` block. Both shapes are accepted.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from kubenotify.errors import EventDecodeError
from kubenotify.models.events import EventRecord, WatchEventType


def _str(value: object) -> str:
    return "" if value is None else str(value)


def _section(raw: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = raw.get(key)
    return value if isinstance(value, Mapping) else {}


def parse_timestamp(value: object) -> datetime | None:
    """Parse an RFC 3339 timestamp; naive values are taken as UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value))
        except ValueError as exc:
            raise EventDecodeError(f"Invalid timestamp: {value!r}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def _count(raw: Mapping[str, Any]) -> int:
    value = raw.get("count")
    if value is None:
        value = _section(raw, "series").get("count")
    try:
        return max(int(value or 1), 1)
    except (TypeError, ValueError) as exc:
        raise EventDecodeError(f"Invalid count: {value!r}") from exc


def event_from_raw(raw: object, event_type: str = WatchEventType.ADDED) -> EventRecord:
    """Build an EventRecord from a raw Event object.

    Raises:
        EventDecodeError: if *raw* is not a mapping, has no usable timestamp,
            or carries a malformed timestamp or count.
    """
    if not isinstance(raw, Mapping):
        raise EventDecodeError(f"Event object must be a mapping, got {type(raw).__name__}")

    metadata = _section(raw, "metadata")
    source = _section(raw, "source")
    involved = _section(raw, "involvedObject")

    event_time = parse_timestamp(raw.get("eventTime"))
    first_ts = parse_timestamp(raw.get("firstTimestamp"))
    last_ts = parse_timestamp(raw.get("lastTimestamp"))

    last_seen = last_ts or event_time or first_ts
    if last_seen is None:
        raise EventDecodeError(f"Event {_str(metadata.get('name'))!r} has no timestamp")
    first_seen = min(first_ts or event_time or last_seen, last_seen)

    try:
        watch_type = WatchEventType(event_type)
    except ValueError as exc:
        raise EventDecodeError(f"Unknown watch event type: {event_type!r}") from exc

    return EventRecord(
        source_component=_str(source.get("component") or raw.get("reportingComponent")),
        involved_object_kind=_str(involved.get("kind")),
        name=_str(metadata.get("name")),
        namespace=_str(metadata.get("namespace")),
        reason=_str(raw.get("reason")),
        message=_str(raw.get("message")),
        first_seen=first_seen,
        last_seen=last_seen,
        count=_count(raw),
        event_type=watch_type,
    )


def event_from_watch_line(item: object) -> EventRecord:
    """Decode one watch notification ``{"type": ..., "object": {...}}``.

    A bare Event object (as printed by ``kubectl get events -o json``
    items) is accepted too and treated as ADDED.
    """
    if isinstance(item, Mapping) and "object" in item and "type" in item:
        return event_from_raw(item["object"], _str(item["type"]))
    return event_from_raw(item)
