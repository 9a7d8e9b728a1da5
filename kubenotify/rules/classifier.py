"""Event classifier -- decides whether an event is worth a notification.

Gates are evaluated in a fixed order: reason, pod name, repeat count,
staleness. A later gate can only suppress a notification, never re-enable
one. The classifier is pure: no I/O, no shared state, and ``now`` is an
argument so decisions are reproducible.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from kubenotify.models.config import FilterConfig
from kubenotify.models.events import EventRecord
from kubenotify.models.notifications import ColorHint


class Gate(StrEnum):
    """Filter stage that suppressed an event."""

    REASON = "reason"
    NAME = "name"
    REPEAT = "repeat"
    STALE = "stale"


@dataclass(frozen=True)
class Decision:
    """Outcome of classifying one event.

    ``color`` is ``GOOD`` whenever the reason and name gates passed, even if
    a later gate suppressed the event. ``suppressed_by`` is the first gate
    (in evaluation order) that failed.
    """

    notify: bool
    color: ColorHint = ColorHint.NONE
    suppressed_by: Gate | None = None
    age_minutes: int = 0


def reason_matches(reason: str, target_reasons: Iterable[str]) -> bool:
    return reason in target_reasons


def name_matches(name: str, patterns: Iterable[str]) -> bool:
    """Case-sensitive substring match; an empty pattern set matches everything."""
    patterns = tuple(patterns)
    if not patterns:
        return True
    return any(pattern in name for pattern in patterns)


def is_repeat(event: EventRecord) -> bool:
    return event.count > 1


def event_age_minutes(event: EventRecord, now: datetime) -> int:
    """Whole minutes since the event was last seen, truncated toward zero."""
    return int((now - event.last_seen).total_seconds() / 60)


def is_stale(event: EventRecord, config: FilterConfig, now: datetime) -> bool:
    if config.always_allow_substring in event.message:
        return False
    return event_age_minutes(event, now) > config.max_age_minutes


def classify(event: EventRecord, config: FilterConfig, now: datetime) -> Decision:
    """Return the notify decision and color hint for *event*."""
    age = event_age_minutes(event, now)

    if not reason_matches(event.reason, config.target_reasons):
        return Decision(notify=False, suppressed_by=Gate.REASON, age_minutes=age)
    if not name_matches(event.name, config.allowed_name_patterns):
        return Decision(notify=False, suppressed_by=Gate.NAME, age_minutes=age)

    color = ColorHint.GOOD

    # Recurring events would otherwise alert on every count bump.
    if is_repeat(event):
        return Decision(notify=False, color=color, suppressed_by=Gate.REPEAT, age_minutes=age)

    # The watch replays historical events on (re)connect; only near-real-time ones alert.
    if is_stale(event, config, now):
        return Decision(notify=False, color=color, suppressed_by=Gate.STALE, age_minutes=age)

    return Decision(notify=True, color=color, age_minutes=age)
