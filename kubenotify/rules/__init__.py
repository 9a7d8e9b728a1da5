"""Event filtering rules.

Exposes:
    classify -- pure notify/suppress decision for one EventRecord.
    Decision -- result of classify().
    Gate     -- filter stage that suppressed an event.
"""

from kubenotify.rules.classifier import (
    Decision,
    Gate,
    classify,
    event_age_minutes,
    is_repeat,
    is_stale,
    name_matches,
    reason_matches,
)

__all__ = [
    "Decision",
    "Gate",
    "classify",
    "event_age_minutes",
    "is_repeat",
    "is_stale",
    "name_matches",
    "reason_matches",
]
