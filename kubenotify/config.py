"""Configuration loading from environment variables."""

from __future__ import annotations

import os

from kubenotify.models.config import (
    APIConfig,
    FilterConfig,
    KubeNotifyConfig,
    LogConfig,
    SlackConfig,
    WatchConfig,
)
from kubenotify.models.notifications import ViewKind


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"KUBENOTIFY_{key}", default)


def _env_bool(key: str, default: bool = False) -> bool:
    val = _env(key, str(default).lower())
    return val.lower() in ("true", "1", "yes")


def _env_int(key: str, default: int, min_val: int | None = None, max_val: int | None = None) -> int:
    raw = _env(key, str(default))
    try:
        val = int(raw)
    except ValueError as exc:
        raise ValueError(f"KUBENOTIFY_{key} must be an integer, got {raw!r}") from exc
    if min_val is not None:
        val = max(val, min_val)
    if max_val is not None:
        val = min(val, max_val)
    return val


def split_csv(value: str) -> tuple[str, ...]:
    """Split a comma-separated list, trimming blanks and dropping empty items."""
    return tuple(item.strip() for item in value.split(",") if item.strip())


def _validate_reasons(value: str) -> tuple[str, ...]:
    reasons = split_csv(value)
    if not reasons:
        raise ValueError("KUBENOTIFY_EVENT_REASON must name at least one event reason")
    return reasons


def _validate_log_level(value: str) -> str:
    valid = {"debug", "info", "warning", "error"}
    if value.lower() not in valid:
        raise ValueError(f"Invalid log level: {value}. Must be one of {valid}")
    return value.lower()


def _validate_view(value: str) -> ViewKind:
    try:
        return ViewKind(value.lower())
    except ValueError as exc:
        valid = {v.value for v in ViewKind}
        raise ValueError(f"Invalid notification view: {value}. Must be one of {valid}") from exc


def load_filter_config(target_reasons: tuple[str, ...] = ()) -> FilterConfig:
    """Load only the classifier settings.

    Non-empty *target_reasons* replace KUBENOTIFY_EVENT_REASON (the offline
    ``check`` command passes its --reason options here); every other
    setting is still read and validated from the environment.
    """
    return FilterConfig(
        target_reasons=target_reasons or _validate_reasons(_env("EVENT_REASON")),
        allowed_name_patterns=split_csv(_env("POD_NAMES")),
        max_age_minutes=_env_int("MAX_AGE_MINUTES", 1, min_val=0),
        always_allow_substring=_env("ALWAYS_ALLOW_SUBSTRING", "killed"),
    )


def load_config() -> KubeNotifyConfig:
    """Load configuration from KUBENOTIFY_* environment variables."""
    return KubeNotifyConfig(
        filter=load_filter_config(),
        watch=WatchConfig(
            namespace=_env("EVENT_NAMESPACE", "").strip(),
            timeout_seconds=_env_int("WATCH_TIMEOUT_SECONDS", 0, min_val=0),
        ),
        slack=SlackConfig(
            token_secret_ref=_env("SLACK_TOKEN_SECRET_REF", "SLACK_TOKEN"),
            channel=_env("SLACK_CHANNEL", ""),
            max_retries=_env_int("SLACK_MAX_RETRIES", 0, min_val=0, max_val=5),
            timeout_seconds=_env_int("SLACK_TIMEOUT", 30, min_val=1, max_val=120),
            view=_validate_view(_env("NOTIFICATION_VIEW", "composite")),
        ),
        api=APIConfig(
            enabled=_env_bool("API_ENABLED", True),
            port=_env_int("API_PORT", 8080, min_val=1024, max_val=65535),
        ),
        log=LogConfig(
            level=_validate_log_level(_env("LOG_LEVEL", "info")),
        ),
    )
