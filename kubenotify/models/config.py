"""Configuration data structures."""

from __future__ import annotations

from dataclasses import dataclass, field

from kubenotify.models.notifications import ViewKind


@dataclass(frozen=True)
class FilterConfig:
    """Static event filter settings consumed by the classifier.

    ``target_reasons`` is matched with OR semantics; no reason takes
    priority over another. An empty ``allowed_name_patterns`` means no
    name restriction.
    """

    target_reasons: tuple[str, ...]
    allowed_name_patterns: tuple[str, ...] = ()
    max_age_minutes: int = 1
    always_allow_substring: str = "killed"


@dataclass
class WatchConfig:
    """Event watch stream configuration.

    ``timeout_seconds`` bounds the single watch request; 0 leaves it to the
    API server. The process exits when the server closes the stream.
    """

    namespace: str = ""
    timeout_seconds: int = 0


@dataclass
class SlackConfig:
    """Slack delivery configuration.

    ``token_secret_ref`` is the name of the environment variable holding
    the bot token, not the token itself.
    """

    token_secret_ref: str = "SLACK_TOKEN"
    channel: str = ""
    max_retries: int = 0
    timeout_seconds: int = 30
    view: ViewKind = ViewKind.COMPOSITE


@dataclass
class APIConfig:
    """Status API configuration."""

    enabled: bool = True
    port: int = 8080


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str = "info"


@dataclass
class KubeNotifyConfig:
    """Top-level kubenotify configuration."""

    filter: FilterConfig
    watch: WatchConfig = field(default_factory=WatchConfig)
    slack: SlackConfig = field(default_factory=SlackConfig)
    api: APIConfig = field(default_factory=APIConfig)
    log: LogConfig = field(default_factory=LogConfig)
