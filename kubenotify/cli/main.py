"""kubenotify command-line interface.

``kubenotify run`` starts the watcher service. ``kubenotify check`` is an
offline dry-run: it replays saved watch output through the classifier and
formatter and prints what would have been sent, without touching Slack.
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import replace
from datetime import UTC, datetime
from typing import TextIO

import click

from kubenotify.collector.decode import event_from_watch_line, parse_timestamp
from kubenotify.config import load_filter_config
from kubenotify.errors import EventDecodeError
from kubenotify.models.config import FilterConfig
from kubenotify.models.notifications import ViewKind
from kubenotify.notifications.formatter import format_notification
from kubenotify.rules.classifier import classify


@click.group()
@click.version_option(package_name="kubenotify")
def cli() -> None:
    """Forward selected Kubernetes events to Slack."""


@cli.command()
def run() -> None:
    """Watch the cluster event stream and send notifications."""
    from kubenotify.app import main

    asyncio.run(main())


def _filter_from_options(
    reasons: tuple[str, ...],
    pod_names: tuple[str, ...],
    max_age_minutes: int | None,
) -> FilterConfig:
    try:
        base = load_filter_config(target_reasons=reasons)
    except ValueError as exc:
        hint = "" if reasons else " (or pass --reason)"
        raise click.UsageError(f"{exc}{hint}") from exc

    if pod_names:
        base = replace(base, allowed_name_patterns=pod_names)
    if max_age_minutes is not None:
        base = replace(base, max_age_minutes=max_age_minutes)
    return base


@cli.command()
@click.argument("source", type=click.File("r"), default="-")
@click.option("--reason", "reasons", multiple=True, help="Target reason (repeatable). Overrides KUBENOTIFY_EVENT_REASON.")
@click.option("--pod-name", "pod_names", multiple=True, help="Pod name substring (repeatable). Overrides KUBENOTIFY_POD_NAMES.")
@click.option("--max-age-minutes", type=click.IntRange(min=0), default=None, help="Staleness threshold.")
@click.option("--now", "now_text", default=None, help="Evaluate as of this RFC 3339 time (default: current time).")
@click.option(
    "--view",
    type=click.Choice([v.value for v in ViewKind]),
    default=ViewKind.COMPOSITE.value,
    show_default=True,
)
@click.option("--show-payload", is_flag=True, help="Print the Slack attachment for events that would notify.")
def check(
    source: TextIO,
    reasons: tuple[str, ...],
    pod_names: tuple[str, ...],
    max_age_minutes: int | None,
    now_text: str | None,
    view: str,
    show_payload: bool,
) -> None:
    """Dry-run the filter over JSON-lines watch output in SOURCE (default stdin)."""
    filter_config = _filter_from_options(reasons, pod_names, max_age_minutes)
    try:
        now = parse_timestamp(now_text) if now_text else datetime.now(tz=UTC)
    except EventDecodeError as exc:
        raise click.BadParameter(str(exc), param_hint="--now") from exc
    assert now is not None

    notified = 0
    total = 0
    for lineno, line in enumerate(source, start=1):
        line = line.strip()
        if not line:
            continue
        try:
            event = event_from_watch_line(json.loads(line))
        except (json.JSONDecodeError, EventDecodeError) as exc:
            raise click.ClickException(f"line {lineno}: {exc}") from exc

        total += 1
        decision = classify(event, filter_config, now)
        if decision.notify:
            notified += 1
            click.echo(f"NOTIFY     {event.namespace}/{event.name} reason={event.reason}")
            if show_payload:
                payload = format_notification(event, decision.color, ViewKind(view))
                click.echo(json.dumps(payload.to_attachment(), indent=2))
        else:
            gate = decision.suppressed_by.value if decision.suppressed_by else ""
            click.echo(
                f"SUPPRESSED {event.namespace}/{event.name} reason={event.reason} "
                f"gate={gate} age={decision.age_minutes}m count={event.count}"
            )

    click.echo(f"{notified}/{total} events would notify")
