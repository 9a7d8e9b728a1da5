"""EventWatcher: core/v1 Event ingestion from a Kubernetes watch stream.

The stream is consumed once, in order. When the API server closes it the
iterator simply ends; there is no relist or resume. ``timeout_seconds`` is
always passed to the watch (0 lets the API server pick its own request
timeout), which makes kubernetes_asyncio stop at end of stream instead of
silently reconnecting.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Mapping
from typing import Any

import aiohttp
import structlog
from kubernetes_asyncio import watch  # type: ignore[import-untyped]
from kubernetes_asyncio.client.exceptions import ApiException  # type: ignore[import-untyped]

from kubenotify.collector.decode import event_from_raw
from kubenotify.errors import EventDecodeError, StreamError
from kubenotify.models.events import EventRecord, WatchEventType

_log = structlog.get_logger(component="collector.event_watcher")


class EventWatcher:
    """Yields decoded EventRecords from the Kubernetes event watch.

    Args:
        core_v1:         ``kubernetes_asyncio.client.CoreV1Api`` instance.
        namespace:       Restrict the watch to one namespace; empty means all.
        timeout_seconds: Server-side watch duration; 0 means the server default.
    """

    def __init__(self, core_v1: Any, namespace: str = "", timeout_seconds: int = 0) -> None:
        self._api = core_v1
        self._namespace = namespace
        self._timeout_seconds = timeout_seconds
        self._watch: watch.Watch | None = None

    async def _raw_stream(self) -> AsyncIterator[Any]:
        kwargs: dict[str, Any] = {"timeout_seconds": self._timeout_seconds}
        if self._namespace:
            func = self._api.list_namespaced_event
            kwargs["namespace"] = self._namespace
        else:
            func = self._api.list_event_for_all_namespaces

        async with watch.Watch() as w:
            self._watch = w
            async for item in w.stream(func, **kwargs):
                yield item

    async def events(self) -> AsyncIterator[EventRecord]:
        """Decode each watch notification in receipt order.

        Raises:
            StreamError:      the server sent an ERROR notification or the
                              connection failed.
            EventDecodeError: an object could not be decoded.
        """
        _log.info("event_watch_started", namespace=self._namespace or "*")
        try:
            async for item in self._raw_stream():
                if not isinstance(item, Mapping):
                    raise EventDecodeError(f"Watch line is not a JSON object: {item!r}")
                event_type = str(item.get("type", ""))
                raw = item.get("raw_object")
                if raw is None:
                    raw = item.get("object")
                # kubernetes_asyncio raises on ERROR lines; kept for other watch sources.
                if event_type == WatchEventType.ERROR:
                    message = raw.get("message", "") if isinstance(raw, Mapping) else str(raw)
                    raise StreamError(f"Watch stream error: {message}")
                yield event_from_raw(raw, event_type)
        except ApiException as exc:
            raise StreamError(f"Watch stream error ({exc.status}): {exc.reason}") from exc
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise StreamError(f"Watch connection failed: {exc}") from exc
        _log.info("event_stream_ended", namespace=self._namespace or "*")

    async def stop(self) -> None:
        if self._watch is not None:
            self._watch.stop()
