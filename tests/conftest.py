"""Kubernetes API stand-ins shared by unit and integration tests.

The watcher tests drive the real ``kubernetes_asyncio.watch.Watch``; only
the API call underneath it is replaced. ``FakeEventApi`` hands out one
``FakeWatchResponse`` per (re)connect, and each response yields its lines
through ``content.readline()`` and then ``b""`` (end of stream).
"""

from __future__ import annotations

import json
from typing import Any


def watch_line(event_type: str, obj: object) -> bytes:
    """Encode one watch notification the way the API server streams it."""
    return json.dumps({"type": event_type, "object": obj}).encode() + b"\n"


class FakeWatchResponse:
    """Minimal aiohttp ClientResponse used by Watch: content, close, release."""

    def __init__(self, lines: list[bytes]) -> None:
        self._lines = list(lines)
        self.content = self
        self.closed = False

    async def readline(self) -> bytes:
        if not self._lines:
            return b""
        return self._lines.pop(0)

    def close(self) -> None:
        self.closed = True

    def release(self) -> None:
        self.closed = True


class FakeEventApi:
    """CoreV1Api stand-in serving scripted watch responses in order."""

    def __init__(self, *responses: list[bytes]) -> None:
        self._responses = [FakeWatchResponse(lines) for lines in responses]
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def _next_response(self, name: str, kwargs: dict[str, Any]) -> FakeWatchResponse:
        self.calls.append((name, kwargs))
        if not self._responses:
            raise AssertionError("watch reconnected after end of stream")
        return self._responses.pop(0)

    async def list_event_for_all_namespaces(self, **kwargs: Any) -> FakeWatchResponse:
        """List events in all namespaces.

        :return: V1EventList
        """
        return self._next_response("list_event_for_all_namespaces", kwargs)

    async def list_namespaced_event(self, namespace: str, **kwargs: Any) -> FakeWatchResponse:
        """List events in one namespace.

        :return: V1EventList
        """
        return self._next_response("list_namespaced_event", {"namespace": namespace, **kwargs})
