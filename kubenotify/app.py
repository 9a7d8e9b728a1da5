"""Application bootstrap for kubenotify.

Startup order: config → logging → K8s client → notifications → pipeline
              → collector → REST

The process ends when the watch stream ends (exit 0), when the pipeline
fails (exit 1) or on SIGTERM/SIGINT. Shutdown runs in reverse order.
"""

from __future__ import annotations

import asyncio
import signal
from typing import TYPE_CHECKING, Any

from kubenotify.config import load_config
from kubenotify.errors import KubeNotifyError
from kubenotify.models.config import KubeNotifyConfig
from kubenotify.observability.logging import get_logger, setup_logging

if TYPE_CHECKING:
    import structlog

    from kubenotify.collector.event_watcher import EventWatcher
    from kubenotify.notifications.manager import DeliveryManager
    from kubenotify.pipeline import EventPipeline

_SHUTDOWN_GRACE_SECONDS = 15


class _ComponentError(Exception):
    """Raised when a mandatory component fails to start."""

    def __init__(self, component: str, cause: Exception) -> None:
        super().__init__(f"Component '{component}' failed to start: {cause}")
        self.component = component
        self.cause = cause


class KubeNotifyApp:
    """Owns the watch, the pipeline task, Slack delivery and the status server.

    ``stop()`` may be called on an app that never started or already stopped.
    """

    def __init__(self) -> None:
        self.config: KubeNotifyConfig | None = None
        self._log: structlog.stdlib.BoundLogger = get_logger("app")

        self._api_client: Any = None
        self._delivery: DeliveryManager | None = None
        self._pipeline: EventPipeline | None = None
        self._collector: EventWatcher | None = None

        self._pipeline_task: asyncio.Task[None] | None = None
        self._tasks: list[asyncio.Task[Any]] = []

    async def start(self) -> None:
        """Raises _ComponentError if a mandatory component cannot start."""
        try:
            self.config = load_config()
        except ValueError as exc:
            raise _ComponentError("config", exc) from exc

        setup_logging(self.config.log.level)
        self._log = get_logger("app")
        self._log.info(
            "kubenotify starting",
            version=_kubenotify_version(),
            reasons=list(self.config.filter.target_reasons),
            pod_names=list(self.config.filter.allowed_name_patterns),
            namespace=self.config.watch.namespace or "*",
        )

        await self._connect_kubernetes()

        try:
            from kubenotify.notifications import build_delivery_manager

            self._delivery = build_delivery_manager(self.config.slack)
        except ValueError as exc:
            raise _ComponentError("notifications", exc) from exc

        from kubenotify.pipeline import EventPipeline

        self._pipeline = EventPipeline(
            filter_config=self.config.filter,
            delivery=self._delivery,
            view=self.config.slack.view,
        )

        self._start_collector()
        await self._start_rest()
        self._log.info("kubenotify started")

    async def _connect_kubernetes(self) -> None:
        """Load in-cluster config, falling back to kubeconfig, and open one ApiClient."""
        import kubernetes_asyncio.config as k8s_config  # type: ignore[import-untyped]
        from kubernetes_asyncio import client as k8s_client  # type: ignore[import-untyped]

        try:
            try:
                k8s_config.load_incluster_config()
                source = "in-cluster service account"
            except k8s_config.ConfigException:
                await k8s_config.load_kube_config()
                source = "kubeconfig"
        except Exception as exc:
            raise _ComponentError("k8s_client", exc) from exc
        self._api_client = k8s_client.ApiClient()
        self._log.info("k8s client configured", source=source)

    def _start_collector(self) -> None:
        assert self.config is not None
        assert self._pipeline is not None
        from kubernetes_asyncio import client as k8s_client  # type: ignore[import-untyped]

        from kubenotify.collector.event_watcher import EventWatcher

        self._collector = EventWatcher(
            k8s_client.CoreV1Api(self._api_client),
            namespace=self.config.watch.namespace,
            timeout_seconds=self.config.watch.timeout_seconds,
        )
        self._pipeline_task = asyncio.create_task(
            self._pipeline.run(self._collector.events()),
            name="event-pipeline",
        )
        self._tasks.append(self._pipeline_task)

    async def _start_rest(self) -> None:
        """The status server is optional: a start failure is only logged."""
        assert self.config is not None
        if not self.config.api.enabled:
            self._log.info("rest api disabled")
            return
        try:
            import uvicorn  # type: ignore[import-untyped]

            from kubenotify.api import build_app

            server = uvicorn.Server(
                uvicorn.Config(
                    app=build_app(pipeline=self._pipeline, config=self.config),
                    host="0.0.0.0",
                    port=self.config.api.port,
                    log_config=None,
                    access_log=False,
                )
            )
        except Exception as exc:
            self._log.warning("rest api failed to start; status endpoints unavailable", error=str(exc))
            return
        self._tasks.append(asyncio.create_task(server.serve(), name="rest-server"))
        self._log.info("rest api started", port=self.config.api.port)

    async def wait(self) -> None:
        """Block until the pipeline task finishes; re-raise its failure."""
        if self._pipeline_task is None:
            return
        await asyncio.wait({self._pipeline_task})
        if not self._pipeline_task.cancelled() and self._pipeline_task.exception() is not None:
            raise self._pipeline_task.exception()  # type: ignore[misc]

    def request_shutdown(self) -> None:
        """Signal handler: cancel the pipeline so ``wait()`` returns."""
        self._log.info("shutdown requested")
        if self._pipeline_task is not None:
            self._pipeline_task.cancel()

    async def stop(self) -> None:
        """Stop the watch, cancel tasks, then close Slack and Kubernetes clients."""
        if not self._tasks and self._delivery is None and self._api_client is None:
            return
        self._log.info("kubenotify shutting down")

        if self._collector is not None:
            await self._collector.stop()
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks.clear()

        if self._delivery is not None:
            try:
                await asyncio.wait_for(self._delivery.stop(), timeout=_SHUTDOWN_GRACE_SECONDS)
            except Exception as exc:
                self._log.error("slack client close failed", error=str(exc))
            self._delivery = None

        if self._api_client is not None:
            try:
                await self._api_client.close()
            except Exception as exc:
                self._log.debug("k8s client close raised (non-fatal)", error=str(exc))
            self._api_client = None

        self._log.info("kubenotify stopped")


def _kubenotify_version() -> str:
    from kubenotify import __version__

    return __version__


async def main() -> None:
    """Run until the stream ends, the pipeline fails or a signal arrives."""
    app = KubeNotifyApp()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, app.request_shutdown)

    try:
        await app.start()
        await app.wait()
    except _ComponentError as exc:
        get_logger("app").critical("fatal startup error", component=exc.component, error=str(exc.cause))
        raise SystemExit(1) from exc
    except KubeNotifyError as exc:
        get_logger("app").critical("fatal pipeline error", error_type=type(exc).__name__, error=str(exc))
        raise SystemExit(1) from exc
    finally:
        await app.stop()
