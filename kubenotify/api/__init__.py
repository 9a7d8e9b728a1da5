"""Status API layer for kubenotify.

Exposes:
    create_app -- FastAPI application factory.
    build_app  -- Alias for create_app (used by kubenotify.app bootstrap).
"""

from kubenotify.api.app import create_app

build_app = create_app

__all__ = ["build_app", "create_app"]
