"""Logging and metrics for kubenotify."""
