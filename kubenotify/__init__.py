"""kubenotify: forward selected Kubernetes events to a Slack channel."""

__version__ = "0.1.0"
