"""Exception hierarchy for kubenotify.

The classifier and formatter never raise; everything here belongs to the
I/O collaborators around them.
"""

from __future__ import annotations


class KubeNotifyError(Exception):
    """Base class for all kubenotify errors."""


class EventDecodeError(KubeNotifyError):
    """A watch notification could not be mapped to an EventRecord."""


class StreamError(KubeNotifyError):
    """The event watch stream reported an error notification."""


class DeliveryError(KubeNotifyError):
    """A notification could not be delivered."""


class TransientDeliveryError(DeliveryError):
    """Delivery failed in a way that may succeed on retry.

    Args:
        message:     Human-readable failure description.
        retry_after: Seconds the server asked us to wait, if it said so.
    """

    def __init__(self, message: str, retry_after: float | None = None) -> None:
        super().__init__(message)
        self.retry_after = retry_after


class TerminalDeliveryError(DeliveryError):
    """Delivery failed and retrying will not help (bad token, unknown channel)."""
