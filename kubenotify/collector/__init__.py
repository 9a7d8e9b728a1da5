"""Collector package for kubenotify.

Reads the Kubernetes event watch stream and decodes each notification into
an EventRecord for the pipeline.

Submodules
----------
decode        -- raw Event object -> EventRecord mapping.
event_watcher -- EventWatcher: cluster-wide or namespaced v1.Event watch.
"""

from kubenotify.collector.decode import event_from_raw, event_from_watch_line, parse_timestamp
from kubenotify.collector.event_watcher import EventWatcher

__all__ = ["EventWatcher", "event_from_raw", "event_from_watch_line", "parse_timestamp"]
