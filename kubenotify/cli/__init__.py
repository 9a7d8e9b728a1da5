"""kubenotify command-line interface.

Exposes:
    cli -- Click group entry point (registered as ``kubenotify`` script).
"""

from kubenotify.cli.main import cli

__all__ = ["cli"]
