"""Application settings and project snapshot management."""

__version__ = "0.1.0"
__all__ = ["settings", "snapshots"]