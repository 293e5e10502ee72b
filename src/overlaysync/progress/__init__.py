"""Progress displays."""

from overlaysync.progress.rich import RichBootstrapProgress

__all__ = ["RichBootstrapProgress"]
