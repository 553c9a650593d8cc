"""Background workers."""

from .library_scan_worker import LibraryScanWorker

__all__ = ["LibraryScanWorker"]
