"""Dependency injection for API endpoints."""

from typing import cast

from fastapi import Request

from saboriman.application.workers.library_scan_worker import LibraryScanWorker
from saboriman.domain.exceptions import ConfigurationError


# Hey future me, the worker is created ONCE in lifespan and lives on app.state. Never build
# one per request: the per-root locks live on the instance, a fresh worker would happily
# start a second scan of the same folder.
def get_library_scan_worker(request: Request) -> LibraryScanWorker:
    """Get the app-wide library scan worker."""
    worker = getattr(request.app.state, "library_scan_worker", None)
    if worker is None:
        raise ConfigurationError("Library scan worker is not running")
    return cast(LibraryScanWorker, worker)
