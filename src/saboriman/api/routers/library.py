"""Library scan endpoints.

Hey future me - POST only TRIGGERS the scan and answers 202 right away. Results are
never pushed anywhere, poll GET /api/library/scan for the last result.
"""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from saboriman.api.dependencies import get_library_scan_worker
from saboriman.application.workers.library_scan_worker import LibraryScanWorker
from saboriman.domain.entities import ScanResult

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/library", tags=["library"])


# =============================================================================
# Response Models
# =============================================================================


class ScanStartedResponse(BaseModel):
    """Response from a scan trigger."""

    message: str
    library_root: str


class ScanResultResponse(BaseModel):
    """Outcome of one scan pass."""

    library_root: str
    scanned_files: int = 0
    added: int = 0
    removed: int = 0
    errors: list[str] = Field(default_factory=list)
    state: str
    error: str | None = None
    started_at: datetime
    completed_at: datetime | None = None

    @classmethod
    def from_result(cls, result: ScanResult) -> "ScanResultResponse":
        return cls(
            library_root=result.library_root,
            scanned_files=result.scanned_files,
            added=result.added,
            removed=result.removed,
            errors=list(result.errors),
            state=result.state.value,
            error=result.error,
            started_at=result.started_at,
            completed_at=result.completed_at,
        )


class ScanStatusResponse(BaseModel):
    """Whether a scan is running, plus the last finished (or failed) scan."""

    running: bool
    last_result: ScanResultResponse | None = None


# =============================================================================
# Endpoints
# =============================================================================


@router.post(
    "/scan",
    response_model=ScanStartedResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def start_scan(
    worker: LibraryScanWorker = Depends(get_library_scan_worker),
) -> ScanStartedResponse:
    """Start a background scan of the configured library root.

    Returns 409 if a scan of that root is already running and 503 if no library
    root is configured (raised as domain exceptions, see exception_handlers).
    """
    root = await worker.trigger()
    return ScanStartedResponse(message="scan started", library_root=str(root))


@router.get("/scan", response_model=ScanStatusResponse)
async def get_scan_status(
    worker: LibraryScanWorker = Depends(get_library_scan_worker),
) -> ScanStatusResponse:
    """Get scan status and the last scan result."""
    last = worker.last_result
    return ScanStatusResponse(
        running=worker.running,
        last_result=ScanResultResponse.from_result(last) if last else None,
    )
