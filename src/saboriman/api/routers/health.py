"""Health check endpoint for Docker probes.

Use case: Docker HEALTHCHECK: curl -f http://localhost:8180/health || exit 1
"""

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

router = APIRouter(tags=["health"])


class HealthStatus(BaseModel):
    """Liveness response."""

    status: str = Field(description="Always 'ok' while the process serves requests")
    app: str = Field(description="Application name")


@router.get("/health", response_model=HealthStatus)
async def health(request: Request) -> HealthStatus:
    """Liveness probe."""
    return HealthStatus(status="ok", app=request.app.state.settings.app_name)
