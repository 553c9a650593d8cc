"""API routers."""

from fastapi import APIRouter

from saboriman.api.routers import health, library

api_router = APIRouter(prefix="/api")
api_router.include_router(library.router)

__all__ = ["api_router", "health", "library"]
