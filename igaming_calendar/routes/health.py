"""Health check endpoints for monitoring."""
from fastapi import APIRouter, Request

from igaming_calendar.main_config import fastapi_config, get_store_config

router = APIRouter(
    prefix="/api",
    tags=["health"],
)


@router.get("/")
async def root():
    """API root endpoint."""
    return {
        "message": fastapi_config.title,
        "version": fastapi_config.version,
        "docs": fastapi_config.docs_url,
    }


@router.get("/health")
async def health_check(request: Request):
    """Health check endpoint; reports whether a document store is connected."""
    store = getattr(request.app.state, "document_store", None)
    return {
        "status": "healthy",
        "store": {"backend": get_store_config().backend.value, "configured": store is not None},
    }
