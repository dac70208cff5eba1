"""
Health check routes for monitoring.
"""
from fastapi import APIRouter, Depends
from pharmatrack.core import config
from pharmatrack.core.dependencies import get_request_store
from pharmatrack.models.dto.drug_dto import HealthResponse
from pharmatrack.services.inventory_store import InventoryStore

router = APIRouter(prefix="/v1/api", tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(store: InventoryStore = Depends(get_request_store)):
    """Health check endpoint for monitoring."""
    return HealthResponse(
        status="healthy",
        service=config.settings.api_title,
        version=config.settings.api_version,
        loaded=store.loaded
    )
