"""Catalog API endpoints."""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

from catering.core.dependencies import get_catalog_repository
from catering.services.catalog.base import CatalogEntry, ServicePrices
from catering.services.catalog.repository import CatalogRepository
from catering.services.quoting.matcher import autocomplete
from catering.services.quoting.models import SuggestionCandidate

router = APIRouter()
logger = logging.getLogger(__name__)


class CatalogResponse(BaseModel):
    """Catalog response model."""
    entries: List[CatalogEntry]
    service_prices: ServicePrices


@router.get("/api/catalog", response_model=CatalogResponse)
async def get_catalog(
    request: Request,
    catalog_repository: CatalogRepository = Depends(get_catalog_repository),
):
    """Get the dish catalog and the service prices."""
    logger.info(
        f"[CATALOG] Request received - Client: {request.client.host if request.client else 'unknown'}"
    )

    try:
        entries = await catalog_repository.get_dish_entries()
        service_prices = await catalog_repository.get_service_prices()
        logger.info(f"[CATALOG] Catalog loaded - {len(entries)} dish entries")
        return CatalogResponse(entries=entries, service_prices=service_prices)

    except Exception as e:
        logger.error(
            f"[CATALOG] Error fetching catalog - Error: {type(e).__name__}: {str(e)}",
            exc_info=True
        )
        raise HTTPException(status_code=500, detail=f"Error fetching catalog: {str(e)}")


@router.get("/api/catalog/suggest", response_model=List[SuggestionCandidate])
async def suggest_entries(
    q: str = "",
    catalog_repository: CatalogRepository = Depends(get_catalog_repository),
):
    """Autocomplete suggestions for the dish line being typed."""
    entries = await catalog_repository.get_dish_entries()
    suggestions = autocomplete(q, entries)
    logger.debug(f"[CATALOG] Suggest '{q}' - {len(suggestions)} candidates")
    return suggestions
