"""FastAPI dependencies."""
from fastapi import Depends

from catering.core.config import settings
from catering.services.catalog.repository import CatalogRepository
from catering.services.catalog.in_memory_catalog import InMemoryCatalogProvider
from catering.services.quote_session.manager import QuoteSessionManager


def get_catalog_repository() -> CatalogRepository:
    """Get catalog repository instance."""
    return CatalogRepository(provider=InMemoryCatalogProvider(settings.catalog_file))


def get_quote_session_manager(
    catalog_repository: CatalogRepository = Depends(get_catalog_repository),
) -> QuoteSessionManager:
    """Get quote session manager instance."""
    return QuoteSessionManager(catalog_repository)
