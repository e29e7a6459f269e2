"""Catalog repository."""
import logging
from typing import List, Optional

from catering.services.catalog.base import (
    Catalog,
    CatalogEntry,
    CatalogProvider,
    ServicePrice,
    ServicePrices,
)
from catering.services.quoting import constants

logger = logging.getLogger(__name__)


class CatalogRepository:
    """Repository for catalog operations."""

    def __init__(self, provider: CatalogProvider):
        self.provider = provider

    async def get_catalog(self) -> Catalog:
        """Get the full catalog."""
        return await self.provider.get_catalog()

    async def get_entry_by_id(self, entry_id: str) -> Optional[CatalogEntry]:
        """Get entry by id."""
        return await self.provider.get_entry_by_id(entry_id)

    async def get_dish_entries(self) -> List[CatalogEntry]:
        """Active entries that can appear as quote lines, in catalog order."""
        catalog = await self.get_catalog()
        return [
            entry
            for entry in catalog.entries
            if entry.active and entry.id not in constants.RESERVED_IDS
        ]

    async def get_service_prices(self) -> ServicePrices:
        """Prices of the reserved service entries, with fallbacks."""
        catalog = await self.get_catalog()
        by_id = {entry.id: entry for entry in catalog.entries}

        def _price(entry_id: str, default: tuple) -> ServicePrice:
            entry = by_id.get(entry_id)
            if entry is None:
                logger.warning(
                    f"[CATALOG] Reserved entry {entry_id} missing, using default price {default[0]}"
                )
                return ServicePrice(selling=default[0], cost=default[1])
            return ServicePrice(selling=entry.selling_price, cost=entry.cost_price)

        return ServicePrices(
            table_inox=_price(constants.TABLE_INOX_ID, constants.DEFAULT_TABLE_INOX_PRICE),
            table_event=_price(constants.TABLE_EVENT_ID, constants.DEFAULT_TABLE_EVENT_PRICE),
            frame=_price(constants.FRAME_ID, constants.DEFAULT_FRAME_PRICE),
            staff=_price(constants.STAFF_ID, constants.DEFAULT_STAFF_PRICE),
        )
