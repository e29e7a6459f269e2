"""Catalog provider interface."""
from abc import ABC, abstractmethod
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class CatalogEntry(BaseModel):
    """Priced catalog item (dish or fixed service)."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    unit: str = ""
    selling_price: float = 0.0
    cost_price: float = 0.0
    active: bool = True


class Catalog(BaseModel):
    """Catalog snapshot."""

    entries: List[CatalogEntry]


class ServicePrice(BaseModel):
    """Selling and cost price of a fixed service."""

    model_config = ConfigDict(frozen=True)

    selling: float
    cost: float


class ServicePrices(BaseModel):
    """Prices used to seed the auxiliary fee lines."""

    table_inox: ServicePrice
    table_event: ServicePrice
    frame: ServicePrice
    staff: ServicePrice


class CatalogProvider(ABC):
    """Abstract base class for catalog providers."""

    @abstractmethod
    async def get_catalog(self) -> Catalog:
        """Get the full catalog."""
        pass

    @abstractmethod
    async def get_entry_by_id(self, entry_id: str) -> Optional[CatalogEntry]:
        """Get a catalog entry by id."""
        pass
