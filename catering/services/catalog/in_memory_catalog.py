"""In-memory catalog provider."""
import yaml
from pathlib import Path
from typing import List, Optional
from catering.services.catalog.base import Catalog, CatalogEntry, CatalogProvider
from catering.services.quoting import constants


def _service_entries() -> List[CatalogEntry]:
    """Reserved service entries at their default prices."""
    services = [
        (constants.TABLE_INOX_ID, "Bàn ghế inox", "bàn", constants.DEFAULT_TABLE_INOX_PRICE),
        (constants.TABLE_EVENT_ID, "Bàn ghế sự kiện", "bàn", constants.DEFAULT_TABLE_EVENT_PRICE),
        (constants.FRAME_ID, "Khung rạp", "khung", constants.DEFAULT_FRAME_PRICE),
        (constants.STAFF_ID, "Nhân viên phục vụ", "người", constants.DEFAULT_STAFF_PRICE),
    ]
    return [
        CatalogEntry(
            id=entry_id,
            name=name,
            unit=unit,
            selling_price=selling,
            cost_price=cost,
        )
        for entry_id, name, unit, (selling, cost) in services
    ]


class InMemoryCatalogProvider(CatalogProvider):
    """In-memory catalog provider using YAML configuration."""

    def __init__(self, catalog_file: Optional[str] = None):
        """Initialize with optional catalog file path."""
        if catalog_file is None:
            catalog_file = Path(__file__).parent / "data" / "catalog.yaml"
        self.catalog_file = Path(catalog_file)
        self._catalog: Optional[Catalog] = None

    async def _load_catalog(self) -> Catalog:
        """Load catalog from YAML file."""
        if self._catalog is None:
            if not self.catalog_file.exists():
                # Services only; dishes must come from a catalog file
                self._catalog = Catalog(entries=_service_entries())
            else:
                with open(self.catalog_file, "r", encoding="utf-8") as f:
                    data = yaml.safe_load(f) or {}
                    self._catalog = Catalog(
                        entries=[
                            CatalogEntry(**entry) for entry in data.get("entries", [])
                        ]
                    )
        return self._catalog

    async def get_catalog(self) -> Catalog:
        """Get the full catalog."""
        return await self._load_catalog()

    async def get_entry_by_id(self, entry_id: str) -> Optional[CatalogEntry]:
        """Get a catalog entry by id."""
        catalog = await self._load_catalog()
        for entry in catalog.entries:
            if entry.id == entry_id:
                return entry
        return None
