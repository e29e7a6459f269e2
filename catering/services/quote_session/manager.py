"""Quote session manager."""
import logging
import uuid
from typing import Dict, Optional

from catering.core.config import settings
from catering.services.catalog.repository import CatalogRepository
from catering.services.quote_session.models import QuoteSession

logger = logging.getLogger(__name__)

# Module-level session storage (persists across requests)
# Drafts are lost on restart; only submitted quotes are persisted
_sessions: Dict[str, QuoteSession] = {}


class QuoteSessionManager:
    """Creates and looks up quote drafts."""

    def __init__(self, catalog_repository: CatalogRepository):
        self.catalog_repository = catalog_repository

    async def create_session(self, table_count: Optional[int] = None) -> QuoteSession:
        """Create a quote draft over a fresh catalog snapshot."""
        session_id = uuid.uuid4().hex
        entries = await self.catalog_repository.get_dish_entries()
        service_prices = await self.catalog_repository.get_service_prices()

        session = QuoteSession(
            session_id=session_id,
            entries=entries,
            service_prices=service_prices,
            default_table_count=(
                table_count if table_count is not None else settings.default_table_count
            ),
        )
        _sessions[session_id] = session

        logger.info(
            f"[QUOTE SESSION] Created {session_id} - {len(entries)} catalog entries"
        )
        return session

    async def get_session(self, session_id: str) -> Optional[QuoteSession]:
        """Get an existing quote draft."""
        return _sessions.get(session_id)

    async def end_session(self, session_id: str) -> None:
        """Forget a quote draft."""
        _sessions.pop(session_id, None)
