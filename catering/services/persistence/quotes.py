"""Quote persistence service."""
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc

from catering.db.models import Quote
from catering.services.persistence.numbering import generate_quote_number
from catering.services.quote_session.models import QuoteRecord


class QuotePersistenceService:
    """Service for persisting submitted quotes."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_quote(self, record: QuoteRecord) -> Quote:
        """Store a flattened quote record as a draft."""
        quote = Quote(
            quote_number=generate_quote_number(),
            customer_name=record.customer_name,
            phone=record.phone,
            address=record.address,
            event_type=record.event_type,
            event_date=record.event_date,
            num_tables=record.num_tables or 1,
            staff_count=record.staff_count,
            table_type=record.table_type,
            dishes_input=record.dishes_input,
            subtotal=record.subtotal or 0,
            total=record.total or 0,
            status="draft",
            notes=record.notes,
        )
        self.db.add(quote)
        await self.db.commit()
        await self.db.refresh(quote)
        return quote

    async def get_quote_by_id(self, quote_id: int) -> Optional[Quote]:
        """Get quote by ID."""
        result = await self.db.execute(select(Quote).where(Quote.id == quote_id))
        return result.scalar_one_or_none()

    async def list_quotes(self, status: Optional[str] = None, limit: int = 100) -> List[Quote]:
        """List quotes, newest first, optionally filtered by status."""
        query = select(Quote).order_by(desc(Quote.created_at), desc(Quote.id)).limit(limit)
        if status:
            query = query.where(Quote.status == status)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def update_quote_status(self, quote_id: int, status: str) -> Optional[Quote]:
        """Update quote status."""
        quote = await self.get_quote_by_id(quote_id)
        if quote:
            quote.status = status
            await self.db.commit()
            await self.db.refresh(quote)
        return quote
