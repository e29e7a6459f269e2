"""Order persistence service."""
import logging
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from catering.db.models import Order, Quote
from catering.services.persistence.numbering import generate_order_number

logger = logging.getLogger(__name__)


class OrderPersistenceService:
    """Service for converting quotes into orders."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def convert_quote(
        self,
        quote: Quote,
        deposit: float = 0,
        event_time: str = "11:00",
        location: Optional[str] = None,
    ) -> Order:
        """
        Create a confirmed order from a quote and mark the quote accepted.

        Args:
            quote: Persisted quote
            deposit: Amount paid up front
            event_time: Start time of the event
            location: Used when the quote has no address

        Returns:
            The new Order
        """
        if quote.status == "accepted":
            raise ValueError(f"Quote {quote.quote_number} was already converted")

        total_amount = quote.total or quote.subtotal or 0
        deposit = max(0.0, deposit or 0)

        order = Order(
            order_number=generate_order_number(),
            quote_id=quote.id,
            customer_name=quote.customer_name,
            phone=quote.phone,
            event_date=quote.event_date,
            event_time=event_time or "11:00",
            location=quote.address or location or "",
            total_amount=total_amount,
            deposit=deposit,
            remaining=total_amount - deposit,
            status="confirmed",
            notes=quote.notes or "",
        )
        self.db.add(order)
        quote.status = "accepted"
        await self.db.commit()
        await self.db.refresh(order)

        logger.info(
            f"[ORDERS] Quote {quote.quote_number} converted to {order.order_number} - "
            f"total {total_amount}, deposit {deposit}"
        )
        return order

    async def get_order_by_id(self, order_id: int) -> Optional[Order]:
        """Get order by ID."""
        result = await self.db.execute(select(Order).where(Order.id == order_id))
        return result.scalar_one_or_none()

    async def get_orders_for_quote(self, quote_id: int) -> List[Order]:
        """Orders created from a quote."""
        result = await self.db.execute(select(Order).where(Order.quote_id == quote_id))
        return list(result.scalars().all())
