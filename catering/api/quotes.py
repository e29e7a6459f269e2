"""Quote API endpoints."""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from catering.core.dependencies import get_quote_session_manager
from catering.db.database import get_db
from catering.services.persistence.orders import OrderPersistenceService
from catering.services.persistence.quotes import QuotePersistenceService
from catering.services.quote_session.manager import QuoteSessionManager
from catering.services.quote_session.models import (
    QuoteRecord,
    QuoteSession,
    QuoteState,
    suggested_frame_count,
)
from catering.services.quoting.models import FeeKind, QuoteDisplay, TableType

router = APIRouter()
logger = logging.getLogger(__name__)


class CreateSessionRequest(BaseModel):
    """Create session request model."""
    table_count: Optional[int] = None


class DishesRequest(BaseModel):
    """Dish input request model."""
    dishes_input: str


class DetailsRequest(BaseModel):
    """Quote details and customer info update."""
    table_count: Optional[int] = None
    table_type: Optional[TableType] = None
    staff_count: Optional[int] = None
    frame_count: Optional[int] = None
    customer_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    event_date: Optional[str] = None
    event_type: Optional[str] = None
    notes: Optional[str] = None


class LineItemUpdateRequest(BaseModel):
    """Line item edit request model."""
    quantity: Optional[int] = None
    selling_price: Optional[float] = None
    cost_price: Optional[float] = None


class AcceptSuggestionRequest(BaseModel):
    """Accept suggestion request model."""
    raw_line: str
    entry_id: str
    quantity: Optional[int] = None


class FeeUpdateRequest(BaseModel):
    """Fee line override request; ``reset`` clears both overrides."""
    selling_price: Optional[float] = None
    cost_price: Optional[float] = None
    reset: bool = False


class AdjustmentsRequest(BaseModel):
    """Export adjustments update."""
    table_discount: Optional[float] = None
    frame_discount: Optional[float] = None
    total_discount: Optional[float] = None
    vat_percent: Optional[float] = None
    customer_handles_staff: Optional[bool] = None
    show_individual_prices: Optional[bool] = None


class QuoteStateResponse(QuoteState):
    """Quote state plus UI hints."""
    suggested_frame_count: int = 0


class QuoteResponse(BaseModel):
    """Persisted quote response model."""
    id: int
    quote_number: str
    customer_name: str
    phone: str
    address: Optional[str] = None
    event_type: Optional[str] = None
    event_date: Optional[str] = None
    num_tables: int
    staff_count: int
    table_type: str
    dishes_input: Optional[str] = None
    subtotal: float
    total: float
    status: str
    notes: Optional[str] = None
    created_at: str


class ConvertRequest(BaseModel):
    """Quote to order conversion request."""
    deposit: float = Field(default=0, ge=0)
    event_time: str = "11:00"
    location: Optional[str] = None


class OrderResponse(BaseModel):
    """Order response model."""
    id: int
    order_number: str
    quote_id: int
    customer_name: str
    phone: str
    event_date: Optional[str] = None
    event_time: str
    location: Optional[str] = None
    total_amount: float
    deposit: float
    remaining: float
    status: str


def _state(session: QuoteSession) -> QuoteStateResponse:
    state = session.recompute()
    return QuoteStateResponse(
        **dict(state),
        suggested_frame_count=suggested_frame_count(session.details.table_count),
    )


def _quote_response(quote) -> QuoteResponse:
    return QuoteResponse(
        id=quote.id,
        quote_number=quote.quote_number,
        customer_name=quote.customer_name,
        phone=quote.phone,
        address=quote.address,
        event_type=quote.event_type,
        event_date=quote.event_date,
        num_tables=quote.num_tables,
        staff_count=quote.staff_count,
        table_type=quote.table_type,
        dishes_input=quote.dishes_input,
        subtotal=quote.subtotal,
        total=quote.total,
        status=quote.status,
        notes=quote.notes,
        created_at=quote.created_at.isoformat() if quote.created_at else "",
    )


async def _require_session(
    session_id: str, manager: QuoteSessionManager
) -> QuoteSession:
    session = await manager.get_session(session_id)
    if session is None:
        logger.warning(f"[QUOTES] Session not found - {session_id}")
        raise HTTPException(status_code=404, detail="Quote session not found")
    return session


@router.post("/api/quotes/sessions", response_model=QuoteStateResponse)
async def create_session(
    body: CreateSessionRequest,
    request: Request,
    manager: QuoteSessionManager = Depends(get_quote_session_manager),
):
    """Start a new quote draft."""
    logger.info(
        f"[QUOTES] New session requested - Client: {request.client.host if request.client else 'unknown'}"
    )
    session = await manager.create_session(table_count=body.table_count)
    return _state(session)


@router.get("/api/quotes/sessions/{session_id}", response_model=QuoteStateResponse)
async def get_session_state(
    session_id: str,
    manager: QuoteSessionManager = Depends(get_quote_session_manager),
):
    """Current state of a quote draft."""
    session = await _require_session(session_id, manager)
    return _state(session)


@router.post("/api/quotes/sessions/{session_id}/dishes", response_model=QuoteStateResponse)
async def parse_dishes(
    session_id: str,
    body: DishesRequest,
    manager: QuoteSessionManager = Depends(get_quote_session_manager),
):
    """Parse the dish input into line items."""
    session = await _require_session(session_id, manager)
    session.parse_dishes(body.dishes_input)
    return _state(session)


@router.patch("/api/quotes/sessions/{session_id}/details", response_model=QuoteStateResponse)
async def update_details(
    session_id: str,
    body: DetailsRequest,
    manager: QuoteSessionManager = Depends(get_quote_session_manager),
):
    """Update quote details and customer info."""
    session = await _require_session(session_id, manager)
    session.update_details(
        table_count=body.table_count,
        table_type=body.table_type,
        staff_count=body.staff_count,
        frame_count=body.frame_count,
    )
    customer_changes = {
        "name": body.customer_name,
        "phone": body.phone,
        "address": body.address,
        "event_date": body.event_date,
        "event_type": body.event_type,
        "notes": body.notes,
    }
    session.update_customer(
        **{key: value for key, value in customer_changes.items() if value is not None}
    )
    return _state(session)


@router.patch(
    "/api/quotes/sessions/{session_id}/items/{entry_id}",
    response_model=QuoteStateResponse,
)
async def update_line_item(
    session_id: str,
    entry_id: str,
    body: LineItemUpdateRequest,
    manager: QuoteSessionManager = Depends(get_quote_session_manager),
):
    """Edit quantity, selling price or cost price of a line."""
    session = await _require_session(session_id, manager)
    if session.builder.get_item(entry_id) is None:
        raise HTTPException(status_code=404, detail="Line item not found")

    if body.quantity is not None:
        session.builder.update_quantity(entry_id, body.quantity)
    if body.selling_price is not None:
        session.builder.update_selling_price_override(entry_id, body.selling_price)
    if body.cost_price is not None:
        session.builder.update_cost_price_override(entry_id, body.cost_price)
    return _state(session)


@router.delete(
    "/api/quotes/sessions/{session_id}/items/{entry_id}",
    response_model=QuoteStateResponse,
)
async def remove_line_item(
    session_id: str,
    entry_id: str,
    manager: QuoteSessionManager = Depends(get_quote_session_manager),
):
    """Remove a line from the quote."""
    session = await _require_session(session_id, manager)
    session.builder.remove_line_item(entry_id)
    return _state(session)


@router.post(
    "/api/quotes/sessions/{session_id}/suggestions/accept",
    response_model=QuoteStateResponse,
)
async def accept_suggestion(
    session_id: str,
    body: AcceptSuggestionRequest,
    manager: QuoteSessionManager = Depends(get_quote_session_manager),
):
    """Resolve an unmatched line with one of its suggestions."""
    session = await _require_session(session_id, manager)
    item = session.accept_suggestion(body.raw_line, body.entry_id, body.quantity)
    if item is None:
        raise HTTPException(status_code=404, detail="Suggestion not found")
    return _state(session)


@router.patch(
    "/api/quotes/sessions/{session_id}/fees/{kind}",
    response_model=QuoteStateResponse,
)
async def update_fee(
    session_id: str,
    kind: FeeKind,
    body: FeeUpdateRequest,
    manager: QuoteSessionManager = Depends(get_quote_session_manager),
):
    """Override or reset the prices of a fee line."""
    session = await _require_session(session_id, manager)
    if body.reset:
        session.set_fee_price(kind, None)
        if session.fees[kind].cost_overridable:
            session.set_fee_cost(kind, None)
        return _state(session)

    if body.cost_price is not None and not session.fees[kind].cost_overridable:
        raise HTTPException(
            status_code=400, detail=f"Cost of the {kind} fee cannot be overridden"
        )
    if body.selling_price is not None:
        session.set_fee_price(kind, body.selling_price)
    if body.cost_price is not None:
        session.set_fee_cost(kind, body.cost_price)
    return _state(session)


@router.patch(
    "/api/quotes/sessions/{session_id}/adjustments",
    response_model=QuoteStateResponse,
)
async def update_adjustments(
    session_id: str,
    body: AdjustmentsRequest,
    manager: QuoteSessionManager = Depends(get_quote_session_manager),
):
    """Update discounts, VAT and display mode."""
    session = await _require_session(session_id, manager)
    session.update_adjustments(**body.model_dump())
    return _state(session)


@router.get(
    "/api/quotes/sessions/{session_id}/display", response_model=QuoteDisplay
)
async def get_display(
    session_id: str,
    manager: QuoteSessionManager = Depends(get_quote_session_manager),
):
    """Customer-facing rows for export."""
    session = await _require_session(session_id, manager)
    return session.display()


@router.post("/api/quotes/sessions/{session_id}/submit", response_model=QuoteResponse)
async def submit_quote(
    session_id: str,
    manager: QuoteSessionManager = Depends(get_quote_session_manager),
    db: AsyncSession = Depends(get_db),
):
    """Persist the quote draft as a flattened record."""
    session = await _require_session(session_id, manager)
    if not session.customer.name or not session.customer.phone:
        raise HTTPException(
            status_code=400, detail="customer_name and phone are required"
        )

    try:
        quote = await QuotePersistenceService(db).create_quote(session.to_record())
    except Exception as e:
        logger.error(
            f"[QUOTES] Error saving quote - session: {session_id}, "
            f"Error: {type(e).__name__}: {str(e)}",
            exc_info=True
        )
        raise HTTPException(status_code=500, detail=f"Error saving quote: {str(e)}")

    await manager.end_session(session_id)
    logger.info(f"[QUOTES] Quote {quote.quote_number} saved - total {quote.total}")
    return _quote_response(quote)


@router.post("/api/quotes", response_model=QuoteResponse, status_code=201)
async def create_quote(
    record: QuoteRecord,
    db: AsyncSession = Depends(get_db),
):
    """Persist a flattened quote record directly."""
    if not record.customer_name or not record.phone:
        raise HTTPException(
            status_code=400, detail="customer_name and phone are required"
        )
    quote = await QuotePersistenceService(db).create_quote(record)
    return _quote_response(quote)


@router.get("/api/quotes", response_model=List[QuoteResponse])
async def list_quotes(
    status: Optional[str] = None,
    limit: int = 100,
    db: AsyncSession = Depends(get_db),
):
    """List saved quotes, newest first."""
    try:
        quotes = await QuotePersistenceService(db).list_quotes(status=status, limit=limit)
    except Exception as e:
        logger.error(
            f"[QUOTES] Error fetching quotes - status: {status}, "
            f"Error: {type(e).__name__}: {str(e)}",
            exc_info=True
        )
        raise HTTPException(status_code=500, detail=f"Error fetching quotes: {str(e)}")
    logger.info(f"[QUOTES] Found {len(quotes)} quotes")
    return [_quote_response(quote) for quote in quotes]


@router.get("/api/quotes/{quote_id}", response_model=QuoteResponse)
async def get_quote(quote_id: int, db: AsyncSession = Depends(get_db)):
    """Get a saved quote."""
    quote = await QuotePersistenceService(db).get_quote_by_id(quote_id)
    if quote is None:
        raise HTTPException(status_code=404, detail="Quote not found")
    return _quote_response(quote)


@router.post(
    "/api/quotes/{quote_id}/convert", response_model=OrderResponse, status_code=201
)
async def convert_quote(
    quote_id: int,
    body: ConvertRequest,
    db: AsyncSession = Depends(get_db),
):
    """Convert a saved quote into a confirmed order."""
    quote = await QuotePersistenceService(db).get_quote_by_id(quote_id)
    if quote is None:
        raise HTTPException(status_code=404, detail="Quote not found")

    try:
        order = await OrderPersistenceService(db).convert_quote(
            quote,
            deposit=body.deposit,
            event_time=body.event_time,
            location=body.location,
        )
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return OrderResponse(
        id=order.id,
        order_number=order.order_number,
        quote_id=order.quote_id,
        customer_name=order.customer_name,
        phone=order.phone,
        event_date=order.event_date,
        event_time=order.event_time,
        location=order.location,
        total_amount=order.total_amount,
        deposit=order.deposit,
        remaining=order.remaining,
        status=order.status,
    )
