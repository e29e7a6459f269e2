"""Database models."""
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, Float
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


class Quote(Base):
    """Submitted quote (flattened; line-item overrides are not stored)."""

    __tablename__ = "quotes"

    id = Column(Integer, primary_key=True, index=True)
    quote_number = Column(String, unique=True, index=True, nullable=False)
    customer_name = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    address = Column(String, nullable=True)
    event_type = Column(String, nullable=True)
    event_date = Column(String, nullable=True)
    num_tables = Column(Integer, default=1, nullable=False)
    staff_count = Column(Integer, default=0, nullable=False)
    table_type = Column(String, default="none", nullable=False)
    dishes_input = Column(Text, nullable=True)
    subtotal = Column(Float, default=0, nullable=False)
    total = Column(Float, default=0, nullable=False)
    status = Column(String, default="draft", nullable=False)  # draft, sent, accepted, rejected
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    orders = relationship("Order", back_populates="quote")


class Order(Base):
    """Order converted from an accepted quote."""

    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    order_number = Column(String, unique=True, index=True, nullable=False)
    quote_id = Column(Integer, ForeignKey("quotes.id"), nullable=False)
    customer_name = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    event_date = Column(String, nullable=True)
    event_time = Column(String, default="11:00", nullable=False)
    location = Column(String, nullable=True)
    total_amount = Column(Float, default=0, nullable=False)
    deposit = Column(Float, default=0, nullable=False)
    remaining = Column(Float, default=0, nullable=False)
    status = Column(String, default="confirmed", nullable=False)  # confirmed, completed, cancelled
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    quote = relationship("Quote", back_populates="orders")
