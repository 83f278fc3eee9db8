from sqlalchemy import Column, String, Text, DateTime
from datetime import datetime
from .database import Base
import enum


class OrderStatus(str, enum.Enum):
    PLACED = "placed"
    IN_PROGRESS = "in-progress"
    DELIVERED = "delivered"
    PAID = "paid"


# Forward-only; PAID is terminal and maps to itself.
STATUS_CYCLE = {
    OrderStatus.PLACED: OrderStatus.IN_PROGRESS,
    OrderStatus.IN_PROGRESS: OrderStatus.DELIVERED,
    OrderStatus.DELIVERED: OrderStatus.PAID,
    OrderStatus.PAID: OrderStatus.PAID,
}


def advance_status(status: OrderStatus) -> OrderStatus:
    return STATUS_CYCLE[OrderStatus(status)]


class StoredRecord(Base):
    """One serialized collection per row, keyed by its namespaced storage key."""
    __tablename__ = "kv_records"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
