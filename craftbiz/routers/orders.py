"""
Order tracker endpoints.

GET  /api/orders/                   orders, newest first
POST /api/orders/                   add an order (client, item and total required)
POST /api/orders/{id}/advance       move the order one step along its status cycle
"""

from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from .. import models, schemas
from ..dependencies import get_stores
from ..stores import StoreRegistry

router = APIRouter(prefix="/orders", tags=["orders"])


def _missing(value) -> bool:
    return value is None or value == ""


@router.get("/", response_model=List[schemas.Order])
def list_orders(stores: StoreRegistry = Depends(get_stores)):
    return stores.orders.all()


@router.post("/", response_model=schemas.Order)
def create_order(order: schemas.OrderCreate, stores: StoreRegistry = Depends(get_stores)):
    if _missing(order.client) or _missing(order.item) or _missing(order.total):
        raise HTTPException(
            status_code=400,
            detail=schemas.Notice(title="Fill in client, item and total").model_dump(),
        )

    now = datetime.utcnow()
    return stores.orders.add(lambda new_id: schemas.Order(
        id=new_id,
        client=order.client,
        item=order.item,
        due_date=order.due_date or now,
        status=models.OrderStatus.PLACED,
        total=order.total,
    ))


@router.post("/{order_id}/advance", response_model=schemas.Order)
def advance_order(order_id: str, stores: StoreRegistry = Depends(get_stores)):
    updated = stores.orders.modify(
        order_id,
        lambda o: o.model_copy(update={"status": models.advance_status(o.status)}),
    )
    if not updated:
        raise HTTPException(status_code=404, detail="Order not found")
    return updated
