# canteen/api/routers/orders.py
from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from canteen.api.auth import CurrentUser, get_current_user, require_admin
from canteen.data.database import get_db
from canteen.domain.errors import EmptyCart, InternalError, InvalidStatus, NotFound, OrderCreationFailed
from canteen.domain.schemas import (
    AdminOrderOut,
    MessageOut,
    OrderCreated,
    OrderOut,
    OrderStatsOut,
    OrderStatusIn,
)
from canteen.services.order_service import OrderService

router = APIRouter(tags=["orders"])


def get_service(db: Session):
    return OrderService(db)


@router.post("/order", response_model=OrderCreated, status_code=201)
def create_order(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Tworzy zamówienie z koszyka uzytkownika i czysci koszyk.
    Wysyła powiadomienie asynchronicznie.
    """
    svc = get_service(db)
    try:
        return svc.checkout(user.user_id)
    except EmptyCart as e:
        raise HTTPException(status_code=400, detail=str(e))
    except OrderCreationFailed as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/orders", response_model=List[OrderOut])
def list_orders(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.list_user_orders(user.user_id)
    except InternalError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/orders/stats", response_model=OrderStatsOut)
def order_stats(
    date_from: date | None = Query(None, alias="from"),
    date_to: date | None = Query(None, alias="to"),
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.stats(date_from, date_to)
    except InternalError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/admin/orders", response_model=List[AdminOrderOut])
def list_all_orders(
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.list_all_orders()
    except InternalError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/admin/orders/{order_id}/status", response_model=MessageOut)
def update_order_status(
    order_id: int,
    payload: OrderStatusIn,
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        svc.set_status(order_id, payload.order_status)
    except InvalidStatus as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InternalError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return {"message": "Order status updated successfully"}
