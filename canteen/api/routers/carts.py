#canteen/api/routers/carts.py
from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from canteen.api.auth import CurrentUser, get_current_user
from canteen.data.database import get_db
from canteen.domain.errors import InternalError, InvalidInput, NotFound
from canteen.domain.schemas import (
    CartItemAdded,
    CartItemChanged,
    CartItemIn,
    CartItemUpdate,
    CartOut,
    MessageOut,
)
from canteen.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session):
    return CartService(db)


@router.get("", response_model=CartOut)
def get_cart(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.view(user.user_id)
    except InternalError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("", response_model=CartItemAdded, status_code=201)
def add_item(
    payload: CartItemIn,
    response: Response,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        result = svc.add_item(user.user_id, payload.item_id, payload.quantity)
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InternalError as e:
        raise HTTPException(status_code=500, detail=str(e))

    # dolozenie do istniejacej linii to nie nowy zasob
    if not result["created"]:
        response.status_code = 200
    return result


@router.put("/{cart_item_id}", response_model=CartItemChanged, response_model_exclude_none=True)
def update_item(
    cart_item_id: int,
    payload: CartItemUpdate,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.set_quantity(user.user_id, cart_item_id, payload.quantity)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InternalError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/{cart_item_id}", response_model=MessageOut)
def remove_item(
    cart_item_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        svc.remove_item(user.user_id, cart_item_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InternalError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return {"message": "Item removed from cart"}


@router.delete("", response_model=MessageOut)
def clear_cart(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        svc.clear(user.user_id)
    except InternalError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return {"message": "Cart cleared successfully"}
