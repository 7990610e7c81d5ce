# canteen/domain/schemas.py
import math
import re
from datetime import datetime
from decimal import Decimal
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

# gorny limit ilosci w jednej linii koszyka
MAX_QUANTITY = 999

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_quantity(v) -> int | None:
    """
    Liczba calkowita jak parseInt w starym API: "2.5" -> 2, 2.5 -> 2,
    "3 szt" -> 3. None gdy wartosci nie da sie odczytac.
    """
    if isinstance(v, bool) or v is None:
        return None
    if isinstance(v, int):
        return v
    if isinstance(v, float):
        return int(v) if math.isfinite(v) else None
    if isinstance(v, str):
        match = _LEADING_INT.match(v)
        return int(match.group(1)) if match else None
    return None


class CartItemIn(BaseModel):
    """Schema dla dodawania produktu do koszyka."""

    item_id: int = Field(..., gt=0, description="ID produktu (musi byc > 0)")
    # brak, bzdura albo <= 0 traktujemy jak 1
    quantity: int | None = Field(None, le=MAX_QUANTITY, description="Ilosc produktu, domyslnie 1")

    @field_validator("quantity", mode="before")
    @classmethod
    def lenient_quantity(cls, v):
        return parse_quantity(v)


class CartItemUpdate(BaseModel):
    """Schema dla zmiany ilosci. <= 0 usuwa pozycje."""

    quantity: int = Field(..., le=MAX_QUANTITY)

    @field_validator("quantity", mode="before")
    @classmethod
    def numeric_quantity(cls, v):
        quantity = parse_quantity(v)
        if quantity is None:
            raise ValueError("Quantity must be a number")
        return quantity


class CartLineOut(BaseModel):
    cart_item_id: int
    item_id: int
    title: str | None = None
    image_url: str | None = None
    available: bool = True
    unit_price: Decimal
    quantity: int
    line_total: Decimal


class CartOut(BaseModel):
    """Schema dla koszyka (response)."""

    cart_id: int
    items: List[CartLineOut]
    total: Decimal


class CartItemAdded(BaseModel):
    success: bool = True
    cart_item_id: int
    quantity: int


class CartItemChanged(BaseModel):
    success: bool = True
    quantity: int | None = None
    deleted: bool | None = None


class OrderCreated(BaseModel):
    success: bool = True
    order_id: int
    total: Decimal
    message: str = "Order placed successfully"


class OrderLineOut(BaseModel):
    order_item_id: int
    item_id: int
    title: str | None = None
    image_url: str | None = None
    quantity: int
    unit_price: Decimal
    line_total: Decimal


class OrderOut(BaseModel):
    """Schema dla zamowienia (response)."""

    order_id: int
    user_id: int | None = None
    total_amount: Decimal
    order_status: str
    order_date: datetime
    items: List[OrderLineOut]
    formatted_date: str
    formatted_time: str
    formatted_datetime: str
    timezone: str


class AdminOrderOut(OrderOut):
    user_name: str | None = None
    user_email: str | None = None


class OrderStatusIn(BaseModel):
    # walidacja wartosci w OrderStatus.parse, zeby zwrocic 400 a nie 422
    order_status: str | None = None


class OrderStatsOut(BaseModel):
    total_orders: int
    delivered: int
    preparing: int
    ready: int
    total_income: Decimal
    date_range: dict | None = None
    message: str


class MessageOut(BaseModel):
    success: bool = True
    message: str


class ProductIn(BaseModel):
    title: str | None = None
    description: str | None = None
    category: str | None = None
    price: Decimal | None = None
    calories: str | None = None
    image_url: str | None = None
    available: bool | None = None


class ProductOut(BaseModel):
    item_id: int
    title: str
    description: str | None = None
    category: str | None = None
    price: Decimal
    calories: str | None = None
    image_url: str | None = None
    available: bool

    model_config = ConfigDict(from_attributes=True)


class MenuItemOut(BaseModel):
    item_id: int
    title: str
    category: str | None = None
    price: Decimal
    calories: str | None = None
    image_url: str | None = None

    model_config = ConfigDict(from_attributes=True)


class ProductCreated(BaseModel):
    success: bool = True
    item_id: int
    message: str = "Product added successfully"


class CategoryIn(BaseModel):
    category_name: str | None = None


class CategoryOut(BaseModel):
    category_id: int
    category_name: str
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class CategoryCreated(BaseModel):
    success: bool = True
    category_id: int
    category_name: str
    message: str = "Category added successfully"
