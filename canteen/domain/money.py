# canteen/domain/money.py
from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value) -> Decimal:
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def line_total(unit_price, quantity: int) -> Decimal:
    return to_money(Decimal(str(unit_price)) * quantity)


def cart_total(lines) -> Decimal:
    """Suma unit_price * quantity po liniach, zaokraglona do groszy."""
    total = sum((Decimal(str(l.unit_price)) * l.quantity for l in lines), ZERO)
    return to_money(total)
