# canteen/domain/order_status.py
from enum import Enum

from canteen.domain.errors import InvalidStatus


class OrderStatus(str, Enum):
    """
    Statusy zamowienia.

    Graf przejsc (INTENDED_TRANSITIONS) jest tylko doradczy - serwer
    przyjmuje kazdy rozpoznany status z dowolnego innego.
    """

    PLACED = "Placed"
    PREPARING = "Preparing"
    READY = "Ready"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"

    @classmethod
    def parse(cls, value) -> "OrderStatus":
        try:
            return cls(value)
        except ValueError:
            raise InvalidStatus(f"Invalid order status: {value!r}")

    @property
    def is_terminal(self) -> bool:
        return not INTENDED_TRANSITIONS[self]

    def intended_next(self) -> frozenset:
        return INTENDED_TRANSITIONS[self]

    def can_transition_to(self, new_status: "OrderStatus") -> bool:
        return new_status in INTENDED_TRANSITIONS[self]


INTENDED_TRANSITIONS = {
    OrderStatus.PLACED: frozenset({OrderStatus.PREPARING, OrderStatus.READY, OrderStatus.CANCELLED}),
    OrderStatus.PREPARING: frozenset({OrderStatus.READY, OrderStatus.CANCELLED}),
    OrderStatus.READY: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}
