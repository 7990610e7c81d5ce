# canteen/services/order_service.py
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Dict, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from canteen.data.models.order import OrderModel
from canteen.data.models.order_item import OrderItemModel
from canteen.domain.errors import EmptyCart, InternalError, NotFound, OrderCreationFailed
from canteen.domain.money import ZERO, cart_total, line_total, to_money
from canteen.domain.order_status import OrderStatus
from canteen.repos.cart_repo import CartRepo
from canteen.repos.order_repo import OrderRepo
from canteen.services.notification_service import NotificationService
from canteen.utils.logging import get_logger
from canteen.utils.settings import DISPLAY_TIMEZONE_LABEL, DISPLAY_UTC_OFFSET_MINUTES

logger = get_logger(__name__)

DISPLAY_TZ = timezone(timedelta(minutes=DISPLAY_UTC_OFFSET_MINUTES))


def format_order_date(order_date: datetime) -> Dict[str, str]:
    # SQLite zwraca naiwne daty - zapisujemy zawsze w UTC
    if order_date.tzinfo is None:
        order_date = order_date.replace(tzinfo=timezone.utc)
    local = order_date.astimezone(DISPLAY_TZ)

    formatted_date = local.strftime("%d/%m/%Y")
    formatted_time = local.strftime("%I:%M %p").lower()
    return {
        "formatted_date": formatted_date,
        "formatted_time": formatted_time,
        "formatted_datetime": f"{formatted_date}, {formatted_time}",
        "timezone": DISPLAY_TIMEZONE_LABEL,
    }


class OrderService:
    """
    Serwis odpowiedzialny za domenę zamówień.
    Separacja od CartService - checkout czyta koszyk przez CartRepo,
    ale transakcja nalezy do zamowienia.
    """

    def __init__(self, db: Session, notification_service: NotificationService | None = None):
        self.db = db
        self.repo = OrderRepo(db)
        self.cart_repo = CartRepo(db)
        self.notification_service = notification_service or NotificationService()

    def checkout(self, user_id: int) -> Dict[str, Any]:
        """
        Use Case: Tworzenie zamówienia z koszyka.

        1. Blokuje koszyk uzytkownika (FOR UPDATE), pusty -> EmptyCart
        2. Oblicza total
        3. Tworzy zamówienie ze statusem Placed
        4. Kopiuje linie koszyka do order_items (snapshot ceny i ilosci)
        5. Czysci koszyk
        6. Commit i powiadomienie (async)

        Kroki 3-5 w jednej transakcji - przy bledzie rollback calosci.
        Dostepnosc produktow nie jest sprawdzana ponownie.
        """
        try:
            cart = self.cart_repo.get_cart_by_user(user_id, for_update=True)
            items = self.cart_repo.get_cart_items(cart.cart_id) if cart else []

            if not items:
                # zwolnij blokade koszyka
                self.db.rollback()
                logger.warning(f"Checkout rejected for user {user_id}: cart is empty")
                raise EmptyCart("Cart is empty")

            total = cart_total(items)

            order = OrderModel(
                user_id=user_id,
                total_amount=total,
                order_status=OrderStatus.PLACED.value,
                order_date=datetime.now(timezone.utc),
            )
            order.items = [
                OrderItemModel(
                    item_id=i.item_id,
                    quantity=i.quantity,
                    unit_price=to_money(i.unit_price),
                )
                for i in items
            ]

            created_order = self.repo.add_order(order)
            order_id = created_order.order_id

            self.cart_repo.delete_cart_items(cart.cart_id, [i.cart_item_id for i in items])
            self.db.commit()

        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Create order error for user {user_id}, rolled back: {e}")
            raise OrderCreationFailed("Failed to create order") from e

        logger.info(
            f"Order {order_id} created from cart {cart.cart_id} "
            f"({len(items)} line(s), total {total})"
        )

        # Wyślij powiadomienie asynchronicznie
        self.notification_service.send_order_placed(user_id, order_id, total)

        return {"order_id": order_id, "total": total}

    def set_status(self, order_id: int, new_status) -> Dict[str, Any]:
        """
        Use Case: Zmiana statusu przez admina.

        Walidowana jest tylko wartosc statusu. Przejscia spoza grafu
        (np. Delivered -> Placed) sa przyjmowane i logowane.
        """
        status = OrderStatus.parse(new_status)

        order = self.repo.get_order(order_id)
        if not order:
            raise NotFound("Order not found")

        previous = order.order_status
        try:
            expected = OrderStatus(previous).intended_next()
        except ValueError:
            expected = frozenset()

        if previous != status.value and status not in expected:
            expected_names = ", ".join(sorted(s.value for s in expected)) or "none"
            logger.warning(
                f"Order {order_id}: status change {previous} -> {status.value} "
                f"is outside the usual lifecycle (expected: {expected_names}), applying anyway"
            )

        try:
            self.repo.update_order_status(order, status.value)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Update order status error for order {order_id}: {e}")
            raise InternalError("Failed to update order status") from e

        logger.info(f"Order {order_id} status {previous} -> {status.value}")

        self.notification_service.send_status_changed(order.user_id, order_id, status.value)

        return {"order_id": order_id, "order_status": status.value}

    #query
    def _order_lines(self, order_id: int) -> List[Dict[str, Any]]:
        return [
            {
                "order_item_id": line.order_item_id,
                "item_id": line.item_id,
                "title": title,
                "image_url": image_url,
                "quantity": line.quantity,
                "unit_price": to_money(line.unit_price),
                "line_total": line_total(line.unit_price, line.quantity),
            }
            for line, title, image_url in self.repo.get_order_lines(order_id)
        ]

    def _serialize(self, order: OrderModel) -> Dict[str, Any]:
        return {
            "order_id": order.order_id,
            "user_id": order.user_id,
            "total_amount": to_money(order.total_amount),
            "order_status": order.order_status,
            "order_date": order.order_date,
            "items": self._order_lines(order.order_id),
            **format_order_date(order.order_date),
        }

    def list_user_orders(self, user_id: int) -> List[Dict[str, Any]]:
        try:
            return [self._serialize(o) for o in self.repo.list_orders_by_user(user_id)]
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Get orders error for user {user_id}: {e}")
            raise InternalError("Failed to fetch orders") from e

    def list_all_orders(self) -> List[Dict[str, Any]]:
        try:
            return [
                {**self._serialize(order), "user_name": name, "user_email": email}
                for order, name, email in self.repo.list_orders_with_users()
            ]
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Admin orders fetch error: {e}")
            raise InternalError("Failed to fetch orders") from e

    def stats(self, date_from: date | None = None, date_to: date | None = None) -> Dict[str, Any]:
        """Statystyki zamowien, daty wlacznie (po dacie UTC zamowienia)."""
        start = datetime.combine(date_from, time.min, tzinfo=timezone.utc) if date_from else None
        end = datetime.combine(date_to + timedelta(days=1), time.min, tzinfo=timezone.utc) if date_to else None

        try:
            total_orders = self.repo.count_orders(start, end)
            by_status = self.repo.count_by_status(start, end)
            income = self.repo.sum_income(start, end)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Order stats fetch error: {e}")
            raise InternalError("Failed to fetch order statistics") from e

        date_range = None
        if date_from or date_to:
            date_range = {
                "from": date_from.isoformat() if date_from else "No start date",
                "to": date_to.isoformat() if date_to else "No end date",
            }

        if date_range:
            message = f"Statistics for {date_from or 'start'} to {date_to or 'end'}"
        else:
            message = "All-time statistics"

        return {
            "total_orders": total_orders,
            "delivered": by_status.get(OrderStatus.DELIVERED.value, 0),
            "preparing": by_status.get(OrderStatus.PREPARING.value, 0),
            "ready": by_status.get(OrderStatus.READY.value, 0),
            "total_income": to_money(income) if income is not None else ZERO,
            "date_range": date_range,
            "message": message,
        }
