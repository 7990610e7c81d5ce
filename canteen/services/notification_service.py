# canteen/services/notification_service.py
from decimal import Decimal

from canteen.celery_worker import celery_app
from canteen.utils.logging import get_logger

logger = get_logger(__name__)

STATUS_MESSAGES = {
    "Placed": "has been placed",
    "Preparing": "is being prepared",
    "Ready": "is ready for pickup",
    "Delivered": "has been delivered",
    "Cancelled": "has been cancelled",
}


class NotificationService:
    """
    Serwis do wysyłania powiadomień.
    Używa Celery do asynchronicznego przetwarzania.

    Wysylka idzie po commicie - blad brokera nie cofa zamowienia,
    jest tylko logowany.
    """

    @staticmethod
    def send_order_placed(user_id: int | None, order_id: int, total: Decimal):
        try:
            send_order_placed_notification.delay(user_id, order_id, str(total))
        except Exception as e:
            logger.warning(f"Failed to enqueue order placed notification for order {order_id}: {e}")

    @staticmethod
    def send_status_changed(user_id: int | None, order_id: int, status: str):
        try:
            send_order_status_notification.delay(user_id, order_id, status)
        except Exception as e:
            logger.warning(f"Failed to enqueue status notification for order {order_id}: {e}")


def order_placed_message(order_id: int, total: str) -> str:
    return (
        f"Your order #{order_id} has been confirmed and is being prepared. "
        f"Total Amount: {total}. Estimated Ready Time: 15-20 minutes."
    )


def order_status_message(order_id: int, status: str) -> str:
    return f"Your order #{order_id} {STATUS_MESSAGES.get(status, f'is now {status}')}."


@celery_app.task(name="canteen.services.notification_service.send_order_placed_notification")
def send_order_placed_notification(user_id: int | None, order_id: int, total: str):
    """
    Celery task - potwierdzenie zamowienia.
    Teraz tylko loguje, email idzie przez osobny serwis.
    """
    message = order_placed_message(order_id, total)
    logger.info(f"[NOTIFICATION] User {user_id}: {message}")
    return {"user_id": user_id, "order_id": order_id, "message": message, "status": "sent"}


@celery_app.task(name="canteen.services.notification_service.send_order_status_notification")
def send_order_status_notification(user_id: int | None, order_id: int, status: str):
    message = order_status_message(order_id, status)
    logger.info(f"[NOTIFICATION] User {user_id}: {message}")
    return {"user_id": user_id, "order_id": order_id, "message": message, "status": "sent"}
