# canteen/repos/order_repo.py
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from canteen.data.models.order import OrderModel
from canteen.data.models.order_item import OrderItemModel
from canteen.data.models.product import ProductModel
from canteen.data.models.user import UserModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_order(self, order: OrderModel) -> OrderModel:
        # bez commita - checkout zamyka cala transakcje sam
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def update_order_status(self, order: OrderModel, status: str) -> OrderModel:
        order.order_status = status
        self.db.commit()
        self.db.refresh(order)
        return order

    def list_orders_by_user(self, user_id: int) -> list[OrderModel]:
        return list(
            self.db.execute(
                select(OrderModel)
                .where(OrderModel.user_id == user_id)
                .order_by(OrderModel.order_date.desc(), OrderModel.order_id.desc())
            ).scalars().all()
        )

    def list_orders_with_users(self):
        # LEFT JOIN - zamowienie usunietego uzytkownika tez jest na liscie
        return self.db.execute(
            select(OrderModel, UserModel.name, UserModel.email)
            .outerjoin(UserModel, OrderModel.user_id == UserModel.user_id)
            .order_by(OrderModel.order_date.desc(), OrderModel.order_id.desc())
        ).all()

    def get_order_lines(self, order_id: int):
        # produkt mogl zostac usuniety - title/image_url beda None
        return self.db.execute(
            select(OrderItemModel, ProductModel.title, ProductModel.image_url)
            .outerjoin(ProductModel, OrderItemModel.item_id == ProductModel.item_id)
            .where(OrderItemModel.order_id == order_id)
            .order_by(OrderItemModel.order_item_id)
        ).all()

    def _date_filters(self, start: datetime | None, end: datetime | None):
        filters = []
        if start is not None:
            filters.append(OrderModel.order_date >= start)
        if end is not None:
            filters.append(OrderModel.order_date < end)
        return filters

    def count_orders(self, start: datetime | None = None, end: datetime | None = None) -> int:
        stmt = select(func.count(OrderModel.order_id)).where(*self._date_filters(start, end))
        return self.db.execute(stmt).scalar_one()

    def count_by_status(self, start: datetime | None = None, end: datetime | None = None) -> dict[str, int]:
        stmt = (
            select(OrderModel.order_status, func.count(OrderModel.order_id))
            .where(*self._date_filters(start, end))
            .group_by(OrderModel.order_status)
        )
        return {status: count for status, count in self.db.execute(stmt).all()}

    def sum_income(self, start: datetime | None = None, end: datetime | None = None):
        stmt = select(func.sum(OrderModel.total_amount)).where(*self._date_filters(start, end))
        return self.db.execute(stmt).scalar_one()
