from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from canteen.data.database import Base
from canteen.domain.order_status import OrderStatus


class OrderModel(Base):
    __tablename__ = "orders"

    order_id = Column(Integer, primary_key=True)
    # NULL gdy uzytkownik zostal usuniety, zamowienie zostaje
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="SET NULL"), nullable=True, index=True)

    total_amount = Column(Numeric(10, 2), nullable=False)
    order_status = Column(String(50), nullable=False, default=OrderStatus.PLACED.value)  # Placed, Preparing, Ready, Delivered, Cancelled
    order_date = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.order_item_id",
    )
