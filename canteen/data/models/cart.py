#canteen/data/models/cart.py
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer
from sqlalchemy.orm import relationship

from canteen.data.database import Base


class CartModel(Base):
    __tablename__ = "carts"

    cart_id = Column(Integer, primary_key=True)
    # unique - jeden koszyk na uzytkownika pilnuje baza, nie aplikacja
    user_id = Column(
        Integer,
        ForeignKey("users.user_id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    items = relationship(
        "CartItemModel",
        back_populates="cart",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
