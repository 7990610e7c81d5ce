from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from canteen.data.database import Base


class CategoryModel(Base):
    __tablename__ = "categories"

    category_id = Column(Integer, primary_key=True)
    category_name = Column(String(100), nullable=False, unique=True)
    # soft delete - kategoria nigdy nie znika z tabeli
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
