from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Integer, Numeric, String, Text

from canteen.data.database import Base

DEFAULT_IMAGE_URL = "assets/images/menu_img1.jpg"


class ProductModel(Base):
    __tablename__ = "products"

    item_id = Column(Integer, primary_key=True)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    # nazwa kategorii, nie klucz obcy (tak jak w menu)
    category = Column(String(100), index=True)
    price = Column(Numeric(10, 2), nullable=False)
    calories = Column(String(100))
    image_url = Column(String(512))
    available = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
