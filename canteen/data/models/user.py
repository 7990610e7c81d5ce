from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from canteen.data.database import Base


class UserModel(Base):
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True)
    name = Column(String(150))
    email = Column(String(255), nullable=False, unique=True)
    is_admin = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
