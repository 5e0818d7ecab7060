from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, Text
from sqlalchemy.orm import relationship

from autoresponder.database import Base


class Account(Base):
    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(Text, nullable=False, unique=True)
    phone = Column(Text, nullable=True, unique=True)
    password_hash = Column(Text, nullable=False)
    plan = Column(Text, nullable=False, default="basic")
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    responses = relationship("ResponseEntry", back_populates="account", cascade="all, delete-orphan")
