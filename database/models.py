# database/models.py

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, Float, ForeignKey, JSON
from sqlalchemy.orm import relationship

from database.db_session import Base


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    bills = relationship("Bill", back_populates="owner")

    def __repr__(self) -> str:
        return f"<User id={self.id}>"


class Bill(Base):
    __tablename__ = "bills"

    # row key; records insertion order for tie-breaking
    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(36), unique=True, index=True, nullable=False, default=new_id)
    owner_id = Column(String(36), ForeignKey("users.id"), index=True, nullable=False)
    customer_name = Column(String(255), nullable=False)
    customer_phone = Column(String(64), nullable=False)
    customer_email = Column(String(255), nullable=False)
    items = Column(JSON, nullable=False, default=list)  # [{"name", "quantity", "price"}, ...]
    total_amount = Column(Float, nullable=False, default=0.0)
    created_at = Column(DateTime(timezone=True), default=utcnow, index=True, nullable=False)

    owner = relationship("User", back_populates="bills")

    def __repr__(self) -> str:
        return f"<Bill id={self.id} owner={self.owner_id} total={self.total_amount}>"
