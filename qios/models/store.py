# qios/models/store.py
import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import relationship

from qios.models.base import Base


class Store(Base):
    __tablename__ = "stores"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    address = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    email = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Back-populated relationships
    users = relationship("User", back_populates="store")
    products = relationship("Product", back_populates="store")
    raw_materials = relationship("RawMaterial", back_populates="store")
    customers = relationship("Customer", back_populates="store")
    orders = relationship("Order", back_populates="store")
    notifications = relationship("Notification", back_populates="store")
    expenses = relationship("Expense", back_populates="store")
