import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import relationship

from qios.core.constants import CustomerSegment
from qios.models.base import Base


class Customer(Base):
    __tablename__ = "customers"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    store_id = Column(String, ForeignKey("stores.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=False)
    address = Column(String, nullable=True)
    segment = Column(Enum(CustomerSegment), default=CustomerSegment.REGULAR, nullable=False)

    # Aggregates maintained by the order transaction
    total_spent = Column(Numeric(14, 2), nullable=False, default=0)
    total_transactions = Column(Integer, nullable=False, default=0)
    last_visit = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    store = relationship("Store", back_populates="customers")
    orders = relationship("Order", back_populates="customer")

    __table_args__ = (
        UniqueConstraint("store_id", "phone", name="uq_customer_store_phone"),
    )
