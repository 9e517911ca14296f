import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import relationship

from qios.core.constants import MovementType
from qios.models.base import Base


class RawMaterial(Base):
    __tablename__ = "raw_materials"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    store_id = Column(String, ForeignKey("stores.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    unit = Column(String, nullable=False, default="pcs")  # gram, ml, pcs

    stock = Column(Numeric(14, 3), nullable=False, default=0)
    initial_stock = Column(Numeric(14, 3), nullable=False, default=0)
    min_stock_level = Column(Numeric(14, 3), nullable=False, default=0)
    cost = Column(Numeric(14, 2), nullable=False, default=0)  # per unit

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    store = relationship("Store", back_populates="raw_materials")
    recipes = relationship("Recipe", back_populates="raw_material")
    movements = relationship("RawMaterialMovement", back_populates="raw_material")


class RawMaterialMovement(Base):
    __tablename__ = "raw_material_movements"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    raw_material_id = Column(String, ForeignKey("raw_materials.id"), nullable=False, index=True)
    order_id = Column(String, ForeignKey("orders.id", ondelete="SET NULL"), nullable=True)
    type = Column(Enum(MovementType), nullable=False)
    quantity = Column(Numeric(14, 3), nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    raw_material = relationship("RawMaterial", back_populates="movements")
