import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean, Column, DateTime, Enum, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
)
from sqlalchemy.orm import relationship

from qios.core.constants import MovementType
from qios.models.base import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    store_id = Column(String, ForeignKey("stores.id"), nullable=False, index=True)
    sku = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=True)
    category = Column(String, nullable=False)

    price = Column(Numeric(14, 2), nullable=False)
    cost = Column(Numeric(14, 2), nullable=False, default=0)
    stock_quantity = Column(Integer, nullable=False, default=0)
    min_stock_level = Column(Integer, nullable=False, default=0)
    # Finished products are made to order from a recipe of raw materials
    is_finished_product = Column(Boolean, default=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    store = relationship("Store", back_populates="products")
    recipes = relationship("Recipe", back_populates="product", cascade="all, delete-orphan")
    movements = relationship("StockMovement", back_populates="product")
    order_items = relationship("OrderItem", back_populates="product")


class Recipe(Base):
    __tablename__ = "recipes"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    product_id = Column(String, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    raw_material_id = Column(String, ForeignKey("raw_materials.id"), nullable=False)
    quantity = Column(Numeric(14, 3), nullable=False)  # per unit of product
    created_at = Column(DateTime, default=datetime.utcnow)

    product = relationship("Product", back_populates="recipes")
    raw_material = relationship("RawMaterial", back_populates="recipes")

    __table_args__ = (
        UniqueConstraint("product_id", "raw_material_id", name="uq_recipe_product_material"),
    )


class StockMovement(Base):
    __tablename__ = "stock_movements"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    product_id = Column(String, ForeignKey("products.id"), nullable=False, index=True)
    type = Column(Enum(MovementType), nullable=False)
    quantity = Column(Integer, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    product = relationship("Product", back_populates="movements")
