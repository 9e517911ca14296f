from .base import Base
from .store import Store
from .user import User
from .product import Product, Recipe, StockMovement
from .raw_material import RawMaterial, RawMaterialMovement
from .customer import Customer
from .order import Order, OrderItem
from .notification import Notification
from .expense import Expense
