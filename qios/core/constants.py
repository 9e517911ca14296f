import enum
from decimal import Decimal


class OrderStatus(str, enum.Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class PaymentStatus(str, enum.Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"


class MovementType(str, enum.Enum):
    IN = "IN"
    OUT = "OUT"
    ADJUSTMENT = "ADJUSTMENT"


class NotificationType(str, enum.Enum):
    ORDER = "ORDER"
    PAYMENT = "PAYMENT"
    LOW_STOCK = "LOW_STOCK"
    SYSTEM = "SYSTEM"


class Severity(str, enum.Enum):
    INFO = "INFO"
    SUCCESS = "SUCCESS"
    WARNING = "WARNING"
    ERROR = "ERROR"


class CustomerSegment(str, enum.Enum):
    NEW = "NEW"
    REGULAR = "REGULAR"
    VIP = "VIP"


class StockStatus(str, enum.Enum):
    IN_STOCK = "IN_STOCK"
    LOW_STOCK = "LOW_STOCK"
    OUT_OF_STOCK = "OUT_OF_STOCK"


DEFAULT_PAYMENT_METHOD = "CASH"
DEV_STORE_ID = "default-store"

# Whole rupiah; IDR has no minor unit in practice
MONEY_QUANT = Decimal("1")
