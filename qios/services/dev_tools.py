import logging

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from qios.models.customer import Customer
from qios.models.notification import Notification
from qios.models.order import Order, OrderItem
from qios.models.product import StockMovement
from qios.models.raw_material import RawMaterialMovement

log = logging.getLogger(__name__)

# Children before parents
RESET_ORDER = (
    ("notifications", Notification),
    ("movements", RawMaterialMovement),
    ("stockMovements", StockMovement),
    ("orderItems", OrderItem),
    ("orders", Order),
    ("customers", Customer),
)


async def reset_all(db: AsyncSession) -> dict:
    """Wipe transactional data; catalog, raw materials, stores and users stay."""
    counts = {}
    try:
        for key, model in RESET_ORDER:
            result = await db.execute(delete(model))
            counts[key] = result.rowcount
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    log.warning("reset_all: %s", counts)
    return counts
