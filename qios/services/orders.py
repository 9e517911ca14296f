import logging
import random
import string
import time
from collections import OrderedDict
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from fastapi import HTTPException
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload
from sqlalchemy.orm.attributes import set_committed_value

from qios.core.config import settings
from qios.core.constants import (
    DEFAULT_PAYMENT_METHOD,
    MovementType,
    NotificationType,
    OrderStatus,
    PaymentStatus,
    Severity,
)
from qios.crud import customer as customer_crud
from qios.crud.notification import add_notification
from qios.models.customer import Customer
from qios.models.order import Order, OrderItem
from qios.models.product import Product, Recipe, StockMovement
from qios.models.raw_material import RawMaterial, RawMaterialMovement
from qios.schemas.order import OrderCreate
from qios.utils.money import compute_tax, to_decimal

log = logging.getLogger(__name__)

_BASE36 = string.digits + string.ascii_uppercase


def generate_order_number() -> str:
    suffix = "".join(random.choices(_BASE36, k=6))
    return f"ORD-{int(time.time() * 1000)}-{suffix}"


def merge_lines(items) -> "OrderedDict[str, int]":
    """Collapse repeated lines for one product, keeping first-seen order."""
    merged: "OrderedDict[str, int]" = OrderedDict()
    for line in items:
        if line.quantity <= 0:
            raise HTTPException(status_code=400, detail="Quantity must be positive")
        merged[line.product_id] = merged.get(line.product_id, 0) + line.quantity
    return merged


def _order_query():
    return select(Order).options(
        selectinload(Order.customer),
        selectinload(Order.items).selectinload(OrderItem.product),
    )


async def get_order(db: AsyncSession, order_id: str, store_id: Optional[str] = None) -> Order:
    query = _order_query().where(Order.id == order_id).execution_options(populate_existing=True)
    if store_id:
        query = query.where(Order.store_id == store_id)
    result = await db.execute(query)
    order = result.scalar_one_or_none()
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


async def list_orders(
    db: AsyncSession,
    store_id: str,
    status: Optional[OrderStatus] = None,
    limit: int = 50,
) -> List[Order]:
    query = _order_query().where(Order.store_id == store_id)
    if status:
        query = query.where(Order.status == status)

    result = await db.execute(query.order_by(Order.created_at.desc()).limit(limit))
    return result.scalars().all()


async def pending_orders(db: AsyncSession, store_id: Optional[str] = None) -> List[Order]:
    query = _order_query().where(Order.payment_status == PaymentStatus.PENDING)
    if store_id:
        query = query.where(Order.store_id == store_id)
    result = await db.execute(query.order_by(Order.created_at.desc()))
    return result.scalars().all()


async def _load_products(db: AsyncSession, store_id: str, product_ids) -> Dict[str, Product]:
    result = await db.execute(
        select(Product)
        .where(Product.id.in_(list(product_ids)))
        .options(selectinload(Product.recipes).selectinload(Recipe.raw_material))
    )
    products = {p.id: p for p in result.scalars().all()}

    for product_id in product_ids:
        product = products.get(product_id)
        if not product or product.store_id != store_id:
            raise HTTPException(status_code=404, detail=f"Product {product_id} not found")
    return products


async def _resolve_customer(db: AsyncSession, store_id: str, order: OrderCreate) -> Customer:
    if order.customer_id:
        customer = await customer_crud.get_customer(db, order.customer_id, store_id)
        if not customer:
            raise HTTPException(status_code=404, detail="Customer not found")
        return customer

    if order.customer_name and order.customer_phone:
        return await customer_crud.find_or_create_by_phone(
            db, store_id, order.customer_name, order.customer_phone
        )

    raise HTTPException(status_code=400, detail="Customer is required")


async def _decrement_product(db: AsyncSession, product: Product, quantity: int) -> int:
    stmt = (
        update(Product)
        .where(Product.id == product.id, Product.stock_quantity >= quantity)
        .values(stock_quantity=Product.stock_quantity - quantity, updated_at=datetime.utcnow())
        .returning(Product.stock_quantity)
        .execution_options(synchronize_session=False)
    )
    remaining = (await db.execute(stmt)).scalar_one_or_none()
    if remaining is None:
        raise HTTPException(status_code=400, detail=f"Insufficient stock for {product.name}")
    set_committed_value(product, "stock_quantity", remaining)
    return remaining


async def _decrement_material(db: AsyncSession, material: RawMaterial, amount: Decimal, product_name: str) -> Decimal:
    stmt = (
        update(RawMaterial)
        .where(RawMaterial.id == material.id, RawMaterial.stock >= amount)
        .values(stock=RawMaterial.stock - amount, updated_at=datetime.utcnow())
        .returning(RawMaterial.stock)
        .execution_options(synchronize_session=False)
    )
    remaining = (await db.execute(stmt)).scalar_one_or_none()
    if remaining is None:
        raise HTTPException(
            status_code=400,
            detail=f"Insufficient raw material {material.name} for product {product_name}",
        )
    remaining = to_decimal(remaining)
    set_committed_value(material, "stock", remaining)
    return remaining


async def _restock_product(db: AsyncSession, product_id: str, quantity: int) -> None:
    stmt = (
        update(Product)
        .where(Product.id == product_id)
        .values(stock_quantity=Product.stock_quantity + quantity, updated_at=datetime.utcnow())
        .returning(Product.stock_quantity)
        .execution_options(synchronize_session=False)
    )
    remaining = (await db.execute(stmt)).scalar_one()
    product = await db.get(Product, product_id)
    set_committed_value(product, "stock_quantity", remaining)


async def _restock_material(db: AsyncSession, material_id: str, amount: Decimal) -> None:
    stmt = (
        update(RawMaterial)
        .where(RawMaterial.id == material_id)
        .values(stock=RawMaterial.stock + amount, updated_at=datetime.utcnow())
        .returning(RawMaterial.stock)
        .execution_options(synchronize_session=False)
    )
    remaining = (await db.execute(stmt)).scalar_one()
    material = await db.get(RawMaterial, material_id)
    set_committed_value(material, "stock", to_decimal(remaining))


async def _bump_customer(
    db: AsyncSession,
    customer: Customer,
    spent: Decimal,
    transactions: int,
    last_visit: Optional[datetime] = None,
) -> None:
    values = {
        "total_spent": Customer.total_spent + spent,
        "total_transactions": Customer.total_transactions + transactions,
    }
    if last_visit:
        values["last_visit"] = last_visit

    stmt = (
        update(Customer)
        .where(Customer.id == customer.id)
        .values(**values)
        .returning(Customer.total_spent, Customer.total_transactions, Customer.last_visit)
        .execution_options(synchronize_session=False)
    )
    row = (await db.execute(stmt)).one()
    set_committed_value(customer, "total_spent", to_decimal(row[0]))
    set_committed_value(customer, "total_transactions", row[1])
    set_committed_value(customer, "last_visit", row[2])


def _crossed(before, after, threshold) -> bool:
    return before > threshold and after <= threshold


async def create_order(db: AsyncSession, store_id: str, order: OrderCreate) -> Order:
    """Create an order and apply every stock, ledger and customer effect in one transaction.

    Availability is checked up front for a clean error, then enforced again by the
    conditional decrements; a concurrent order that wins the race makes ours fail
    with 400 and nothing is written.
    """
    if not order.items:
        raise HTTPException(status_code=400, detail="Order must contain at least one item")

    lines = merge_lines(order.items)

    try:
        products = await _load_products(db, store_id, lines.keys())

        subtotal = Decimal("0")
        needed: Dict[str, Decimal] = {}
        for product_id, quantity in lines.items():
            product = products[product_id]
            if product.stock_quantity < quantity:
                raise HTTPException(status_code=400, detail=f"Insufficient stock for {product.name}")

            for recipe in product.recipes:
                material = recipe.raw_material
                needed[material.id] = needed.get(material.id, Decimal("0")) + to_decimal(recipe.quantity) * quantity
                if to_decimal(material.stock) < needed[material.id]:
                    raise HTTPException(
                        status_code=400,
                        detail=f"Insufficient raw material {material.name} for product {product.name}",
                    )

            subtotal += to_decimal(product.price) * quantity

        tax = compute_tax(subtotal, settings.tax_rate)
        discount = to_decimal(order.discount)
        if discount > subtotal + tax:
            raise HTTPException(status_code=400, detail="Discount exceeds order total")
        total = subtotal + tax - discount

        customer = await _resolve_customer(db, store_id, order)
        now = datetime.utcnow()

        new_order = Order(
            order_number=generate_order_number(),
            store_id=store_id,
            customer_id=customer.id,
            user_id=order.user_id,
            status=order.status or OrderStatus.PENDING,
            payment_method=order.payment_method or DEFAULT_PAYMENT_METHOD,
            payment_status=order.payment_status or PaymentStatus.PENDING,
            subtotal=subtotal,
            tax=tax,
            discount=discount,
            total=total,
            notes=order.notes,
            transaction_date=order.transaction_date or now,
        )
        db.add(new_order)
        await db.flush()

        for product_id, quantity in lines.items():
            product = products[product_id]
            price = to_decimal(product.price)
            db.add(OrderItem(
                order_id=new_order.id,
                product_id=product.id,
                quantity=quantity,
                price=price,
                subtotal=price * quantity,
            ))

            before = product.stock_quantity
            remaining = await _decrement_product(db, product, quantity)
            db.add(StockMovement(
                product_id=product.id,
                type=MovementType.OUT,
                quantity=quantity,
                notes=f"Order {new_order.order_number}",
            ))
            if _crossed(before, remaining, product.min_stock_level):
                add_notification(
                    db, store_id, NotificationType.LOW_STOCK,
                    "Low Stock Alert",
                    f"{product.name} is running low ({remaining} left)",
                    Severity.WARNING,
                )

            for recipe in product.recipes:
                material = recipe.raw_material
                used = to_decimal(recipe.quantity) * quantity
                before_rm = to_decimal(material.stock)
                left = await _decrement_material(db, material, used, product.name)
                db.add(RawMaterialMovement(
                    raw_material_id=material.id,
                    order_id=new_order.id,
                    type=MovementType.OUT,
                    quantity=used,
                    notes=f"Order {new_order.order_number}",
                ))
                if _crossed(before_rm, left, to_decimal(material.min_stock_level)):
                    add_notification(
                        db, store_id, NotificationType.LOW_STOCK,
                        "Low Raw Material",
                        f"{material.name} is running low ({left} {material.unit} left)",
                        Severity.WARNING,
                    )

        await _bump_customer(db, customer, total, 1, last_visit=now)

        add_notification(
            db, store_id, NotificationType.ORDER,
            "New Order",
            f"Order {new_order.order_number} created for {customer.name}",
            Severity.INFO,
        )

        await db.commit()
    except Exception:
        await db.rollback()
        raise

    log.info(
        "create_order: store=%s order=%s items=%s total=%s",
        store_id, new_order.order_number, len(lines), total,
    )
    return await get_order(db, new_order.id)


async def cancel_order(db: AsyncSession, order_id: str, store_id: Optional[str] = None) -> Order:
    """Return every unit the order consumed and reverse its customer aggregates."""
    order = await get_order(db, order_id, store_id)
    if order.status == OrderStatus.CANCELLED:
        raise HTTPException(status_code=400, detail="Order already cancelled")

    try:
        for item in order.items:
            await _restock_product(db, item.product_id, item.quantity)
            db.add(StockMovement(
                product_id=item.product_id,
                type=MovementType.ADJUSTMENT,
                quantity=item.quantity,
                notes=f"Stock returned from cancelled order {order.order_number}",
            ))

        # Restore exactly what was consumed, even if recipes changed since
        result = await db.execute(
            select(RawMaterialMovement).where(
                RawMaterialMovement.order_id == order.id,
                RawMaterialMovement.type == MovementType.OUT,
            )
        )
        for movement in result.scalars().all():
            await _restock_material(db, movement.raw_material_id, to_decimal(movement.quantity))
            db.add(RawMaterialMovement(
                raw_material_id=movement.raw_material_id,
                order_id=order.id,
                type=MovementType.ADJUSTMENT,
                quantity=movement.quantity,
                notes=f"Stock returned from cancelled order {order.order_number}",
            ))

        await _bump_customer(db, order.customer, -to_decimal(order.total), -1)

        order.status = OrderStatus.CANCELLED
        order.payment_status = PaymentStatus.FAILED
        order.updated_at = datetime.utcnow()

        add_notification(
            db, order.store_id, NotificationType.ORDER,
            "Order Cancelled",
            f"Order {order.order_number} has been cancelled and stock returned",
            Severity.WARNING,
        )
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    log.info("cancel_order: store=%s order=%s", order.store_id, order.order_number)
    return await get_order(db, order.id)


async def confirm_payment(
    db: AsyncSession,
    order_id: str,
    store_id: Optional[str] = None,
    reference: Optional[str] = None,
) -> Order:
    order = await get_order(db, order_id, store_id)
    if order.status == OrderStatus.CANCELLED:
        raise HTTPException(status_code=400, detail="Cannot confirm payment for a cancelled order")
    if order.payment_status == PaymentStatus.PAID:
        return order

    order.payment_status = PaymentStatus.PAID
    if reference:
        order.payment_reference = reference
    order.updated_at = datetime.utcnow()

    add_notification(
        db, order.store_id, NotificationType.PAYMENT,
        "Payment Confirmed",
        f"Payment for order {order.order_number} has been confirmed",
        Severity.SUCCESS,
    )
    await db.commit()

    log.info("confirm_payment: store=%s order=%s ref=%s", order.store_id, order.order_number, reference)
    return order


async def confirm_payment_by_reference(db: AsyncSession, order_ref: str, reference: Optional[str] = None) -> Optional[Order]:
    """Gateways echo either our order id or the order number; match both."""
    result = await db.execute(
        select(Order).where((Order.id == order_ref) | (Order.order_number == order_ref))
    )
    order = result.scalar_one_or_none()
    if not order or order.status == OrderStatus.CANCELLED:
        return None
    return await confirm_payment(db, order.id, reference=reference)
