from typing import Optional

from fastapi import HTTPException
from sqlalchemy import func, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from qios.core.constants import NotificationType, Severity
from qios.models.notification import Notification


def add_notification(
    db: AsyncSession,
    store_id: str,
    type: NotificationType,
    title: str,
    message: str,
    severity: Severity = Severity.INFO,
) -> Notification:
    """Stage a notification in the caller's transaction; the caller commits."""
    notification = Notification(
        store_id=store_id,
        type=type,
        title=title,
        message=message,
        severity=severity,
    )
    db.add(notification)
    return notification


async def get_notifications(db: AsyncSession, store_id: str, limit: int = 20, unread_only: bool = False):
    query = select(Notification).where(Notification.store_id == store_id)
    if unread_only:
        query = query.where(Notification.is_read == False)

    result = await db.execute(
        query.order_by(Notification.created_at.desc()).limit(limit)
    )
    return result.scalars().all()


async def count_unread(db: AsyncSession, store_id: str) -> int:
    result = await db.execute(
        select(func.count(Notification.id)).where(
            Notification.store_id == store_id,
            Notification.is_read == False,
        )
    )
    return result.scalar_one()


async def mark_read(db: AsyncSession, store_id: str, notification_id: str) -> Notification:
    result = await db.execute(
        select(Notification).where(
            Notification.id == notification_id,
            Notification.store_id == store_id,
        )
    )
    notification = result.scalar_one_or_none()
    if not notification:
        raise HTTPException(status_code=404, detail="Notification not found")

    notification.is_read = True
    await db.commit()
    return notification


async def mark_all_read(db: AsyncSession, store_id: str) -> int:
    stmt = (
        update(Notification)
        .where(Notification.store_id == store_id, Notification.is_read == False)
        .values(is_read=True)
        .execution_options(synchronize_session="fetch")
    )
    result = await db.execute(stmt)
    await db.commit()
    return result.rowcount
