from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from qios.crud import notification as notification_crud
from qios.db import get_db
from qios.schemas.notification import NotificationList, NotificationUpdate
from qios.utils.store import resolve_store_id

router = APIRouter(tags=["notifications"])


# 🔔 Newest first; unreadCount always covers the whole store, not just this page
@router.get("", response_model=NotificationList)
async def list_notifications(
    store_id: Optional[str] = Query(None, alias="storeId"),
    limit: int = Query(20, ge=1, le=200),
    unread_only: bool = Query(False, alias="unreadOnly"),
    db: AsyncSession = Depends(get_db),
):
    store_id = resolve_store_id(store_id)
    notifications = await notification_crud.get_notifications(db, store_id, limit=limit, unread_only=unread_only)
    unread = await notification_crud.count_unread(db, store_id)
    return {"status": "success", "notifications": notifications, "unread_count": unread}


@router.patch("")
async def update_notifications(payload: NotificationUpdate, db: AsyncSession = Depends(get_db)):
    store_id = resolve_store_id(payload.store_id)

    if payload.mark_all_read:
        updated = await notification_crud.mark_all_read(db, store_id)
        return {"status": "success", "updated": updated}

    if not payload.notification_id:
        raise HTTPException(status_code=400, detail="notificationId or markAllRead is required")

    await notification_crud.mark_read(db, store_id, payload.notification_id)
    return {"status": "success", "updated": 1}
