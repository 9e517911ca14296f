from datetime import datetime
from typing import List, Optional

from qios.core.constants import NotificationType, Severity
from qios.schemas.common import CamelModel, StoreScoped


class NotificationRead(CamelModel):
    id: str
    store_id: str
    type: NotificationType
    title: str
    message: str
    severity: Severity
    is_read: bool
    created_at: Optional[datetime] = None


class NotificationList(CamelModel):
    status: str = "success"
    notifications: List[NotificationRead]
    unread_count: int


class NotificationUpdate(StoreScoped):
    notification_id: Optional[str] = None
    mark_all_read: bool = False
