from datetime import datetime
from typing import Optional

from qios.schemas.common import CamelModel


class StoreRead(CamelModel):
    id: str
    name: str
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    created_at: Optional[datetime] = None
