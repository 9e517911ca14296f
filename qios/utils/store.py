# qios/utils/store.py
from typing import Optional

from fastapi import HTTPException

from qios.core.config import settings


def resolve_store_id(store_id: Optional[str]) -> str:
    """Explicit storeId wins, then DEFAULT_STORE_ID from the environment."""
    resolved = (store_id or "").strip() or settings.default_store_id
    if not resolved:
        raise HTTPException(status_code=400, detail="Store ID required")
    return resolved
