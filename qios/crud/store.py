from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from qios.models.store import Store


async def get_store(db: AsyncSession, store_id: str) -> Optional[Store]:
    return await db.get(Store, store_id)


async def get_or_create_store(db: AsyncSession, store_id: str, **fields) -> Store:
    store = await get_store(db, store_id)
    if store:
        return store

    store = Store(id=store_id, **fields)
    db.add(store)
    await db.commit()
    await db.refresh(store)
    return store
