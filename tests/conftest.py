import os
import sys
from decimal import Decimal
from pathlib import Path

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

# Settings are read at import time
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("DEFAULT_STORE_ID", "store-1")
os.environ.pop("GEMINI_API_KEY", None)

sys.path.append(str(Path(__file__).resolve().parent.parent))

from qios.db import get_db
from qios.main import app
from qios.models import Base, Product, RawMaterial, Recipe, Store

STORE_ID = "store-1"
OTHER_STORE_ID = "store-2"


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, future=True
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine):
    async_session = sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    async with async_session() as session:
        yield session


@pytest_asyncio.fixture
async def shop(session):
    """Two stores, a coffee menu with recipes, and one direct-sale product."""
    session.add_all([
        Store(id=STORE_ID, name="QIOS Coffee Shop"),
        Store(id=OTHER_STORE_ID, name="Other Shop"),
    ])

    kopi = RawMaterial(
        store_id=STORE_ID, name="Kopi Beans", unit="gram",
        stock=Decimal("5000"), initial_stock=Decimal("5000"),
        min_stock_level=Decimal("1000"), cost=Decimal("150"),
    )
    susu = RawMaterial(
        store_id=STORE_ID, name="Susu", unit="ml",
        stock=Decimal("10000"), initial_stock=Decimal("10000"),
        min_stock_level=Decimal("2000"), cost=Decimal("15"),
    )
    latte = Product(
        store_id=STORE_ID, sku="COFFEE-LATTE", name="Latte", category="Coffee",
        price=Decimal("30000"), cost=Decimal("5700"),
        stock_quantity=50, min_stock_level=5, is_finished_product=True,
    )
    roti = Product(
        store_id=STORE_ID, sku="SNACK-ROTI", name="Roti", category="Snacks",
        price=Decimal("15000"), cost=Decimal("8000"),
        stock_quantity=10, min_stock_level=3,
    )
    session.add_all([kopi, susu, latte, roti])
    await session.flush()

    session.add_all([
        Recipe(product_id=latte.id, raw_material_id=kopi.id, quantity=Decimal("18")),
        Recipe(product_id=latte.id, raw_material_id=susu.id, quantity=Decimal("200")),
    ])
    await session.commit()

    return {"kopi": kopi, "susu": susu, "latte": latte, "roti": roti}


@pytest_asyncio.fixture
async def client(engine):
    async_session = sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

    async def override_get_db():
        async with async_session() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
