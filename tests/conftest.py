import asyncio
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTH_ENABLED"] = "false"
os.environ["DEV_SHOP"] = "test-shop.myshopify.com"
os.environ["APP_URL"] = "https://qr.example.com"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from qr_admin.api.deps import get_catalog, get_encoder
from qr_admin.core.errors import CatalogQueryError
from qr_admin.db.session import Base, get_db
from qr_admin.main import app
from qr_admin.models import entities  # noqa: F401
from qr_admin.schemas.qrcode import ProductSnapshot

SHOP = "test-shop.myshopify.com"


class FakeCatalog:
    def __init__(self):
        self.products: dict[str, ProductSnapshot] = {}
        self.delays: dict[str, float] = {}
        self.failing: set[str] = set()
        self.calls: list[str] = []
        self.completed: list[str] = []

    async def query_product(self, product_id: str) -> ProductSnapshot:
        self.calls.append(product_id)
        await asyncio.sleep(self.delays.get(product_id, 0))
        if product_id in self.failing:
            raise CatalogQueryError(f"catalog down for {product_id}")
        self.completed.append(product_id)
        return self.products.get(product_id, ProductSnapshot(title=None, images=[]))


class FakeEncoder:
    def __init__(self):
        self.calls: list[str] = []

    async def encode(self, url: str) -> str:
        self.calls.append(url)
        return f"data:image/png;base64,{url}"


class FakeStore:
    def __init__(self, records=()):
        self.records = {r.id: r for r in records}
        self.calls: list[tuple] = []

    def find_by_id(self, qr_id):
        self.calls.append(("find_by_id", qr_id))
        return self.records.get(qr_id)

    def find_all_by_shop(self, shop):
        self.calls.append(("find_all_by_shop", shop))
        rows = [r for r in self.records.values() if r.shop == shop]
        return sorted(rows, key=lambda r: r.id, reverse=True)


@pytest.fixture
def catalog():
    return FakeCatalog()


@pytest.fixture
def encoder():
    return FakeEncoder()


@pytest.fixture
def fake_store_factory():
    return FakeStore


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(engine, catalog, encoder):
    testing_session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

    def override_get_db():
        session = testing_session()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_catalog] = lambda: catalog
    app.dependency_overrides[get_encoder] = lambda: encoder
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
