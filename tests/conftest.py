"""
Test configuration and fixtures for the storefront
"""

import os
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.domain.entities.address import Address
from storefront.domain.entities.catalog_item import CatalogItem
from storefront.domain.entities.order_entity import (
    Order,
    OrderLineItem,
    OrderStatus,
    PaymentInfo,
    PaymentMethod,
    PaymentStatus,
)
from storefront.infrastructure.configuration.config import Settings, reset_config
from storefront.infrastructure.database.models import Base
from storefront.infrastructure.storage.local_cart_storage import InMemoryCartStore
from storefront.infrastructure.utilities.exceptions import ItemNotFoundError

TEST_SECRET = "test_key_secret"


@pytest.fixture(autouse=True)
def mock_env(tmp_path):
    """Isolate every test from the real environment and cached settings"""
    test_env = {
        "DATABASE_URL": "sqlite:///:memory:",
        "ENVIRONMENT": "test",
        "LOG_LEVEL": "DEBUG",
        "LOG_DIR": str(tmp_path / "logs"),
        "PAYMENT_KEY_SECRET": TEST_SECRET,
        "LOCAL_CART_DIR": str(tmp_path / "local_cart"),
    }

    with patch.dict(os.environ, test_env, clear=True):
        reset_config()
        yield test_env
    reset_config()


@pytest.fixture
def settings():
    """Explicit settings so pricing tests do not depend on the environment"""
    return Settings(
        database_url="sqlite:///:memory:",
        environment="test",
        delivery_fee=Decimal("18"),
        tax_rate_percent=Decimal("2.5"),
        payment_key_secret=TEST_SECRET,
    )


@pytest.fixture
def catalog():
    """
    Mutable catalog keyed by item id.

    itemA: 100 (market 120) for 250 gm, 190 (market 230) for 500 gm
    itemB: out of stock
    itemC: 500 for 250 gm, no market price
    itemD: only 1 kg priced, and that variant is disabled
    """
    items = [
        CatalogItem(
            id="itemA",
            name="Banana Chips",
            prices={"g250": 100, "g500": 190},
            market_prices={"g250": 120, "g500": 230},
            quantity_options={"g250": True, "g500": True, "kg1": False},
            image="banana.png",
        ),
        CatalogItem(
            id="itemB",
            name="Jackfruit Chips",
            status="out-of-stock",
            prices={"g250": 150},
            quantity_options={"g250": True},
        ),
        CatalogItem(
            id="itemC",
            name="Halwa",
            prices={"g250": 500},
            quantity_options={"g250": True},
        ),
        CatalogItem(
            id="itemD",
            name="Murukku",
            prices={"kg1": 400},
            quantity_options={"kg1": False},
        ),
    ]
    return {item.id: item for item in items}


@pytest.fixture
def catalog_repository(catalog):
    """Catalog repository mock reading the ``catalog`` fixture at call time"""

    def _get_item(product_id):
        if product_id.value not in catalog:
            raise ItemNotFoundError(product_id.value)
        return catalog[product_id.value]

    repo = MagicMock()
    repo.get_item = AsyncMock(side_effect=_get_item)
    repo.list_items = AsyncMock(side_effect=lambda: list(catalog.values()))
    return repo


@pytest.fixture
def cart_repository():
    """Server cart repository mock with an empty saved cart"""
    repo = MagicMock()
    repo.get_cart = AsyncMock(return_value={})
    repo.put_cart = AsyncMock(return_value=None)
    repo.clear_cart = AsyncMock(return_value=None)
    return repo


@pytest.fixture
def local_store():
    return InMemoryCartStore()


@pytest.fixture
def valid_address():
    return Address(
        first_name="Asha",
        last_name="Menon",
        email="Asha@Example.com",
        phone="9876543210",
        street="12 MG Road",
        city="Kochi",
        state="Kerala",
        country="India",
        zipcode="682001",
    )


@pytest.fixture
def make_order(valid_address):
    """Factory for order snapshots in a given status"""

    def _make(
        status=OrderStatus.CONFIRMED,
        order_id="order-1",
        user_id="user-1",
        method=PaymentMethod.COD,
        payment_status=PaymentStatus.PENDING,
        address=None,
        created_at=None,
    ):
        kwargs = {}
        if created_at is not None:
            kwargs["created_at"] = created_at
        return Order(
            id=order_id,
            user_id=user_id,
            items=(
                OrderLineItem(
                    item_id="itemA",
                    name="Banana Chips",
                    price=Decimal("100"),
                    market_price=Decimal("120"),
                    quantity=2,
                    size="g250",
                ),
            ),
            subtotal=Decimal("200.00"),
            sgst=Decimal("5.00"),
            cgst=Decimal("5.00"),
            delivery_fee=Decimal("18.00"),
            discount=Decimal("0.00"),
            savings=Decimal("40.00"),
            amount=Decimal("228.00"),
            address=address or valid_address.validate(),
            payment=PaymentInfo(method, payment_status),
            status=status,
            **kwargs,
        )

    return _make


@pytest.fixture
def session_factory():
    """Session factory bound to a fresh in-memory SQLite database"""
    engine = create_engine(
        "sqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine, expire_on_commit=False)
    yield factory
    engine.dispose()
