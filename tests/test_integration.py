"""
Integration Tests

The wired container against an in-memory database: browse, cart, sign in,
check out and follow the order through fulfilment.
"""

from decimal import Decimal

import pytest

from storefront.application.dtos.order_dtos import PaymentVerificationRequest
from storefront.application.use_cases.payment_verification_use_case import compute_signature
from storefront.domain.entities.order_entity import PaymentMethod
from storefront.domain.value_objects.cart_key import CartKey
from storefront.infrastructure.container.dependency_injection import DependencyContainer
from storefront.infrastructure.storage.local_cart_storage import InMemoryCartStore
from storefront.infrastructure.utilities.exceptions import PaymentSignatureMismatchError
from storefront.main import seed_catalog

CATALOG = [
    {
        "_id": "itemA",
        "name": "Banana Chips",
        "prices": {"g250": 100, "g500": 190},
        "marketPrices": {"g250": 120, "g500": 230},
        "quantityOptions": {"g250": True, "g500": True, "kg1": False},
    },
    {"_id": "itemC", "name": "Halwa", "price": 500},
    {"_id": "itemB", "name": "Jackfruit Chips", "price": 150, "status": "out-of-stock"},
]


@pytest.fixture
def container(settings, session_factory):
    container = DependencyContainer(config=settings, session_factory=session_factory)
    yield container
    container.cleanup()


@pytest.mark.asyncio
async def test_cash_on_delivery_flow(container, valid_address):
    await seed_catalog(container, CATALOG)

    # Anonymous browsing, then sign in with an empty server cart
    cart = container.create_cart_engine(local_store=InMemoryCartStore())
    assert await cart.add_line("itemA")
    assert await cart.add_line("itemA")
    assert not await cart.add_line("itemB")
    await cart.login("user-1")
    await cart.wait_for_sync()
    assert cart.lines == {}

    assert await cart.add_line("itemA")
    assert await cart.add_line("itemA")
    await cart.wait_for_sync()
    assert await container.get_cart_repository().get_cart("user-1") == {CartKey("itemA"): 2}

    address_book = container.get_address_book_use_case()
    await address_book.add_address("user-1", valid_address)
    address = await address_book.get_default("user-1")

    info = await container.get_order_assembler().place_order(cart, address, PaymentMethod.COD)
    await cart.wait_for_sync()

    assert info.status == "confirmed"
    assert info.amount == Decimal("228.00")
    assert cart.is_empty()
    assert await container.get_cart_repository().get_cart("user-1") == {}

    orders = container.get_order_status_management_use_case()
    for status in ("packing", "out-for-delivery", "delivered"):
        info = await orders.update_order_status(info.order_id, status)
    assert info.status == "delivered"

    customers = await container.get_customer_directory_use_case().list_customers()
    assert [(c.name, c.order_count) for c in customers] == [("Asha Menon", 1)]

    await orders.delete_order(info.order_id)
    assert await orders.list_user_orders("user-1") == []


@pytest.mark.asyncio
async def test_online_payment_flow(container, valid_address, settings):
    await seed_catalog(container, CATALOG)
    store = InMemoryCartStore()
    cart = container.create_cart_engine(user_id="user-1", local_store=store)
    await cart.add_line("itemC")
    await cart.add_line("itemC")
    await cart.apply_promo_code("ABOVE1000")

    info = await container.get_order_assembler().place_order(
        cart, valid_address, "Online", gateway_order_id="gw_order_1"
    )
    assert info.status == "awaiting_payment"
    assert info.amount == Decimal("968.00")
    assert cart.quantity("itemC") == 2

    payments = container.get_payment_verification_use_case()
    signature = compute_signature(settings.payment_key_secret, "gw_order_1", "gw_pay_1")
    confirmed = await payments.verify_payment(
        PaymentVerificationRequest(info.order_id, "gw_order_1", "gw_pay_1", signature), cart=cart
    )
    await cart.wait_for_sync()

    assert confirmed.status == "confirmed"
    assert confirmed.payment_status == "completed"
    assert confirmed.transaction_id == "gw_pay_1"
    assert cart.is_empty()
    assert store.load_promo() is None


@pytest.mark.asyncio
async def test_failed_payment_keeps_cart(container, valid_address):
    await seed_catalog(container, CATALOG)
    cart = container.create_cart_engine(user_id="user-1", local_store=InMemoryCartStore())
    await cart.add_line("itemA")

    info = await container.get_order_assembler().place_order(
        cart, valid_address, PaymentMethod.ONLINE, gateway_order_id="gw_order_1"
    )

    with pytest.raises(PaymentSignatureMismatchError):
        await container.get_payment_verification_use_case().verify_payment(
            PaymentVerificationRequest(info.order_id, "gw_order_1", "gw_pay_1", "forged"), cart=cart
        )

    stored = await container.get_order_status_management_use_case().get_order(info.order_id)
    assert stored.status == "payment_failed"
    assert stored.payment_status == "failed"
    assert cart.quantity("itemA") == 1


@pytest.mark.asyncio
async def test_reopened_session_keeps_promo(container):
    await seed_catalog(container, CATALOG)
    store = InMemoryCartStore()
    store.save_lines({CartKey("itemC"): 2})
    store.save_promo("ABOVE500")

    cart = await container.open_cart_engine(local_store=store)
    totals = cart.get_totals()

    assert totals.subtotal == Decimal("1000.00")
    assert totals.discount == Decimal("50.00")
    assert totals.final_amount == Decimal("1018.00")
    assert cart.promo_code == "ABOVE500"
