"""
Order DTOs

Data Transfer Objects for order-related operations.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from storefront.domain.entities.order_entity import Order
from storefront.domain.value_objects.cart_key import CartKey


@dataclass
class OrderItemInfo:
    """Order item information"""

    item_id: str
    name: str
    size: str
    quantity: int
    unit_price: Decimal
    market_price: Decimal
    total_price: Decimal
    image: str = ""


@dataclass
class OrderInfo:
    """Complete order information"""

    order_id: str
    user_id: str
    status: str
    payment_method: str
    payment_status: str
    items: List[OrderItemInfo]
    subtotal: Decimal
    sgst: Decimal
    cgst: Decimal
    delivery_fee: Decimal
    discount: Decimal
    savings: Decimal
    amount: Decimal
    address: Dict[str, Any]
    created_at: datetime
    promo_code: Optional[str] = None
    transaction_id: Optional[str] = None
    gateway_order_id: Optional[str] = None
    excluded_items: List[CartKey] = field(default_factory=list)

    @classmethod
    def from_order(cls, order: Order, excluded_items: Optional[List[CartKey]] = None) -> "OrderInfo":
        """Create OrderInfo from an order entity."""
        return cls(
            order_id=order.id,
            user_id=order.user_id,
            status=order.status.value,
            payment_method=order.payment.method.value,
            payment_status=order.payment.status.value,
            items=[
                OrderItemInfo(
                    item_id=item.item_id,
                    name=item.name,
                    size=item.size,
                    quantity=item.quantity,
                    unit_price=item.price,
                    market_price=item.market_price,
                    total_price=item.line_total,
                    image=item.image,
                )
                for item in order.items
            ],
            subtotal=order.subtotal,
            sgst=order.sgst,
            cgst=order.cgst,
            delivery_fee=order.delivery_fee,
            discount=order.discount,
            savings=order.savings,
            amount=order.amount,
            address=order.address.to_dict(),
            created_at=order.created_at,
            promo_code=order.promo_code,
            transaction_id=order.payment.transaction_id,
            gateway_order_id=order.payment.gateway_order_id,
            excluded_items=list(excluded_items or []),
        )


@dataclass
class PaymentVerificationRequest:
    """Signed confirmation payload from the payment gateway"""

    order_id: str
    gateway_order_id: str
    gateway_payment_id: str
    signature: str


@dataclass
class CustomerSummary:
    """One customer in the operator directory, aggregated from order addresses"""

    name: str
    email: str
    phone: str
    city: str
    zipcode: str
    order_count: int
    first_order_at: datetime
    last_order_at: datetime
