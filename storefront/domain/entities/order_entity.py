# pylint: disable=too-many-instance-attributes
"""
Order Entity - immutable snapshot of a placed order plus its status lifecycle
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from storefront.domain.entities.address import Address


class OrderStatus(str, Enum):
    """Order lifecycle states"""

    PENDING = "pending"
    AWAITING_PAYMENT = "awaiting_payment"
    CONFIRMED = "confirmed"
    PACKING = "packing"
    OUT_FOR_DELIVERY = "out-for-delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    PAYMENT_FAILED = "payment_failed"


class PaymentMethod(str, Enum):
    COD = "COD"
    ONLINE = "Online"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    INITIATED = "initiated"
    COMPLETED = "completed"
    FAILED = "failed"


class StatusActor(str, Enum):
    """Who is driving a status change"""

    OPERATOR = "operator"
    SYSTEM = "system"


TERMINAL_STATUSES = frozenset(
    {OrderStatus.DELIVERED, OrderStatus.CANCELLED, OrderStatus.PAYMENT_FAILED}
)

# Forward moves an admin may make
OPERATOR_TRANSITIONS: Dict[OrderStatus, Tuple[OrderStatus, ...]] = {
    OrderStatus.PENDING: (OrderStatus.CANCELLED,),
    OrderStatus.AWAITING_PAYMENT: (OrderStatus.CANCELLED,),
    OrderStatus.CONFIRMED: (OrderStatus.PACKING, OrderStatus.CANCELLED),
    OrderStatus.PACKING: (OrderStatus.OUT_FOR_DELIVERY,),
    OrderStatus.OUT_FOR_DELIVERY: (OrderStatus.DELIVERED,),
    OrderStatus.DELIVERED: (),
    OrderStatus.CANCELLED: (),
    OrderStatus.PAYMENT_FAILED: (),
}

# Payment verification outcomes
SYSTEM_TRANSITIONS: Dict[OrderStatus, Tuple[OrderStatus, ...]] = {
    OrderStatus.PENDING: (OrderStatus.CONFIRMED, OrderStatus.PAYMENT_FAILED),
    OrderStatus.AWAITING_PAYMENT: (OrderStatus.CONFIRMED, OrderStatus.PAYMENT_FAILED),
}


def allowed_transitions(current: OrderStatus, actor: StatusActor) -> Tuple[OrderStatus, ...]:
    table = OPERATOR_TRANSITIONS if actor == StatusActor.OPERATOR else SYSTEM_TRANSITIONS
    return table.get(current, ())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class OrderLineItem:
    """Catalog data copied into the order at submission time"""

    item_id: str
    name: str
    price: Decimal
    market_price: Decimal
    quantity: int
    size: str
    image: str = ""

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity

    @property
    def savings(self) -> Decimal:
        return (self.market_price - self.price) * self.quantity

    def to_dict(self) -> Dict[str, Any]:
        return {
            "item_id": self.item_id,
            "name": self.name,
            "price": str(self.price),
            "market_price": str(self.market_price),
            "quantity": self.quantity,
            "size": self.size,
            "image": self.image,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OrderLineItem":
        return cls(
            item_id=data["item_id"],
            name=data.get("name", ""),
            price=Decimal(str(data["price"])),
            market_price=Decimal(str(data.get("market_price", data["price"]))),
            quantity=int(data["quantity"]),
            size=data["size"],
            image=data.get("image", ""),
        )


@dataclass(frozen=True)
class PaymentInfo:
    method: PaymentMethod
    status: PaymentStatus = PaymentStatus.PENDING
    transaction_id: Optional[str] = None
    gateway_order_id: Optional[str] = None


@dataclass(frozen=True)
class Order:
    """
    Placed order.

    Everything except ``status``, ``payment`` and ``updated_at`` is fixed at
    placement; status changes produce a new instance via ``with_status``.
    """

    id: Optional[str]
    user_id: str
    items: Tuple[OrderLineItem, ...]
    subtotal: Decimal
    sgst: Decimal
    cgst: Decimal
    delivery_fee: Decimal
    discount: Decimal
    savings: Decimal
    amount: Decimal
    address: Address
    payment: PaymentInfo
    status: OrderStatus
    promo_code: Optional[str] = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: Optional[datetime] = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def is_deletable(self) -> bool:
        return self.status == OrderStatus.DELIVERED

    def can_transition(self, new_status: OrderStatus, actor: StatusActor) -> bool:
        return new_status in allowed_transitions(self.status, actor)

    def with_status(
        self, new_status: OrderStatus, payment: Optional[PaymentInfo] = None
    ) -> "Order":
        return replace(
            self,
            status=new_status,
            payment=payment or self.payment,
            updated_at=_utcnow(),
        )
