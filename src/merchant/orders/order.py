"""Order aggregate — an order placed from the storefront.

The merchant checks the same rules as the checkout form, since it cannot
trust the client: name, address and phone 1 present, phones of exactly
11 digits, at least one item and a total matching the item prices.
"""

import re
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, String, Text

from merchant.domain import merchant

PHONE_DIGITS = 11

_PHONE_PATTERN = re.compile(rf"[0-9]{{{PHONE_DIGITS}}}")


class OrderStatus(Enum):
    PENDING = "pending"


@merchant.entity(part_of="Order")
class OrderItem:
    name = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.0)
    size = String(max_length=100)
    color = String(max_length=100)


@merchant.aggregate
class Order:
    customer_name = String(required=True, max_length=255)
    phone1 = String(required=True, max_length=PHONE_DIGITS)
    phone2 = String(max_length=PHONE_DIGITS)
    address = Text(required=True)
    items = HasMany(OrderItem)
    total = Float(required=True, min_value=0.0)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    created_at = DateTime()

    @classmethod
    def place(cls, customer_name, phone1, address, items, total, phone2=None):
        from merchant.orders.events import OrderReceived

        if not (customer_name or "").strip() or not (phone1 or "").strip() or not (address or "").strip():
            raise ValidationError({"form": ["Please fill all required fields"]})
        if not _PHONE_PATTERN.fullmatch(phone1):
            raise ValidationError({"phone1": [f"Phone number 1 must be {PHONE_DIGITS} digits"]})
        if phone2 and not _PHONE_PATTERN.fullmatch(phone2):
            raise ValidationError({"phone2": [f"Phone number 2 must be {PHONE_DIGITS} digits"]})
        if not items:
            raise ValidationError({"items": ["Order must contain at least one item"]})

        expected = sum(item["price"] for item in items)
        if abs(expected - total) > 0.005:
            raise ValidationError({"total": [f"Total {total} does not match the sum of item prices {expected}"]})

        now = datetime.now(UTC)
        order = cls(
            customer_name=customer_name,
            phone1=phone1,
            phone2=phone2 or None,
            address=address,
            total=total,
            created_at=now,
        )
        for item in items:
            order.add_items(
                OrderItem(
                    name=item["name"],
                    price=item["price"],
                    size=item.get("size"),
                    color=item.get("color"),
                )
            )

        order.raise_(
            OrderReceived(
                order_id=order.id,
                customer_name=customer_name,
                item_count=len(items),
                total=total,
                created_at=now,
            )
        )
        return order

    def to_record(self) -> dict:
        record = {
            "id": str(self.id),
            "customerName": self.customer_name,
            "phone1": self.phone1,
            "address": self.address,
            "items": [
                {"name": item.name, "price": item.price, "size": item.size, "color": item.color}
                for item in self.items
            ],
            "total": self.total,
            "status": self.status,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
        if self.phone2:
            record["phone2"] = self.phone2
        return record
