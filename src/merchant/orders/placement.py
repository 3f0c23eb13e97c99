"""Order placement — command and handler."""

import json

from protean import handle
from protean.fields import Float, String, Text
from protean.utils.globals import current_domain

from merchant.domain import logger, merchant
from merchant.orders.order import Order


@merchant.command(part_of="Order")
class PlaceOrder:
    customer_name: String(max_length=255)
    phone1: String(max_length=50)
    phone2: String(max_length=50)
    address: Text()
    items: Text()  # JSON list of {name, price, size, color}
    total: Float()


@merchant.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        order = Order.place(
            customer_name=command.customer_name,
            phone1=command.phone1,
            phone2=command.phone2,
            address=command.address,
            items=json.loads(command.items) if command.items else [],
            total=command.total or 0.0,
        )
        current_domain.repository_for(Order).add(order)

        logger.info("Order received", order_id=str(order.id), total=order.total)
        return str(order.id)
