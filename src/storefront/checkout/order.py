"""The order payload built from the cart at submission time.

Field names on the wire are camelCase (``customerName``); ``phone2`` is
left out entirely when the shopper did not provide one.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class OrderLine(BaseModel):
    name: str
    price: float
    size: str
    color: str


class Order(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    customer_name: str
    phone1: str
    phone2: str | None = None
    address: str
    items: list[OrderLine]
    total: float

    @classmethod
    def from_cart(cls, lines, customer_name, phone1, phone2, address) -> "Order":
        items = [OrderLine(name=line.name, price=line.price, size=line.size, color=line.color) for line in lines]
        return cls(
            customer_name=customer_name,
            phone1=phone1,
            phone2=phone2 or None,
            address=address,
            items=items,
            total=sum(item.price for item in items),
        )

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
