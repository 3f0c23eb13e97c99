"""Pydantic request schemas for the Merchant API.

Orders arrive in the storefront's camelCase wire format; catalogue
records use snake_case, as served by ``GET /products``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class OrderItemPayload(BaseModel):
    name: str
    price: float
    size: str | None = None
    color: str | None = None


class PlaceOrderRequest(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "customerName": "Mona Adel",
                    "phone1": "01012345678",
                    "address": "12 Nile St, Cairo",
                    "items": [{"name": "Classic Hoodie", "price": 450.0, "size": "L", "color": "Black"}],
                    "total": 450.0,
                }
            ]
        },
    )

    customer_name: str | None = None
    phone1: str | None = None
    phone2: str | None = None
    address: str | None = None
    items: list[OrderItemPayload] = Field(default_factory=list)
    total: float = 0.0


class AddProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Classic Hoodie",
                    "price": 450.0,
                    "description": "Heavy cotton hoodie.",
                    "category": "hoodies",
                    "sizes": ["M", "L", "XL"],
                    "colors": ["Black", "Grey"],
                    "main_image": "https://cdn.example.com/hoodie.jpg",
                    "images": [],
                    "color_images": {"Grey": "https://cdn.example.com/hoodie-grey.jpg"},
                    "quantity": 20,
                    "available": True,
                }
            ]
        }
    }

    name: str = Field(..., max_length=255)
    price: float
    description: str | None = None
    category: str | None = Field(None, max_length=100)
    sizes: list[str] = Field(default_factory=list)
    colors: list[str] = Field(default_factory=list)
    main_image: str | None = None
    images: list[str] = Field(default_factory=list)
    color_images: dict[str, str] = Field(default_factory=dict)
    quantity: int = 0
    available: bool = True


class AddCategoryRequest(BaseModel):
    name: str = Field(..., max_length=100)


class ProductIdResponse(BaseModel):
    product_id: str


class CategoryIdResponse(BaseModel):
    category_id: str
