"""FastAPI endpoints for the Merchant domain."""

import json

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from merchant.api.schemas import (
    AddCategoryRequest,
    AddProductRequest,
    CategoryIdResponse,
    PlaceOrderRequest,
    ProductIdResponse,
)
from merchant.catalogue.category import Category
from merchant.catalogue.management import AddCategory, AddProduct
from merchant.catalogue.product import Product
from merchant.domain import logger
from merchant.orders.order import Order
from merchant.orders.placement import PlaceOrder

product_router = APIRouter(prefix="/products", tags=["products"])
category_router = APIRouter(prefix="/categories", tags=["categories"])
order_router = APIRouter(prefix="/orders", tags=["orders"])


def _all(aggregate_cls):
    return current_domain.repository_for(aggregate_cls)._dao.query.all().items


def _first_message(messages: dict) -> str:
    for errors in messages.values():
        if errors:
            return str(errors[0]) if isinstance(errors, list) else str(errors)
    return "Invalid order"


# --- Product endpoints ---


@product_router.get("")
async def list_products():
    return [product.to_record() for product in _all(Product)]


@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def add_product(body: AddProductRequest) -> ProductIdResponse:
    command = AddProduct(
        name=body.name,
        price=body.price,
        description=body.description,
        category=body.category,
        sizes=json.dumps(body.sizes),
        colors=json.dumps(body.colors),
        main_image=body.main_image,
        images=json.dumps(body.images),
        color_images=json.dumps(body.color_images),
        quantity=body.quantity,
        available=body.available,
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


# --- Category endpoints ---


@category_router.get("")
async def list_categories():
    return [category.to_record() for category in _all(Category)]


@category_router.post("", status_code=201, response_model=CategoryIdResponse)
async def add_category(body: AddCategoryRequest) -> CategoryIdResponse:
    result = current_domain.process(AddCategory(name=body.name), asynchronous=False)
    return CategoryIdResponse(category_id=result)


# --- Order endpoints ---


@order_router.get("")
async def list_orders():
    return [order.to_record() for order in _all(Order)]


@order_router.post("", status_code=201)
async def place_order(body: PlaceOrderRequest):
    command = PlaceOrder(
        customer_name=body.customer_name,
        phone1=body.phone1,
        phone2=body.phone2,
        address=body.address,
        items=json.dumps([item.model_dump() for item in body.items]),
        total=body.total,
    )
    try:
        order_id = current_domain.process(command, asynchronous=False)
    except ValidationError as exc:
        logger.info("Order rejected", errors=exc.messages)
        return JSONResponse(status_code=400, content={"error": _first_message(exc.messages)})

    order = current_domain.repository_for(Order).get(order_id)
    return JSONResponse(status_code=201, content=order.to_record())
