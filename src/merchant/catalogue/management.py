"""Catalogue management — commands and handlers."""

import json

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Boolean, Float, Integer, String, Text
from protean.utils.globals import current_domain

from merchant.catalogue.category import Category, slugify
from merchant.catalogue.product import Product
from merchant.domain import merchant


@merchant.command(part_of="Product")
class AddProduct:
    name: String(required=True, max_length=255)
    price: Float(required=True)
    description: Text()
    category: String(max_length=100)
    sizes: Text()  # JSON list
    colors: Text()  # JSON list
    main_image: Text()
    images: Text()  # JSON list
    color_images: Text()  # JSON object
    quantity: Integer(default=0)
    available: Boolean(default=True)


@merchant.command(part_of="Category")
class AddCategory:
    name: String(required=True, max_length=100)


@merchant.command_handler(part_of=Product)
class AddProductHandler:
    @handle(AddProduct)
    def add_product(self, command):
        product = Product.create(
            name=command.name,
            price=command.price,
            description=command.description,
            category=command.category,
            sizes=json.loads(command.sizes) if command.sizes else None,
            colors=json.loads(command.colors) if command.colors else None,
            main_image=command.main_image,
            images=json.loads(command.images) if command.images else None,
            color_images=json.loads(command.color_images) if command.color_images else None,
            quantity=command.quantity,
            available=command.available,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)


@merchant.command_handler(part_of=Category)
class AddCategoryHandler:
    @handle(AddCategory)
    def add_category(self, command):
        repo = current_domain.repository_for(Category)

        try:
            repo.get(slugify(command.name))
        except ObjectNotFoundError:
            pass
        else:
            raise ValidationError({"name": ["Category already exists"]})

        category = Category.create(command.name)
        repo.add(category)
        return category.id
