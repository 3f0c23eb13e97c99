"""Product aggregate — what the merchant sells."""

import json
from datetime import datetime
from urllib.parse import urlparse

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Integer, String, Text

from merchant.domain import logger, merchant


def _is_absolute_url(value):
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


@merchant.aggregate
class Product:
    """A catalogue product.

    Option lists (sizes, colors, gallery images) and the colour-to-image map
    are stored as JSON text. ``to_record()`` returns the representation
    served by ``GET /products``.
    """

    name = String(required=True, max_length=255)
    price = Float(required=True)
    description = Text()
    category = String(max_length=100)
    sizes = Text()  # JSON list
    colors = Text()  # JSON list
    main_image = Text()
    images = Text()  # JSON list
    color_images = Text()  # JSON object: colour → image URL
    quantity = Integer(default=0, min_value=0)
    available = Boolean(default=True)
    created_at = DateTime(default=datetime.now)

    @classmethod
    def create(
        cls,
        name,
        price,
        description=None,
        category=None,
        sizes=None,
        colors=None,
        main_image=None,
        images=None,
        color_images=None,
        quantity=0,
        available=True,
    ):
        from merchant.catalogue.events import ProductAdded

        if price is None or price <= 0:
            raise ValidationError({"price": ["Price must be greater than zero"]})

        # Image URLs are not rejected, only reported
        for url in [main_image, *(images or []), *(color_images or {}).values()]:
            if url and not _is_absolute_url(url):
                logger.warning("Invalid image URL", url=url, product=name)

        product = cls(
            name=name,
            price=price,
            description=description,
            category=category,
            sizes=json.dumps(list(sizes or [])),
            colors=json.dumps(list(colors or [])),
            main_image=main_image,
            images=json.dumps(list(images or [])),
            color_images=json.dumps(dict(color_images or {})),
            quantity=quantity or 0,
            available=available,
        )
        product.raise_(
            ProductAdded(
                product_id=product.id,
                name=name,
                price=price,
                category=category,
            )
        )
        return product

    def to_record(self) -> dict:
        return {
            "id": str(self.id),
            "name": self.name,
            "price": self.price,
            "description": self.description or "",
            "category": self.category,
            "sizes": json.loads(self.sizes or "[]"),
            "colors": json.loads(self.colors or "[]"),
            "main_image": self.main_image,
            "images": json.loads(self.images or "[]"),
            "color_images": json.loads(self.color_images or "{}"),
            "quantity": self.quantity,
            "available": self.available,
        }
