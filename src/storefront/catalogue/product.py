"""Catalogue records as served by ``GET /products`` and ``GET /categories``.

These are external contracts, validated with pydantic at the boundary.
A product's first size or colour option may be a sentinel ("One Size",
"Multi") meaning the shopper has nothing to choose in that dimension.
"""

from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator

from storefront.utils.logging import logger

NO_SIZE = "One Size"
NO_COLOR = "Multi"


def _is_absolute_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


class Product(BaseModel):
    id: int | str
    name: str
    price: float
    description: str = ""
    category: int | str | None = None
    sizes: list[str] = Field(default_factory=list)
    colors: list[str] = Field(default_factory=list)
    main_image: str | None = None
    images: list[str] = Field(default_factory=list)
    color_images: dict[str, str] = Field(default_factory=dict)
    quantity: int = 0
    available: bool = False

    @field_validator("sizes", "colors", "images", mode="before")
    @classmethod
    def _null_list(cls, value):
        return [] if value is None else value

    @field_validator("color_images", mode="before")
    @classmethod
    def _null_map(cls, value):
        if value is None:
            return {}
        if isinstance(value, dict):
            return {color: url for color, url in value.items() if url is not None}
        return value

    @field_validator("description", mode="before")
    @classmethod
    def _null_text(cls, value):
        return "" if value is None else value

    @field_validator("quantity", mode="before")
    @classmethod
    def _null_quantity(cls, value):
        return 0 if value is None else value

    @field_validator("main_image")
    @classmethod
    def _lenient_main_image(cls, value):
        if value and not _is_absolute_url(value):
            logger.warning("Invalid image URL", url=value)
        return value

    @field_validator("images")
    @classmethod
    def _lenient_gallery(cls, value):
        for url in value:
            if not _is_absolute_url(url):
                logger.warning("Invalid image URL", url=url)
        return value

    @property
    def requires_size(self) -> bool:
        return len(self.sizes) > 0 and self.sizes[0] != NO_SIZE

    @property
    def requires_color(self) -> bool:
        return len(self.colors) > 0 and self.colors[0] != NO_COLOR

    @property
    def is_purchasable(self) -> bool:
        return self.available and self.quantity > 0

    @property
    def primary_image(self) -> str:
        if self.main_image:
            return self.main_image
        return self.images[0] if self.images else ""

    def image_for_color(self, color: str | None) -> str | None:
        """Override image for a colour, or None when the colour has none."""
        if not color:
            return None
        return self.color_images.get(color) or None

    def matches(self, term: str) -> bool:
        term = term.lower().strip()
        if not term:
            return True
        return (
            term in self.name.lower()
            or term in self.description.lower()
            or term in _price_text(self.price)
        )


def _price_text(price: float) -> str:
    # 250.0 is shown (and searched) as "250"
    return str(int(price)) if float(price).is_integer() else str(price)


class Category(BaseModel):
    id: int | str
    name: str
