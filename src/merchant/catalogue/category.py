"""Category aggregate — identified by the slug of its name."""

import re

from protean.exceptions import ValidationError
from protean.fields import String

from merchant.domain import merchant

_NON_SLUG = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    return _NON_SLUG.sub("-", (name or "").strip().lower()).strip("-")


@merchant.aggregate
class Category:
    id = String(identifier=True, max_length=100)
    name = String(required=True, max_length=100)

    @classmethod
    def create(cls, name):
        from merchant.catalogue.events import CategoryAdded

        slug = slugify(name)
        if not slug:
            raise ValidationError({"name": ["Category name must contain letters or digits"]})

        category = cls(id=slug, name=name.strip())
        category.raise_(CategoryAdded(category_id=slug, name=category.name))
        return category

    def to_record(self) -> dict:
        return {"id": self.id, "name": self.name}
