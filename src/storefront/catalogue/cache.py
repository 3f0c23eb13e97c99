"""Catalogue cache — the products and categories the shopper can browse.

Refreshed at start-up and whenever the storefront regains focus. A failed
product fetch empties the cache; stale products are never kept. Malformed
records are skipped one by one. Category identifiers fall back to the persisted list,
then to a built-in default.
"""

from protean.exceptions import ObjectNotFoundError
from pydantic import ValidationError as RecordError

from storefront.catalogue.product import Category, Product
from storefront.persistence.state import LocalStore, StateKey
from storefront.remote.port import RemoteServiceError, StorefrontAPI
from storefront.utils.logging import logger

ALL_CATEGORIES = "all"
DEFAULT_CATEGORIES = ["hoodies", "sweatpants", "sets", "jackets"]


class CatalogueCache:
    def __init__(self, api: StorefrontAPI, store: LocalStore) -> None:
        self.api = api
        self.store = store
        self.products: list[Product] = []
        self.categories: list[str] = list(DEFAULT_CATEGORIES)

    def refresh(self) -> list[Product]:
        """Reload products and categories from the merchant API."""
        try:
            records = self.api.fetch_products()
        except RemoteServiceError as exc:
            logger.error("Error loading products from API", error=str(exc))
            self.products = []
        else:
            self.products = _readable_products(records)
            logger.info("Products loaded from API", count=len(self.products), received=len(records))

        self.refresh_categories()
        return self.products

    def refresh_categories(self) -> list[str]:
        try:
            records = self.api.fetch_categories()
            categories = [str(Category.model_validate(record).id) for record in records]
        except (RemoteServiceError, RecordError) as exc:
            logger.warning("Using persisted categories", error=str(exc))
            categories = self.store.read(StateKey.CATEGORIES, default=None) or list(DEFAULT_CATEGORIES)
        else:
            self.store.write(StateKey.CATEGORIES, categories)

        self.categories = categories
        return self.categories

    def find(self, product_id) -> Product:
        product = next((p for p in self.products if str(p.id) == str(product_id)), None)
        if product is None:
            raise ObjectNotFoundError(f"Product `{product_id}` does not exist")
        return product

    def search(self, term: str | None, category: str | None = None) -> list[Product]:
        return [p for p in self.by_category(category) if p.matches(term or "")]

    def by_category(self, category: str) -> list[Product]:
        if not category or category == ALL_CATEGORIES:
            return list(self.products)
        return [p for p in self.products if str(p.category) == str(category)]

    @staticmethod
    def category_label(category: str) -> str:
        category = str(category)
        return category[:1].upper() + category[1:]


def _readable_products(records) -> list[Product]:
    products = []
    for record in records:
        try:
            products.append(Product.model_validate(record))
        except RecordError as exc:
            record_id = record.get("id") if isinstance(record, dict) else None
            logger.warning("Skipping malformed product record", product_id=record_id, error=str(exc))
    return products
