"""Persisted client state — the shopper's key-value store.

Cart, wishlist, the local order backup log, and the fallback category list
are each kept under one key as a JSON document. Every mutation is written
through immediately; there is no batching.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.utils.logging import logger


class StateKey(Enum):
    CART = "cart"
    WISHLIST = "wishlist"
    ORDERS = "ordersData"
    CATEGORIES = "categories"


@storefront.aggregate
class StoredState:
    """One persisted key and its JSON document."""

    key = String(identifier=True, required=True, max_length=50)
    value = Text()
    updated_at = DateTime()


def _key_name(key) -> str:
    return key.value if isinstance(key, StateKey) else str(key)


class LocalStore:
    """Read/write access to persisted state by key.

    Values go through ``json`` so whatever is read back is a fresh copy of
    what was written: lists keep their order, mutations of a returned value
    never leak into the store.
    """

    def _repository(self):
        return current_domain.repository_for(StoredState)

    def _load(self, name):
        try:
            return self._repository().get(name)
        except ObjectNotFoundError:
            return None

    def read(self, key, default=None):
        name = _key_name(key)
        record = self._load(name)
        if record is None or record.value is None:
            return default

        try:
            return json.loads(record.value)
        except ValueError:
            logger.warning("Discarding unreadable persisted state", key=name)
            return default

    def write(self, key, value) -> None:
        name = _key_name(key)
        document = json.dumps(value, ensure_ascii=False)
        now = datetime.now(UTC)

        record = self._load(name)
        if record is None:
            record = StoredState(key=name, value=document, updated_at=now)
        else:
            record.value = document
            record.updated_at = now

        self._repository().add(record)

    def append(self, key, entry) -> list:
        """Append ``entry`` to the JSON list stored under ``key``."""
        entries = self.read(key, default=[])
        if not isinstance(entries, list):
            entries = []
        entries.append(entry)
        self.write(key, entries)
        return entries
