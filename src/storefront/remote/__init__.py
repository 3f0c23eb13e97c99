"""Merchant API factory.

Provides get_api() / set_api() to swap implementations:
- HttpStorefrontAPI against ``STOREFRONT_API_URL`` (default)
- FakeStorefrontAPI for development and testing
"""

import os

from storefront.remote.http_adapter import HttpStorefrontAPI
from storefront.remote.port import StorefrontAPI

DEFAULT_API_URL = "http://localhost:3000/api"
DEFAULT_TIMEOUT = 10.0

_current_api: StorefrontAPI | None = None


def get_api() -> StorefrontAPI:
    """Return the current merchant API adapter. Defaults to the HTTP adapter."""
    global _current_api
    if _current_api is None:
        _current_api = HttpStorefrontAPI(
            base_url=os.environ.get("STOREFRONT_API_URL", DEFAULT_API_URL),
            timeout=float(os.environ.get("STOREFRONT_API_TIMEOUT", DEFAULT_TIMEOUT)),
        )
    return _current_api


def set_api(api: StorefrontAPI) -> None:
    """Override the active adapter (useful for tests)."""
    global _current_api
    _current_api = api


def reset_api() -> None:
    """Reset to the default adapter."""
    global _current_api
    _current_api = None
