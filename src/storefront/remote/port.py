"""Merchant API port (abstract interface).

Defines the contract for the remote service the storefront talks to:
catalogue reads and order submission. The HTTP adapter talks to the real
API; the fake adapter serves development and tests.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


class RemoteServiceError(Exception):
    """The merchant API could not be reached or answered with an error."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class SubmissionResult:
    """Result of an order submission that reached the merchant API."""

    accepted: bool
    status_code: int | None = None
    body: dict | None = None
    failure_reason: str | None = None


class StorefrontAPI(ABC):
    """Abstract merchant API interface."""

    @abstractmethod
    def fetch_products(self) -> list[dict]:
        """Return the raw product records. Raises RemoteServiceError on failure."""
        ...

    @abstractmethod
    def fetch_categories(self) -> list[dict]:
        """Return the raw category records. Raises RemoteServiceError on failure."""
        ...

    @abstractmethod
    def submit_order(self, payload: dict) -> SubmissionResult:
        """Send an order payload.

        Non-2xx answers come back as a non-accepted result; transport
        failures raise RemoteServiceError.
        """
        ...
