"""Configurable fake merchant API for development and testing.

Serves an in-memory catalogue and records every call. Order submission
can be configured to be accepted, rejected with an HTTP-like status, or
to fail as if the network were down.
"""

from uuid import uuid4

from storefront.remote.port import RemoteServiceError, StorefrontAPI, SubmissionResult


class FakeStorefrontAPI(StorefrontAPI):
    """In-memory merchant API."""

    def __init__(self, products: list[dict] | None = None, categories: list[dict] | None = None) -> None:
        self.products: list[dict] = list(products or [])
        self.categories: list[dict] = list(categories or [])
        self.should_succeed: bool = True
        self.unreachable: bool = False
        self.status_code: int = 500
        self.failure_reason: str = "Internal Server Error"
        self.calls: list[dict] = []
        self.orders: list[dict] = []

    def configure(
        self,
        should_succeed: bool = True,
        unreachable: bool = False,
        status_code: int = 500,
        failure_reason: str = "Internal Server Error",
    ) -> None:
        """Configure how the fake answers from now on."""
        self.should_succeed = should_succeed
        self.unreachable = unreachable
        self.status_code = status_code
        self.failure_reason = failure_reason

    def _check_reachable(self, method: str) -> None:
        if self.unreachable:
            raise RemoteServiceError(f"{method}: connection refused")

    def fetch_products(self) -> list[dict]:
        self.calls.append({"method": "fetch_products"})
        self._check_reachable("fetch_products")
        if not self.should_succeed:
            raise RemoteServiceError(
                f"Failed to fetch products: {self.status_code} - {self.failure_reason}",
                status_code=self.status_code,
            )
        return [dict(p) for p in self.products]

    def fetch_categories(self) -> list[dict]:
        self.calls.append({"method": "fetch_categories"})
        self._check_reachable("fetch_categories")
        if not self.should_succeed:
            raise RemoteServiceError(
                f"Failed to fetch categories: {self.status_code} - {self.failure_reason}",
                status_code=self.status_code,
            )
        return [dict(c) for c in self.categories]

    def submit_order(self, payload: dict) -> SubmissionResult:
        self.calls.append({"method": "submit_order", "payload": payload})
        self._check_reachable("submit_order")

        if not self.should_succeed:
            return SubmissionResult(
                accepted=False,
                status_code=self.status_code,
                body={"error": self.failure_reason},
                failure_reason=self.failure_reason,
            )

        order = {**payload, "id": f"fake-order-{uuid4().hex[:8]}", "status": "pending"}
        self.orders.append(order)
        return SubmissionResult(accepted=True, status_code=201, body=order)

    def reset(self) -> None:
        """Clear recorded calls and restore the default behaviour."""
        self.calls.clear()
        self.orders.clear()
        self.configure()
