"""HTTP adapter for the merchant API, built on requests."""

import requests

from storefront.remote.port import RemoteServiceError, StorefrontAPI, SubmissionResult
from storefront.utils.logging import logger

_JSON_HEADERS = {"Content-Type": "application/json"}


def _error_body(response) -> dict:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


class HttpStorefrontAPI(StorefrontAPI):
    """Talks JSON to ``{base_url}/products``, ``/categories`` and ``/orders``."""

    def __init__(self, base_url: str, timeout: float = 10.0, session: requests.Session | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _get_list(self, path: str) -> list[dict]:
        url = self._url(path)
        logger.debug("Fetching from merchant API", url=url)
        try:
            response = self.session.get(url, headers=_JSON_HEADERS, timeout=self.timeout)
        except requests.RequestException as exc:
            raise RemoteServiceError(f"Failed to fetch {path}: {exc}") from exc

        if not response.ok:
            error = _error_body(response).get("error") or response.reason
            raise RemoteServiceError(
                f"Failed to fetch {path}: {response.status_code} - {error}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise RemoteServiceError(f"Failed to fetch {path}: response is not JSON") from exc

        if not isinstance(data, list):
            raise RemoteServiceError(f"Failed to fetch {path}: expected a list")
        return data

    def fetch_products(self) -> list[dict]:
        return self._get_list("products")

    def fetch_categories(self) -> list[dict]:
        return self._get_list("categories")

    def submit_order(self, payload: dict) -> SubmissionResult:
        url = self._url("orders")
        try:
            response = self.session.post(url, json=payload, headers=_JSON_HEADERS, timeout=self.timeout)
        except requests.RequestException as exc:
            raise RemoteServiceError(f"Failed to submit order: {exc}") from exc

        body = _error_body(response)
        if response.ok:
            return SubmissionResult(accepted=True, status_code=response.status_code, body=body)

        return SubmissionResult(
            accepted=False,
            status_code=response.status_code,
            body=body,
            failure_reason=body.get("error") or response.reason,
        )
