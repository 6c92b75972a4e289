import logging
from typing import Any, Optional

import requests

from . import settings
from .schemas import GraphDataItem, RecommendedStockItem, StockRecord, normalize_records

logger = logging.getLogger(__name__)

# Distinguishes "no size filter" from an explicit size=None filter.
_UNSET: Any = object()


class ApiError(Exception):
    """Raised when the backend answers with a non-2xx status or cannot be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ApiSession:
    """
    Holds the backend address and the bearer token for one logged-in user.

    Passed explicitly into the client; `clear()` is the logout step.
    """

    def __init__(self, base_url: str, token: Optional[str] = None, timeout: int = 15):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.http = requests.Session()
        self.http.headers["Content-Type"] = "application/json"
        self.token = None
        if token:
            self.set_token(token)

    @classmethod
    def from_settings(cls) -> "ApiSession":
        return cls(settings.API_BASE_URL, settings.API_TOKEN, timeout=settings.API_TIMEOUT)

    def set_token(self, token: str):
        self.token = token
        self.http.headers["Authorization"] = f"Bearer {token}"

    def clear(self):
        self.token = None
        self.http.headers.pop("Authorization", None)

    def get(self, path: str, params: Optional[dict] = None) -> dict:
        url = f"{self.base_url}{path}"
        logger.debug(f"GET {url} params={params}")
        try:
            response = self.http.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise ApiError(f"Request to {url} failed: {e}") from e
        return _handle_response(response)


def _handle_response(response: requests.Response) -> dict:
    if not response.ok:
        try:
            body = response.json()
        except ValueError:
            body = {"message": "Unknown error"}
        message = body.get("message") if isinstance(body, dict) else None
        raise ApiError(
            message or f"HTTP error! status: {response.status_code}",
            status_code=response.status_code,
        )
    try:
        return response.json()
    except ValueError as e:
        raise ApiError(f"Invalid JSON from {response.url}", status_code=response.status_code) from e


def _filters(category=None, item_type=None, size=_UNSET, **extra) -> dict:
    params = {}
    if category:
        params["category"] = category
    if item_type:
        params["type"] = item_type
    if size is not _UNSET:
        params["size"] = "null" if size is None else size
    for key, value in extra.items():
        if value is not None:
            params[key] = str(value).lower() if isinstance(value, bool) else value
    return params


class InventoryApiClient:
    """Read-only wrappers around the inventory and recommended-stock endpoints."""

    def __init__(self, session: ApiSession):
        self.session = session

    def get_inventory(self) -> list[StockRecord]:
        data = self.session.get("/api/inventory")
        return normalize_records(data.get("inventory"))

    def get_all_recommendations(
        self, category=None, item_type=None, size=_UNSET, latest: Optional[bool] = None
    ) -> list[RecommendedStockItem]:
        params = _filters(category, item_type, size, latest=latest)
        data = self.session.get("/api/recommended-stock", params=params)
        return [RecommendedStockItem(**row) for row in data.get("recommendations") or []]

    def get_graph_data(self, category: str, item_type: str) -> list[GraphDataItem]:
        params = {"category": category, "type": item_type}
        data = self.session.get("/api/recommended-stock/graph", params=params)
        return [GraphDataItem(**row) for row in data.get("data") or []]

    def get_inventory_with_recommendations(
        self, category=None, item_type=None, size=_UNSET
    ) -> list[dict]:
        """Returns the raw rows; they carry display fields beyond StockRecord."""
        params = _filters(category, item_type, size)
        data = self.session.get("/api/recommended-stock/inventory", params=params)
        return list(data.get("items") or [])
