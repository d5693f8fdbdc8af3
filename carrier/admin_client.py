"""
Shopify Admin REST API client.

One client is bound to one merchant session. Every call goes through
``_request`` which pins the API version, sends the offline access token
and turns any transport failure or non-2xx answer into a
``RemoteServiceError`` carrying the upstream status and message.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from config import SHOPIFY_CONFIG
from carrier.errors import RemoteServiceError
from carrier.session import MerchantSession

logger = logging.getLogger(__name__)


def _extract_error_message(response: requests.Response) -> str:
    """
    Pull a readable message out of a Shopify error response.

    Shopify answers with ``{"errors": ...}`` where the value is a string, a
    list, or a field → messages mapping.
    """
    try:
        payload = response.json()
    except ValueError:
        return response.text or response.reason or f"HTTP {response.status_code}"

    errors = payload.get("errors") if isinstance(payload, dict) else None
    if errors is None:
        return response.reason or f"HTTP {response.status_code}"
    if isinstance(errors, str):
        return errors
    if isinstance(errors, list):
        return "; ".join(str(e) for e in errors)
    if isinstance(errors, dict):
        parts = []
        for field, messages in errors.items():
            if isinstance(messages, list):
                messages = ", ".join(str(m) for m in messages)
            parts.append(f"{field} {messages}")
        return "; ".join(parts)
    return str(errors)


class AdminApiClient:
    """
    REST client for the subset of the Admin API the app uses.

    Usage:
        with AdminApiClient(session) as client:
            count = client.count_products()
            services = client.list_carrier_services()
    """

    def __init__(
        self,
        session: MerchantSession,
        http: Optional[requests.Session] = None,
        api_version: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.session = session
        self.api_version = api_version or SHOPIFY_CONFIG["api_version"]
        self.timeout = timeout or SHOPIFY_CONFIG["timeout_seconds"]
        self.base_url = f"https://{session.shop}/admin/api/{self.api_version}"
        self._owns_http = http is None
        self._http = http or requests.Session()
        self._headers = {
            "X-Shopify-Access-Token": session.access_token,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> 'AdminApiClient':
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"

        try:
            response = self._http.request(
                method=method,
                url=url,
                headers=self._headers,
                json=json,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"{method} {path} for {self.session.shop} failed: {e}")
            raise RemoteServiceError(f"Shopify request failed: {e}") from e

        if not response.ok:
            message = _extract_error_message(response)
            logger.error(
                f"{method} {path} for {self.session.shop} returned "
                f"{response.status_code}: {message}"
            )
            raise RemoteServiceError(message, status_code=response.status_code)

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise RemoteServiceError(f"Invalid JSON from Shopify: {e}") from e

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    def count_products(self) -> int:
        payload = self._request("GET", "/products/count.json")
        return int(payload.get("count", 0))

    def create_product(self, product: Dict[str, Any]) -> Dict[str, Any]:
        payload = self._request("POST", "/products.json", json={"product": product})
        return payload.get("product", {})

    # ------------------------------------------------------------------
    # Carrier services
    # ------------------------------------------------------------------

    def list_carrier_services(self) -> List[Dict[str, Any]]:
        payload = self._request("GET", "/carrier_services.json")
        return payload.get("carrier_services", [])

    def create_carrier_service(self, carrier_service: Dict[str, Any]) -> Dict[str, Any]:
        payload = self._request(
            "POST",
            "/carrier_services.json",
            json={"carrier_service": carrier_service},
        )
        return payload.get("carrier_service", {})
