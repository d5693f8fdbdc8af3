"""
Carrier Service Manager.

Lists and creates Shopify carrier services for a merchant session.

Name uniqueness is checked against a fresh list at call time, not by a
server-side constraint. Two sessions creating the same name at the same
moment can both pass the check; this is a known limitation.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from carrier.admin_client import AdminApiClient
from carrier.errors import DuplicateNameError, RemoteServiceError, ValidationError
from carrier.session import MerchantSession

logger = logging.getLogger(__name__)


def _normalize_carrier_service(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Keep the fields the app exposes, with stable keys."""
    return {
        "id": raw.get("id"),
        "name": raw.get("name", ""),
        "callback_url": raw.get("callback_url", ""),
        "service_discovery": bool(raw.get("service_discovery", False)),
        "active": bool(raw.get("active", True)),
        "carrier_service_type": raw.get("carrier_service_type"),
        "format": raw.get("format"),
    }


class CarrierServiceManager:
    """
    Carrier service operations scoped to one merchant session per call.

    Usage:
        manager = get_carrier_service_manager()
        services = manager.list_carrier_services(session)
        created = manager.create_carrier_service(session, "DHL", "https://x/cb")
    """

    _instance: Optional['CarrierServiceManager'] = None

    def __init__(self, client_factory: Callable[[MerchantSession], Any] = AdminApiClient):
        self._client_factory = client_factory

    @classmethod
    def get_instance(cls) -> 'CarrierServiceManager':
        """Get the singleton instance of CarrierServiceManager."""
        if cls._instance is None:
            cls._instance = CarrierServiceManager()
        return cls._instance

    def list_carrier_services(self, session: MerchantSession) -> List[Dict[str, Any]]:
        """
        Fetch all carrier services of the shop.

        Raises:
            RemoteServiceError: the Admin API call failed
        """
        with self._client_factory(session) as client:
            services = client.list_carrier_services()
        return [_normalize_carrier_service(s) for s in services]

    def create_carrier_service(
        self,
        session: MerchantSession,
        name: str,
        callback_url: str,
    ) -> Dict[str, Any]:
        """
        Create a carrier service with service discovery enabled.

        Args:
            session: Merchant session
            name: Carrier service name, must not match (exactly) an existing one
            callback_url: URL Shopify calls to fetch rates

        Leading and trailing whitespace is stripped from both fields before
        the duplicate check, and the stripped values are what gets created,
        so "DHL " collides with an existing "DHL". The comparison itself is
        exact and case-sensitive.

        Returns:
            The created carrier service

        Raises:
            ValidationError: name or callback_url is blank
            DuplicateNameError: name already taken; no creation call is made
            RemoteServiceError: listing or creation failed upstream
        """
        name = (name or "").strip()
        callback_url = (callback_url or "").strip()

        if not name:
            raise ValidationError("name is required")
        if not callback_url:
            raise ValidationError("callbackUrl is required")

        with self._client_factory(session) as client:
            existing_names = {s.get("name") for s in client.list_carrier_services()}
            if name in existing_names:
                logger.warning(f"Carrier service '{name}' already exists for {session.shop}")
                raise DuplicateNameError(name)

            try:
                created = client.create_carrier_service({
                    "name": name,
                    "callback_url": callback_url,
                    "service_discovery": True,
                })
            except RemoteServiceError as e:
                raise RemoteServiceError(
                    f"Could not create carrier service '{name}' on {callback_url}: {e.message}",
                    status_code=e.status_code,
                    name=name,
                    callback_url=callback_url,
                ) from e

        logger.info(f"Created carrier service '{name}' for {session.shop}")
        return _normalize_carrier_service(created)


def get_carrier_service_manager() -> CarrierServiceManager:
    """Get the singleton CarrierServiceManager instance."""
    return CarrierServiceManager.get_instance()
