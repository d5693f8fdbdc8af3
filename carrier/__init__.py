"""
Core module for the Shopify Carrier Service App.

This module contains:
- admin_client: Shopify Admin REST API client
- carrier_services: Carrier service listing and creation
- product_seeder: Sample product creation
- rates: Static shipping rate catalog lookup
- panel: Admin panel state machine
- session: Merchant sessions and request authentication
"""

from .errors import (
    CarrierAppError,
    DuplicateNameError,
    RemoteServiceError,
    UnauthenticatedError,
    ValidationError,
)
from .session import MerchantSession, SessionStore, authenticate_request, get_session_store
from .admin_client import AdminApiClient
from .carrier_services import CarrierServiceManager, get_carrier_service_manager
from .product_seeder import ProductSeeder, get_product_seeder
from .rates import calculate_rates
from .panel import CarrierPanel, PanelState, ServiceBackend

__all__ = [
    "CarrierAppError",
    "DuplicateNameError",
    "RemoteServiceError",
    "UnauthenticatedError",
    "ValidationError",
    "MerchantSession",
    "SessionStore",
    "authenticate_request",
    "get_session_store",
    "AdminApiClient",
    "CarrierServiceManager",
    "get_carrier_service_manager",
    "ProductSeeder",
    "get_product_seeder",
    "calculate_rates",
    "CarrierPanel",
    "PanelState",
    "ServiceBackend",
]
