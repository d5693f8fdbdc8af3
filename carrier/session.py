"""
Merchant session handling.

Sessions map a shop domain to the offline access token used for Admin API
calls. A request is authenticated in one of two ways:

1. Shopify-signed query string (admin page loads): every query parameter
   except ``hmac`` is sorted, joined as ``key=value`` pairs with ``&`` and
   signed with the app's API secret using HMAC-SHA256.
2. ``X-Shopify-Shop-Domain`` + ``X-API-KEY`` headers (server-to-server
   calls), the key checked against ``APP_API_KEYS``.

Either way the shop must have a stored session, otherwise the request is
rejected before any handler logic runs.
"""

import hashlib
import hmac
import logging
import re
from typing import Dict, Mapping, Optional

from config import APP_API_KEYS, SHOP_DOMAIN_SUFFIX, SHOPIFY_CONFIG
from carrier.errors import UnauthenticatedError

logger = logging.getLogger(__name__)

_SHOP_PATTERN = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9\-]*" + re.escape(SHOP_DOMAIN_SUFFIX) + r"$")


class MerchantSession:
    """Authenticated context for one shop. Read-only after creation."""

    __slots__ = ("shop", "access_token")

    def __init__(self, shop: str, access_token: str):
        self.shop = shop
        self.access_token = access_token

    def __repr__(self) -> str:
        return f"MerchantSession(shop={self.shop!r})"


def normalize_shop(shop: Optional[str]) -> Optional[str]:
    """Return the lowercase shop domain, or None if it is not a myshopify domain."""
    if not shop:
        return None
    shop = shop.strip().lower()
    if not _SHOP_PATTERN.match(shop):
        return None
    return shop


class SessionStore:
    """
    In-memory shop → access token registry.

    Usage:
        store = get_session_store()
        store.store_session("demo.myshopify.com", "shpat_...")
        session = store.load_session("demo.myshopify.com")
    """

    _instance: Optional['SessionStore'] = None

    def __init__(self):
        self._tokens: Dict[str, str] = {}

        default_shop = normalize_shop(SHOPIFY_CONFIG["shop"])
        if default_shop and SHOPIFY_CONFIG["access_token"]:
            self._tokens[default_shop] = SHOPIFY_CONFIG["access_token"]
            logger.info(f"Loaded offline session for {default_shop}")

    @classmethod
    def get_instance(cls) -> 'SessionStore':
        """Get the singleton instance of SessionStore."""
        if cls._instance is None:
            cls._instance = SessionStore()
        return cls._instance

    def store_session(self, shop: str, access_token: str) -> MerchantSession:
        normalized = normalize_shop(shop)
        if normalized is None:
            raise ValueError(f"Invalid shop domain: {shop}")
        if not access_token:
            raise ValueError("access_token is required")
        self._tokens[normalized] = access_token
        return MerchantSession(normalized, access_token)

    def load_session(self, shop: str) -> Optional[MerchantSession]:
        normalized = normalize_shop(shop)
        if normalized is None:
            return None
        token = self._tokens.get(normalized)
        if token is None:
            return None
        return MerchantSession(normalized, token)

    def delete_session(self, shop: str) -> bool:
        normalized = normalize_shop(shop)
        return self._tokens.pop(normalized, None) is not None

    @property
    def num_sessions(self) -> int:
        return len(self._tokens)


def get_session_store() -> SessionStore:
    """Get the singleton SessionStore instance."""
    return SessionStore.get_instance()


def compute_query_hmac(params: Mapping[str, str], secret: str) -> str:
    """Compute Shopify's hex HMAC-SHA256 signature for query parameters."""
    message = "&".join(
        f"{key}={params[key]}"
        for key in sorted(params)
        if key != "hmac"
    )
    return hmac.new(secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).hexdigest()


def verify_query_hmac(params: Mapping[str, str], secret: str) -> bool:
    signature = params.get("hmac")
    if not signature or not secret:
        return False
    return hmac.compare_digest(compute_query_hmac(params, secret), signature)


def _valid_api_key(candidate: Optional[str]) -> bool:
    candidate = (candidate or "").strip()
    return bool(candidate) and any(hmac.compare_digest(candidate, key) for key in APP_API_KEYS)


def authenticate_request(request, store: Optional[SessionStore] = None) -> MerchantSession:
    """
    Resolve the merchant session for a Flask request.

    Raises:
        UnauthenticatedError: no valid signature/key, or no stored session
    """
    store = store or get_session_store()
    query = request.args.to_dict()

    if "hmac" in query:
        if not verify_query_hmac(query, SHOPIFY_CONFIG["api_secret"]):
            logger.warning(f"Rejected request to {request.path}: bad query signature")
            raise UnauthenticatedError("Invalid request signature")
        shop = query.get("shop")
    else:
        shop = request.headers.get("X-Shopify-Shop-Domain")
        if not _valid_api_key(request.headers.get("X-API-KEY")):
            logger.warning(f"Rejected request to {request.path}: missing or invalid API key")
            raise UnauthenticatedError("Invalid or missing API key")

    session = store.load_session(shop) if shop else None
    if session is None:
        logger.warning(f"Rejected request to {request.path}: no session for shop {shop!r}")
        raise UnauthenticatedError("No active session for this shop")

    return session
