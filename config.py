"""
Configuration for the Shopify Carrier Service App.

This file contains all configuration constants including:
- Shopify Admin API connection settings
- Merchant authentication keys
- The static shipping rate catalog
- Sample product seeding parameters
- Admin panel messages
- API, CORS and logging settings
"""

import os
from decimal import Decimal
from pathlib import Path

# =============================================================================
# PATH CONFIGURATION
# =============================================================================

# Base directory (project root)
BASE_DIR = Path(__file__).parent.absolute()


# =============================================================================
# SHOPIFY ADMIN API CONFIGURATION
# =============================================================================

SHOPIFY_CONFIG = {
    "api_version": os.getenv("SHOPIFY_API_VERSION", "2023-04"),
    "api_secret": os.getenv("SHOPIFY_API_SECRET", ""),
    "timeout_seconds": float(os.getenv("SHOPIFY_TIMEOUT_SECONDS", 20)),
    # Offline session installed at startup (single-store deployments)
    "shop": os.getenv("SHOPIFY_SHOP", ""),
    "access_token": os.getenv("SHOPIFY_ACCESS_TOKEN", ""),
}

# Suffix every merchant shop domain must carry
SHOP_DOMAIN_SUFFIX = ".myshopify.com"


# =============================================================================
# MERCHANT AUTHENTICATION
# Comma-separated keys accepted in the X-API-KEY header
# =============================================================================

APP_API_KEYS = [
    key.strip()
    for key in os.getenv("APP_API_KEYS", "").split(",")
    if key.strip()
]


# =============================================================================
# SHIPPING RATE CATALOG
# Static stand-in for a real rate provider. Order is significant: quotes are
# returned in exactly this order.
# =============================================================================

RATE_CATALOG = [
    {
        "service_name": "Standard Shipping",
        "service_code": "STANDARD",
        "total_price": Decimal("10.99"),
        "description": "Delivery within 5-7 business days",
    },
    {
        "service_name": "Express Shipping",
        "service_code": "EXPRESS",
        "total_price": Decimal("15.99"),
        "description": "Next-day delivery",
    },
]

RATE_CURRENCY = "INR"


# =============================================================================
# SAMPLE PRODUCT SEEDING
# =============================================================================

# Number of products created per seeding call
PRODUCT_BATCH_SIZE = int(os.getenv("PRODUCT_BATCH_SIZE", 5))

# Upper bound for the random variant price
PRODUCT_MAX_PRICE = 100

PRODUCT_TITLE_ADJECTIVES = [
    "autumn", "hidden", "bitter", "misty", "silent", "empty", "dry", "dark",
    "summer", "icy", "delicate", "quiet", "white", "cool", "spring", "winter",
    "patient", "twilight", "dawn", "crimson", "wispy", "weathered", "blue",
    "billowing", "broken", "cold", "damp", "falling", "frosty", "green", "long",
]

PRODUCT_TITLE_NOUNS = [
    "waterfall", "river", "breeze", "moon", "rain", "wind", "sea", "morning",
    "snow", "lake", "sunset", "pine", "shadow", "leaf", "dawn", "glitter",
    "forest", "hill", "cloud", "meadow", "sun", "glade", "bird", "brook",
    "butterfly", "bush", "dew", "dust", "field", "fire", "flower",
]


# =============================================================================
# ADMIN PANEL MESSAGES
# =============================================================================

PANEL_MESSAGES = {
    "products_created": "{count} products created!",
    "products_error": "There was an error creating products",
    "duplicate_name": "A carrier service already exists",
    "carrier_created": "Your {name} Carrier Service is created on CallbackURL {callback_url}",
    "carrier_error": "An error occurred while creating the carrier service",
}


# =============================================================================
# API CONFIGURATION
# =============================================================================

API_CONFIG = {
    "host": os.getenv("FLASK_HOST", "0.0.0.0"),
    "port": int(os.getenv("FLASK_PORT", 3000)),
    "debug": os.getenv("FLASK_DEBUG", "false").lower() == "true",
}

CORS_CONFIG = {
    "origins": os.getenv("CORS_ORIGINS", "*"),
    "methods": ["GET", "POST", "OPTIONS"],
    "allow_headers": ["Content-Type", "Authorization", "X-API-KEY", "X-Shopify-Shop-Domain"],
}


# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

LOGGING_CONFIG = {
    "level": os.getenv("LOG_LEVEL", "INFO"),
    "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
}
