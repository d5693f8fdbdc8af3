"""
API module for the Shopify Carrier Service App.

This module contains the Flask application, the JSON endpoints and the
admin panel pages.
"""

from .app import app, create_app, format_rates

__all__ = ["app", "create_app", "format_rates"]
