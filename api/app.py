"""
Flask API for the Shopify Carrier Service App.

This module provides the HTTP endpoints:
- GET  /health                  - Health check
- GET  /api/products/count      - Number of products in the store
- GET  /api/products/create     - Create a batch of sample products
- GET  /api/carrier-service     - List the shop's carrier services
- POST /api/carrier-service     - Create a carrier service
- POST /calculate-rates         - Carrier service rate callback (public)
- GET  /                        - Admin panel
- POST /panel/carrier-service   - Admin panel: create carrier service form
- POST /panel/products          - Admin panel: populate products button

Everything except /health and /calculate-rates requires a merchant session.
"""

import logging
import time
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from functools import wraps
from typing import Any, Dict, List, Optional

from flask import Flask, request, jsonify, render_template
from flask_cors import CORS

from carrier.carrier_services import get_carrier_service_manager
from carrier.errors import CarrierAppError
from carrier.panel import CarrierPanel, ServiceBackend
from carrier.product_seeder import get_product_seeder
from carrier.rates import calculate_rates
from carrier.session import authenticate_request, get_session_store
from config import API_CONFIG, CORS_CONFIG, LOGGING_CONFIG, RATE_CURRENCY

# Configure logging
logging.basicConfig(
    level=getattr(logging, LOGGING_CONFIG["level"], logging.INFO),
    format=LOGGING_CONFIG["format"]
)
logger = logging.getLogger(__name__)

_CENTS = Decimal("0.01")


def _iso_timestamp(moment: datetime) -> str:
    """UTC timestamp with millisecond precision and a Z suffix."""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def format_rates(rates: List[Dict[str, Any]], now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    """
    Shape calculated quotes for the carrier service callback response.

    Prices become strings with exactly two decimals, the currency is fixed
    and both delivery dates are set to the current time.
    """
    timestamp = _iso_timestamp(now or datetime.now(timezone.utc))

    return [
        {
            "service_name": rate["service_name"],
            "service_code": rate["service_code"],
            "total_price": str(Decimal(str(rate["total_price"])).quantize(_CENTS, rounding=ROUND_HALF_UP)),
            "currency": RATE_CURRENCY,
            "min_delivery_date": timestamp,
            "max_delivery_date": timestamp,
            "description": rate["description"],
        }
        for rate in rates
    ]


def create_app(carrier_manager=None, product_seeder=None, session_store=None) -> Flask:
    """
    Create and configure the Flask application.

    Args:
        carrier_manager: CarrierServiceManager to use (defaults to singleton)
        product_seeder: ProductSeeder to use (defaults to singleton)
        session_store: SessionStore to authenticate against (defaults to singleton)

    Returns:
        Configured Flask app instance
    """
    app = Flask(__name__)

    carrier_manager = carrier_manager or get_carrier_service_manager()
    product_seeder = product_seeder or get_product_seeder()
    session_store = session_store or get_session_store()

    # Shopify calls /calculate-rates from its own servers, the admin from the browser
    CORS(app, resources={
        r"/api/*": CORS_CONFIG,
        r"/calculate-rates": CORS_CONFIG,
    })

    # Request timing decorator
    def timed_request(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            start_time = time.time()
            response = f(*args, **kwargs)
            elapsed_ms = (time.time() - start_time) * 1000
            logger.info(f"{request.method} {request.path} completed in {elapsed_ms:.2f}ms")
            return response
        return decorated_function

    # Resolves the merchant session and hands it to the view explicitly
    def requires_session(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            session = authenticate_request(request, store=session_store)
            return f(session, *args, **kwargs)
        return decorated_function

    # Error handlers
    @app.errorhandler(CarrierAppError)
    def carrier_app_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(400)
    def bad_request(error):
        return jsonify({
            "error": "Bad Request",
            "message": str(error.description)
        }), 400

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({
            "error": "Not Found",
            "message": "The requested resource was not found"
        }), 404

    @app.errorhandler(500)
    def internal_error(error):
        logger.error(f"Internal error: {error}")
        return jsonify({
            "error": "Internal Server Error",
            "message": "An unexpected error occurred"
        }), 500

    # ==========================================================================
    # HEALTH CHECK ENDPOINTS
    # ==========================================================================

    @app.route("/health", methods=["GET"])
    @timed_request
    def health_check():
        """
        Health check endpoint.

        Example:
            GET /health
            Response: {"status": "healthy", "sessions": 1, "timestamp": 1700000000.0}
        """
        return jsonify({
            "status": "healthy",
            "sessions": session_store.num_sessions,
            "timestamp": time.time()
        }), 200

    @app.route("/health/live", methods=["GET"])
    @timed_request
    def health_live():
        """Liveness endpoint."""
        return jsonify({
            "status": "alive",
            "timestamp": time.time()
        }), 200

    # ==========================================================================
    # PRODUCT ENDPOINTS
    # ==========================================================================

    @app.route("/api/products/count", methods=["GET"])
    @timed_request
    @requires_session
    def count_products(session):
        """
        Number of products in the store.

        Example Response:
            {"count": 12}
        """
        return jsonify({"count": product_seeder.count_products(session)}), 200

    @app.route("/api/products/create", methods=["GET"])
    @timed_request
    @requires_session
    def create_products(session):
        """
        Create a batch of sample products.

        The batch either succeeds completely or the request reports failure;
        no partial counts are returned.

        Example Response:
            {"success": true, "error": null}
        """
        try:
            product_seeder.seed_products(session)
        except Exception as e:
            logger.error(f"Failed to process products/create: {e}")
            return jsonify({"success": False, "error": str(e)}), 500

        return jsonify({"success": True, "error": None}), 200

    # ==========================================================================
    # CARRIER SERVICE ENDPOINTS
    # ==========================================================================

    @app.route("/api/carrier-service", methods=["GET"])
    @timed_request
    @requires_session
    def list_carrier_services(session):
        """
        List the shop's carrier services.

        Example Response:
            {"success": true, "data": [{"id": 1, "name": "DHL", ...}], "count": 1}
        """
        carrier_services = carrier_manager.list_carrier_services(session)
        return jsonify({
            "success": True,
            "data": carrier_services,
            "count": len(carrier_services)
        }), 200

    @app.route("/api/carrier-service", methods=["POST"])
    @timed_request
    @requires_session
    def create_carrier_service(session):
        """
        Create a carrier service.

        Request Body:
        {
            "name": "DHL",
            "callbackUrl": "https://example.com/calculate-rates",
            "service_discovery": true
        }

        Service discovery is always enabled regardless of the body.

        Returns:
            201 with the created carrier service, 409 if the name is taken
        """
        data = request.get_json(silent=True) or {}

        carrier_service = carrier_manager.create_carrier_service(
            session,
            name=data.get("name"),
            callback_url=data.get("callbackUrl") or data.get("callback_url"),
        )

        return jsonify({
            "success": True,
            **carrier_service
        }), 201

    # ==========================================================================
    # RATE CALLBACK ENDPOINT
    # ==========================================================================

    @app.route("/calculate-rates", methods=["POST"])
    @timed_request
    def rates_callback():
        """
        Return shipping rates for a shipment.

        Request Body:
        {
            "origin": "...",
            "destination": "...",
            "weight": 1,
            "dimensions": {}
        }

        Example Response:
        {
            "rates": [
                {
                    "service_name": "Standard Shipping",
                    "service_code": "STANDARD",
                    "total_price": "10.99",
                    "currency": "INR",
                    "min_delivery_date": "2024-01-01T00:00:00.000Z",
                    "max_delivery_date": "2024-01-01T00:00:00.000Z",
                    "description": "Delivery within 5-7 business days"
                },
                ...
            ]
        }
        """
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            data = {}

        rates = calculate_rates(
            data.get("origin"),
            data.get("destination"),
            data.get("weight"),
            data.get("dimensions"),
        )
        return jsonify({"rates": format_rates(rates)}), 200

    # ==========================================================================
    # ADMIN PANEL PAGES
    # ==========================================================================

    def _render_panel(panel: CarrierPanel):
        return render_template(
            "index.html",
            panel=panel,
            query_string=request.query_string.decode("utf-8"),
        )

    def _load_panel(session) -> CarrierPanel:
        panel = CarrierPanel(ServiceBackend(session, manager=carrier_manager, seeder=product_seeder))
        panel.load()
        return panel

    @app.route("/", methods=["GET"])
    @timed_request
    @requires_session
    def panel_index(session):
        """Render the carrier service panel."""
        return _render_panel(_load_panel(session))

    @app.route("/panel/carrier-service", methods=["POST"])
    @timed_request
    @requires_session
    def panel_create_carrier_service(session):
        """Handle the creation modal form; the modal stays open on error."""
        panel = _load_panel(session)
        panel.open_modal()
        panel.set_name(request.form.get("name", ""))
        panel.set_callback_url(request.form.get("callback_url", ""))
        panel.submit()
        return _render_panel(panel)

    @app.route("/panel/products", methods=["POST"])
    @timed_request
    @requires_session
    def panel_populate_products(session):
        """Handle the populate products button."""
        panel = _load_panel(session)
        panel.populate_products()
        return _render_panel(panel)

    return app


# Create the app instance
app = create_app()


if __name__ == "__main__":
    """Run the Flask development server."""
    logger.info("Starting Shopify Carrier Service App...")
    logger.info(f"Server: http://{API_CONFIG['host']}:{API_CONFIG['port']}")

    app.run(
        host=API_CONFIG["host"],
        port=API_CONFIG["port"],
        debug=API_CONFIG["debug"]
    )
