"""
Register a carrier service for a shop from the command line.

Uses the offline session configured through SHOPIFY_SHOP and
SHOPIFY_ACCESS_TOKEN (or --access-token).

Usage:
    python scripts/register_carrier_service.py --shop demo.myshopify.com \
        --name "Custom Rates" --callback-url https://app.example.com/calculate-rates

Exit codes:
    0 created, 1 duplicate name or Shopify error, 2 no session for the shop
"""

import argparse
import json
import sys
from pathlib import Path

# Project root
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from carrier.carrier_services import get_carrier_service_manager
from carrier.errors import CarrierAppError
from carrier.session import get_session_store


def register_carrier_service(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Register a carrier service for a shop")
    parser.add_argument("--shop", required=True, help="myshopify.com domain")
    parser.add_argument("--name", required=True, help="Carrier service name")
    parser.add_argument("--callback-url", required=True, help="Rate callback URL")
    parser.add_argument("--access-token", help="Offline access token for the shop")
    args = parser.parse_args(argv)

    store = get_session_store()
    if args.access_token:
        try:
            store.store_session(args.shop, args.access_token)
        except ValueError as e:
            print(f"ERROR: {e}")
            return 2

    session = store.load_session(args.shop)
    if session is None:
        print(f"ERROR: no session for {args.shop}; set SHOPIFY_ACCESS_TOKEN or pass --access-token")
        return 2

    try:
        created = get_carrier_service_manager().create_carrier_service(
            session, args.name, args.callback_url
        )
    except CarrierAppError as e:
        print(f"ERROR: {e.message}")
        return 1

    print(json.dumps(created, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(register_carrier_service())
