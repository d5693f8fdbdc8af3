"""
Shipping rate calculation.

The rate catalog is a static stand-in: every request gets the same quotes
in the same order. Inputs are accepted so the signature matches a real
rate provider, but they do not change the result.

Formatting for the carrier-service callback response (2dp price strings,
currency, delivery dates) is done by the API layer, not here.
"""

import copy
from typing import Any, Dict, List, Optional

from config import RATE_CATALOG


def calculate_rates(
    origin: Any = None,
    destination: Any = None,
    weight: Optional[float] = None,
    dimensions: Any = None,
) -> List[Dict[str, Any]]:
    """
    Return candidate shipping rates for a shipment.

    Never raises, whatever the inputs (``None``, zero weight, empty
    addresses are all fine).

    Returns:
        List of quote dicts with service_name, service_code,
        total_price (Decimal) and description, in catalog order
    """
    return [copy.deepcopy(rate) for rate in RATE_CATALOG]
