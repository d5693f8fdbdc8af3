"""
Sample product seeding.

Creates a fixed batch of products with random two-word titles and a random
price, one Admin API call per product. The first failure aborts the rest of
the batch; callers only learn success or failure, never a partial count.
"""

import logging
import random
from typing import Any, Callable, Dict, Optional

from config import (
    PRODUCT_BATCH_SIZE,
    PRODUCT_MAX_PRICE,
    PRODUCT_TITLE_ADJECTIVES,
    PRODUCT_TITLE_NOUNS,
)
from carrier.admin_client import AdminApiClient
from carrier.session import MerchantSession

logger = logging.getLogger(__name__)


class ProductSeeder:
    """
    Creates sample products in a merchant's store.

    Usage:
        seeder = get_product_seeder()
        created = seeder.seed_products(session)
    """

    _instance: Optional['ProductSeeder'] = None

    def __init__(
        self,
        client_factory: Callable[[MerchantSession], Any] = AdminApiClient,
        rng: Optional[random.Random] = None,
    ):
        self._client_factory = client_factory
        self._rng = rng or random.Random()

    @classmethod
    def get_instance(cls) -> 'ProductSeeder':
        """Get the singleton instance of ProductSeeder."""
        if cls._instance is None:
            cls._instance = ProductSeeder()
        return cls._instance

    def random_title(self) -> str:
        adjective = self._rng.choice(PRODUCT_TITLE_ADJECTIVES)
        noun = self._rng.choice(PRODUCT_TITLE_NOUNS)
        return f"{adjective} {noun}"

    def random_price(self) -> str:
        return f"{self._rng.uniform(0, PRODUCT_MAX_PRICE):.2f}"

    def build_product(self) -> Dict[str, Any]:
        return {
            "title": self.random_title(),
            "variants": [{"price": self.random_price()}],
        }

    def count_products(self, session: MerchantSession) -> int:
        """Number of products currently in the store."""
        with self._client_factory(session) as client:
            return client.count_products()

    def seed_products(self, session: MerchantSession, count: int = PRODUCT_BATCH_SIZE) -> int:
        """
        Create ``count`` sample products.

        Returns:
            Number of products created (always ``count``)

        Raises:
            RemoteServiceError: any creation failed; remaining products are skipped
        """
        with self._client_factory(session) as client:
            for i in range(count):
                product = self.build_product()
                client.create_product(product)
                logger.debug(f"Created product {i + 1}/{count} '{product['title']}' for {session.shop}")

        logger.info(f"Seeded {count} products for {session.shop}")
        return count


def get_product_seeder() -> ProductSeeder:
    """Get the singleton ProductSeeder instance."""
    return ProductSeeder.get_instance()
