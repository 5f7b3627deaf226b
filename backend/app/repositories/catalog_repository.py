"""
Catalog Repository - read-only access to catalog prices

The catalog is managed elsewhere; checkout only needs authoritative
unit prices for the items in a cart.
"""
from typing import Dict, Iterable, List

from app.core.database import Database
from app.core.errors import ItemNotFound
from app.domain.catalog import CatalogItem


class CatalogRepository:
    """Repository for catalog item lookups"""

    def __init__(self, db: Database):
        self.db = db

    def find_by_ids(self, item_ids: Iterable[str]) -> List[CatalogItem]:
        """Catalog items for the given IDs (unknown IDs are skipped)"""
        ids = sorted({str(item_id) for item_id in item_ids})
        if not ids:
            return []

        with self.db.transaction() as cursor:
            cursor.execute("""
                SELECT id, name, price, sizes
                FROM catalog_items
                WHERE id = ANY(%s)
            """, (ids,))
            return [CatalogItem(**row) for row in cursor.fetchall()]

    def lookup_prices(self, item_ids: Iterable[str]) -> Dict[str, int]:
        """
        Unit prices by item ID

        Raises:
            ItemNotFound: If any ID does not resolve
        """
        requested = {str(item_id) for item_id in item_ids}
        prices = {item.id: item.price for item in self.find_by_ids(requested)}

        missing = requested - prices.keys()
        if missing:
            raise ItemNotFound(missing)

        return prices
