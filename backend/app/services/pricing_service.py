"""
Pricing Service
Recomputes the true cost of a submitted cart from the catalog

The client-declared amount is never trusted: it must equal the catalog
total, converted to the gateway's sub-units, exactly.
"""
import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence

from app.core.errors import AmountMismatch, UnsupportedCurrency
from app.domain.order import CartLine, NewOrderLine
from app.repositories.catalog_repository import CatalogRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidatedTotal:
    """Server-computed total of a cart"""
    amount: int
    currency: str
    lines: List[NewOrderLine]


class PricingService:
    """
    Service for validating cart totals

    Handles:
    - Currency sub-unit conversion (per-currency factor from configuration)
    - Catalog price lookup
    - Declared vs computed amount comparison
    """

    def __init__(self, catalog: CatalogRepository, currency_subunits: Dict[str, int]):
        self.catalog = catalog
        self.currency_subunits = {code.upper(): factor for code, factor in currency_subunits.items()}

    def subunit_factor(self, currency: str) -> int:
        """Sub-units per major unit for a currency"""
        factor = self.currency_subunits.get(currency.upper())
        if factor is None:
            raise UnsupportedCurrency(currency)
        return factor

    def validate(self, items: Sequence[CartLine], amount: int, currency: str) -> ValidatedTotal:
        """
        Validate a declared cart total

        Every cart line is priced once, so the same item listed twice is
        charged twice.

        Args:
            items: Cart lines
            amount: Declared total in sub-units
            currency: ISO currency code

        Returns:
            ValidatedTotal with the computed amount and priced lines

        Raises:
            UnsupportedCurrency: No sub-unit factor configured for the currency
            ItemNotFound: A line references an unknown item
            AmountMismatch: Declared amount differs from the computed one
        """
        currency = currency.upper()
        factor = self.subunit_factor(currency)
        prices = self.catalog.lookup_prices(line.item_id for line in items)

        lines = [
            NewOrderLine(item_id=line.item_id, size=line.size, unit_price=prices[line.item_id])
            for line in items
        ]
        expected = sum(line.unit_price for line in lines) * factor

        if amount != expected:
            logger.warning(f"Amount mismatch: declared {amount}, computed {expected} {currency}")
            raise AmountMismatch(declared=amount, expected=expected)

        return ValidatedTotal(amount=expected, currency=currency, lines=lines)
