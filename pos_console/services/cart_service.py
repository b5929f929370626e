"""Cart Store - in-memory cart operations for one POS terminal."""

import logging
from dataclasses import replace
from typing import Dict, Optional, Tuple

from pos_console.models import (
    CartLine, CartKey, CatalogEntry, CheckoutAdjustments,
    normalize_discount_type, normalize_payment_method
)
from pos_console.exceptions import WarehouseNotSelectedError, OutOfStockError, StockExceededError
from pos_console.utils.number_format import parse_amount

logger = logging.getLogger(__name__)

_AMOUNT_LABELS = {
    'discount_value': 'Discount',
    'tax_percentage': 'Tax',
    'paid_amount': 'Paid amount',
}

_ADJUSTMENT_FIELDS = (
    'discount_type', 'discount_value', 'tax_percentage',
    'paid_amount', 'payment_method', 'payment_account_code'
)


class CartStore:
    """
    Owner of the cart lines, the checkout adjustments and the selected
    customer/warehouse.

    Every mutation goes through the methods below and is validated before it
    is applied, so ``1 <= quantity <= available_stock`` holds for every line
    at all times. A rejected mutation raises and leaves the cart untouched.
    """

    def __init__(self):
        # insertion order is the display order
        self._lines: Dict[CartKey, CartLine] = {}
        self._adjustments = CheckoutAdjustments()
        self.customer_id: Optional[int] = None
        self.selected_warehouse_id: Optional[int] = None

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def lines(self) -> Tuple[CartLine, ...]:
        return tuple(self._lines.values())

    @property
    def adjustments(self) -> CheckoutAdjustments:
        return self._adjustments

    @property
    def is_empty(self) -> bool:
        return not self._lines

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def get_line(self, product_id: int, warehouse_id: int) -> Optional[CartLine]:
        return self._lines.get((product_id, warehouse_id))

    # ------------------------------------------------------------------
    # Line mutations
    # ------------------------------------------------------------------

    def add_item(self, entry: CatalogEntry, selected_warehouse_id: Optional[int]) -> CartLine:
        """
        Add one unit of a catalog entry to the cart.

        A second add of the same (product, warehouse) increments the existing
        line instead of creating a new one.

        Returns:
            The created or updated line.

        Raises:
            WarehouseNotSelectedError: no warehouse selected on the terminal
            OutOfStockError: the entry has no remaining stock
            StockExceededError: the existing line is already at its ceiling
        """
        if not selected_warehouse_id:
            raise WarehouseNotSelectedError()

        if entry.remaining_quantity <= 0:
            raise OutOfStockError(entry.product_name)

        key = (entry.product_id, entry.warehouse_id)
        line = self._lines.get(key)

        if line:
            self.set_quantity(entry.product_id, entry.warehouse_id, line.quantity + 1)
            return self._lines[key]

        line = CartLine(
            product_id=entry.product_id,
            warehouse_id=entry.warehouse_id,
            product_name=entry.product_name,
            warehouse_name=entry.warehouse_name,
            quantity=1,
            unit_price=entry.selling_price,
            available_stock=entry.remaining_quantity,
            batch_number=entry.batch_number,
        )
        self._lines[key] = line
        logger.info(f"[CART] Added {entry.product_name} (warehouse {entry.warehouse_id}, stock {entry.remaining_quantity})")
        return line

    def set_quantity(self, product_id: int, warehouse_id: int, quantity: int) -> Optional[CartLine]:
        """
        Set the quantity of an existing line.

        ``quantity <= 0`` removes the line. An unknown key is ignored so a
        repeated UI event is harmless.

        Returns:
            The updated line, or None when removed/ignored.

        Raises:
            StockExceededError: quantity above the line's stock ceiling
        """
        key = (product_id, warehouse_id)
        line = self._lines.get(key)
        if line is None:
            logger.debug(f"[CART] set_quantity ignored, no line for {key}")
            return None

        if quantity <= 0:
            self.remove_item(product_id, warehouse_id)
            return None

        if quantity > line.available_stock:
            raise StockExceededError(line.product_name, quantity, line.available_stock)

        updated = replace(line, quantity=quantity)
        self._lines[key] = updated
        return updated

    def increment(self, product_id: int, warehouse_id: int) -> Optional[CartLine]:
        line = self.get_line(product_id, warehouse_id)
        if line is None:
            return None
        return self.set_quantity(product_id, warehouse_id, line.quantity + 1)

    def decrement(self, product_id: int, warehouse_id: int) -> Optional[CartLine]:
        line = self.get_line(product_id, warehouse_id)
        if line is None:
            return None
        return self.set_quantity(product_id, warehouse_id, line.quantity - 1)

    def remove_item(self, product_id: int, warehouse_id: int) -> bool:
        """Remove line from cart. Returns False when there was nothing to remove."""
        line = self._lines.pop((product_id, warehouse_id), None)
        if line is None:
            return False
        logger.info(f"[CART] Removed {line.product_name} (warehouse {warehouse_id})")
        return True

    def clear(self) -> None:
        """Empty the cart and reset adjustments and customer to defaults."""
        self._lines.clear()
        self._adjustments = CheckoutAdjustments()
        self.customer_id = None
        logger.info("[CART] Cart cleared")

    # ------------------------------------------------------------------
    # Customer / warehouse / adjustments
    # ------------------------------------------------------------------

    def set_customer(self, customer_id: Optional[int]) -> None:
        self.customer_id = customer_id or None

    def select_warehouse(self, warehouse_id: Optional[int]) -> None:
        # 0 means "All Warehouses" on the screen
        self.selected_warehouse_id = warehouse_id or None

    def update_adjustments(self, **changes) -> CheckoutAdjustments:
        """
        Update one or more checkout adjustments.

        Amounts are parsed with ``parse_amount``: finite, non-negative and
        rounded to the cent before they are stored. Switching the payment
        method drops the selected payment account, since accounts are listed
        per method. Nothing is applied when any field is rejected.

        Raises:
            ValueError: unknown field, invalid amount or invalid enum value
        """
        unknown = set(changes) - set(_ADJUSTMENT_FIELDS)
        if unknown:
            raise ValueError(f"Unknown adjustment fields: {', '.join(sorted(unknown))}")

        values = {}
        if 'discount_type' in changes:
            values['discount_type'] = normalize_discount_type(changes['discount_type'])
        for name, label in _AMOUNT_LABELS.items():
            if name in changes:
                values[name] = parse_amount(changes[name], label)
        if 'payment_method' in changes:
            method = normalize_payment_method(changes['payment_method'])
            values['payment_method'] = method
            if method != self._adjustments.payment_method and 'payment_account_code' not in changes:
                values['payment_account_code'] = None
        if 'payment_account_code' in changes:
            values['payment_account_code'] = changes['payment_account_code'] or None

        self._adjustments = replace(self._adjustments, **values)
        return self._adjustments
