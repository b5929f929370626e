"""Stock Catalog View - purchasable (product, warehouse, batch) entries for the POS grid."""

import logging
from typing import Any, Dict, Iterable, List, Optional

from pos_console.models import CatalogEntry
from pos_console.exceptions import NotFoundError

logger = logging.getLogger(__name__)

MAX_SEARCH_LENGTH = 100


def flatten_warehouse_report(report: Iterable[Dict[str, Any]]) -> List[CatalogEntry]:
    """Flatten warehouse -> products nesting into one list of catalog entries."""
    entries = []
    for warehouse in report or []:
        warehouse_id = warehouse.get('warehouse_id')
        if warehouse_id is None:
            warehouse_id = (warehouse.get('warehouse') or {}).get('id')
        warehouse_name = (warehouse.get('warehouse') or {}).get('name') or warehouse.get('warehouse_name', '')

        for item in warehouse.get('products') or []:
            try:
                entries.append(CatalogEntry.from_report_item(item, warehouse_id, warehouse_name))
            except (KeyError, TypeError, ValueError) as e:
                # A malformed row hides one product, not the whole grid
                logger.warning(f"[CATALOG] Skipping report row in warehouse {warehouse_id}: {e}")
    return entries


def filter_catalog(entries: Iterable[CatalogEntry], search: str = '',
                   warehouse_id: Optional[int] = None) -> List[CatalogEntry]:
    """
    Filter entries for display.

    - case-insensitive substring match on the product name
    - only the selected warehouse, when one is selected (0/None = all)
    - only entries with remaining stock
    """
    needle = (search or '').lower()
    return [
        entry for entry in entries
        if needle in entry.product_name.lower()
        and (not warehouse_id or entry.warehouse_id == warehouse_id)
        and entry.remaining_quantity > 0
    ]


class CatalogView:
    """
    Search text + warehouse filter over the latest warehouse report.

    The report is pulled from the back office on ``refresh()`` only; entries
    may therefore be older than the real stock.
    """

    def __init__(self, client):
        self.client = client
        self.search = ''
        self.warehouse_id: Optional[int] = None
        self._all: List[CatalogEntry] = []

    def refresh(self, search: Optional[str] = None, warehouse_id: Optional[int] = None) -> List[CatalogEntry]:
        if search is not None:
            self.search = search[:MAX_SEARCH_LENGTH]
        if warehouse_id is not None:
            self.warehouse_id = warehouse_id or None

        report = self.client.get_warehouse_report(search=self.search, warehouse_id=self.warehouse_id)
        self._all = flatten_warehouse_report(report)
        logger.debug(f"[CATALOG] Loaded {len(self._all)} entries (search={self.search!r}, warehouse={self.warehouse_id})")
        return self.entries

    @property
    def entries(self) -> List[CatalogEntry]:
        return filter_catalog(self._all, self.search, self.warehouse_id)

    def find(self, product_id: int, warehouse_id: int, batch_number: Optional[str] = None) -> CatalogEntry:
        """
        Look up an entry of the last loaded report.

        Raises:
            NotFoundError: not in the loaded report
        """
        for entry in self._all:
            if entry.product_id == product_id and entry.warehouse_id == warehouse_id:
                if batch_number is None or entry.batch_number == batch_number:
                    return entry
        raise NotFoundError('Product not found in the loaded stock report')
