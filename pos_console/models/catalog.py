"""Catalog entry model (read model built from warehouse stock reports)."""
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional


def to_decimal(value: Any, default: str = '0') -> Decimal:
    """Coerce API numbers/strings (e.g. "120.00") to Decimal."""
    if value is None or value == '':
        return Decimal(default)
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Decimal(default)


@dataclass(frozen=True)
class CatalogEntry:
    """A purchasable (product, warehouse, batch) tuple. Never mutated by the cart."""

    product_id: int
    product_name: str
    warehouse_id: int
    warehouse_name: str
    remaining_quantity: int
    selling_price: Decimal
    batch_number: str = ''
    sku: Optional[str] = None
    barcode: Optional[str] = None

    @property
    def in_stock(self) -> bool:
        return self.remaining_quantity > 0

    @classmethod
    def from_report_item(cls, item: Dict[str, Any], warehouse_id: int, warehouse_name: str) -> 'CatalogEntry':
        """Build an entry from one ``products[]`` element of a warehouse report."""
        product = item.get('product') or {}
        return cls(
            product_id=int(product['id']),
            product_name=product.get('name') or '',
            warehouse_id=int(warehouse_id),
            warehouse_name=warehouse_name or '',
            remaining_quantity=int(to_decimal(item.get('remaining_quantity'))),
            selling_price=to_decimal(product.get('selling_price')),
            batch_number=item.get('batch_no') or '',
            sku=product.get('sku'),
            barcode=product.get('barcode'),
        )

    def to_dict(self) -> dict:
        return {
            'product_id': self.product_id,
            'product_name': self.product_name,
            'sku': self.sku,
            'barcode': self.barcode,
            'warehouse_id': self.warehouse_id,
            'warehouse_name': self.warehouse_name,
            'remaining_quantity': self.remaining_quantity,
            'selling_price': self.selling_price,
            'batch_number': self.batch_number,
        }
