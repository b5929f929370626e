"""Cart line model (in-memory, one per product/warehouse pair)."""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Tuple

CartKey = Tuple[int, int]


@dataclass(frozen=True)
class CartLine:
    """
    Cart Line - one product from one warehouse held in the cart.

    ``unit_price`` and ``available_stock`` are snapshots taken when the line
    was created and never change afterwards. Only ``CartStore`` builds new
    versions of a line (lines are immutable).
    """

    product_id: int
    warehouse_id: int
    product_name: str
    warehouse_name: str
    quantity: int
    unit_price: Decimal
    available_stock: int
    batch_number: str = field(default='', compare=False)

    @property
    def key(self) -> CartKey:
        return (self.product_id, self.warehouse_id)

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

    @property
    def at_ceiling(self) -> bool:
        """True when no more units can be added to this line."""
        return self.quantity >= self.available_stock

    def to_dict(self) -> dict:
        return {
            'product_id': self.product_id,
            'product_name': self.product_name,
            'warehouse_id': self.warehouse_id,
            'warehouse_name': self.warehouse_name,
            'quantity': self.quantity,
            'unit_price': self.unit_price,
            'available_stock': self.available_stock,
            'batch_number': self.batch_number,
            'line_total': self.line_total,
        }

    def __repr__(self):
        return (
            f"<CartLine(product_id={self.product_id}, warehouse_id={self.warehouse_id}, "
            f"qty={self.quantity}/{self.available_stock})>"
        )
