"""Models package - exports the POS in-memory models."""
from pos_console.models.cart import CartLine, CartKey
from pos_console.models.catalog import CatalogEntry, to_decimal
from pos_console.models.checkout import (
    CheckoutAdjustments, CheckoutTotals, CheckoutState, SaleReceipt,
    DiscountType, PaymentMethod, normalize_payment_method, normalize_discount_type
)
