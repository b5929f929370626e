"""Checkout models: adjustments entered by the operator and derived totals."""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Optional
import enum


class DiscountType(str, enum.Enum):
    """Order-level discount type."""
    FIXED = 'fixed'
    PERCENTAGE = 'percentage'


class PaymentMethod(str, enum.Enum):
    """Payment method accepted at the counter."""
    CASH = 'cash'
    BANK = 'bank'
    MOBILE_WALLET = 'bkash'


class CheckoutState(enum.Enum):
    """Per-attempt state of the checkout coordinator."""
    IDLE = 'IDLE'
    VALIDATING = 'VALIDATING'
    SUBMITTING = 'SUBMITTING'


def normalize_payment_method(value) -> PaymentMethod:
    """
    Normalize payment method input to the PaymentMethod enum.

    Accepts the enum itself, its wire value ('cash', 'bank', 'bkash') or the
    enum name ('MOBILE_WALLET'), case-insensitive. None defaults to CASH.

    Raises:
        ValueError: If value is invalid
    """
    if value is None:
        return PaymentMethod.CASH

    if isinstance(value, PaymentMethod):
        return value

    if isinstance(value, str):
        normalized = value.strip().lower()
        for method in PaymentMethod:
            if normalized in (method.value, method.name.lower()):
                return method
        if normalized in ('mobile-wallet', 'mobile_wallet', 'wallet'):
            return PaymentMethod.MOBILE_WALLET

    raise ValueError(f"Invalid payment method: {value!r}")


def normalize_discount_type(value) -> DiscountType:
    """Same as normalize_payment_method, for discount types. None defaults to FIXED."""
    if value is None:
        return DiscountType.FIXED
    if isinstance(value, DiscountType):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in ('percent', '%'):
            return DiscountType.PERCENTAGE
        for discount_type in DiscountType:
            if normalized == discount_type.value:
                return discount_type
    raise ValueError(f"Invalid discount type: {value!r}")


ZERO = Decimal('0')


@dataclass(frozen=True)
class CheckoutAdjustments:
    """Operator-entered modifiers applied on top of the cart subtotal."""

    discount_type: DiscountType = DiscountType.FIXED
    discount_value: Decimal = ZERO
    tax_percentage: Decimal = ZERO
    paid_amount: Decimal = ZERO
    payment_method: PaymentMethod = PaymentMethod.CASH
    payment_account_code: Optional[str] = None

    @property
    def has_payment(self) -> bool:
        return self.paid_amount > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'discount_type': self.discount_type.value,
            'discount_value': self.discount_value,
            'tax_percentage': self.tax_percentage,
            'paid_amount': self.paid_amount,
            'payment_method': self.payment_method.value,
            'payment_account_code': self.payment_account_code,
        }


@dataclass(frozen=True)
class CheckoutTotals:
    """Derived amounts for the current cart. Never stored."""

    subtotal: Decimal = ZERO
    discount_amount: Decimal = ZERO
    tax_amount: Decimal = ZERO
    total: Decimal = ZERO
    due: Decimal = ZERO

    def to_dict(self) -> Dict[str, Decimal]:
        return {
            'subtotal': self.subtotal,
            'discount_amount': self.discount_amount,
            'tax_amount': self.tax_amount,
            'total': self.total,
            'due': self.due,
        }


@dataclass(frozen=True)
class SaleReceipt:
    """Result of a successful checkout, as reported back to the screen."""

    total: Decimal
    paid_amount: Decimal
    due: Decimal
    item_count: int
    sale_id: Optional[int] = None
    invoice_number: Optional[str] = None
    response: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'sale_id': self.sale_id,
            'invoice_number': self.invoice_number,
            'total': self.total,
            'paid_amount': self.paid_amount,
            'due': self.due,
            'item_count': self.item_count,
        }
