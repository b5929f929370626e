"""
Checkout Coordinator - validates the cart and submits the sale.
Clears the cart on success, leaves it untouched on any failure.
"""
import logging
import threading
import uuid
from typing import Any, Dict, Iterable, List, Optional

from pos_console.models import CheckoutState, CheckoutTotals, PaymentMethod, SaleReceipt
from pos_console.exceptions import (
    BackofficeError, CheckoutInProgressError, CustomerRequiredError, EmptyCartError,
    OverpaymentRejectedError, PaymentAccountRequiredError, SaleSubmissionFailedError
)
from pos_console.services.cart_service import CartStore
from pos_console.services.pricing_service import calculate_totals

logger = logging.getLogger(__name__)

SALE_FAILED_MESSAGE = 'Sale failed'


class CheckoutCoordinator:
    """
    Drives one checkout attempt at a time: IDLE -> VALIDATING -> SUBMITTING -> IDLE.

    A second ``submit()`` while an attempt is running is refused with
    CheckoutInProgressError instead of producing a duplicate sale.
    """

    def __init__(self, cart: CartStore, client, branch_id: int = 1):
        self.cart = cart
        self.client = client
        self.branch_id = branch_id
        self.state = CheckoutState.IDLE
        self._guard = threading.Lock()

    @property
    def is_busy(self) -> bool:
        return self.state != CheckoutState.IDLE

    def totals(self) -> CheckoutTotals:
        return calculate_totals(self.cart.lines, self.cart.adjustments)

    def validate(self, totals: Optional[CheckoutTotals] = None) -> CheckoutTotals:
        """
        Run the pre-submit checks, first failure wins.

        Raises:
            CustomerRequiredError, EmptyCartError,
            OverpaymentRejectedError, PaymentAccountRequiredError
        """
        totals = totals or self.totals()
        adjustments = self.cart.adjustments

        if not self.cart.customer_id:
            raise CustomerRequiredError()
        if self.cart.is_empty:
            raise EmptyCartError()
        if adjustments.paid_amount > totals.total:
            raise OverpaymentRejectedError()
        if adjustments.has_payment and not adjustments.payment_account_code:
            raise PaymentAccountRequiredError()
        return totals

    def build_sale_request(self) -> Dict[str, Any]:
        """Sale-creation payload for the back office."""
        adjustments = self.cart.adjustments
        paid = adjustments.has_payment

        payload = {
            'customer_id': self.cart.customer_id,
            'branch_id': self.branch_id,
            'discount_type': adjustments.discount_type.value,
            'discount_value': adjustments.discount_value,
            'tax_percentage': adjustments.tax_percentage,
            'paid_amount': adjustments.paid_amount,
            'items': [
                {
                    'product_id': line.product_id,
                    'warehouse_id': line.warehouse_id,
                    'quantity': line.quantity,
                    'unit_price': line.unit_price,
                }
                for line in self.cart.lines
            ],
            'payments': [],
        }
        if paid:
            payload['payment_method'] = adjustments.payment_method.value
            payload['account_code'] = adjustments.payment_account_code
            payload['payments'] = [{
                'method': adjustments.payment_method.value,
                'amount': adjustments.paid_amount,
                'account_code': adjustments.payment_account_code,
            }]
        return payload

    def submit(self) -> SaleReceipt:
        """
        Validate and submit the sale.

        Returns:
            SaleReceipt built from the totals and the back-office response

        Raises:
            CheckoutInProgressError: another submission is running
            CheckoutValidationError subclasses: local check failed, nothing sent
            SaleSubmissionFailedError: back office rejected or was unreachable
        """
        if not self._guard.acquire(blocking=False):
            logger.warning("[CHECKOUT] Submit refused, another sale is in flight")
            raise CheckoutInProgressError()

        try:
            self.state = CheckoutState.VALIDATING
            totals = self.validate()

            self.state = CheckoutState.SUBMITTING
            payload = self.build_sale_request()
            item_count = self.cart.line_count
            try:
                response = self.client.create_pos_sale(payload, idempotency_key=uuid.uuid4().hex)
            except BackofficeError as e:
                logger.warning(f"[CHECKOUT] Sale rejected: {e.server_message or e.message}")
                raise SaleSubmissionFailedError(
                    e.server_message or SALE_FAILED_MESSAGE,
                    upstream_status=e.upstream_status
                ) from e

            receipt = SaleReceipt(
                total=totals.total,
                paid_amount=payload['paid_amount'],
                due=totals.due,
                item_count=item_count,
                sale_id=response.get('id') or response.get('sale_id'),
                invoice_number=response.get('invoice_number') or response.get('invoice_no'),
                response=response,
            )
            self.cart.clear()
            logger.info(f"[CHECKOUT] Sale completed: id={receipt.sale_id} total={receipt.total}")
            return receipt
        finally:
            self.state = CheckoutState.IDLE
            self._guard.release()


def accounts_for_method(accounts: Iterable[Dict[str, Any]], method: PaymentMethod) -> List[Dict[str, Any]]:
    """Payment accounts selectable for a method: cash drawers for cash, banks for bank, none for wallets."""
    if method == PaymentMethod.CASH:
        return [acc for acc in accounts if acc.get('isCash')]
    if method == PaymentMethod.BANK:
        return [acc for acc in accounts if acc.get('isBank')]
    return []
