"""Custom exceptions for the POS console."""

class PosError(Exception):
    """Base exception for all application errors."""
    def __init__(self, message="An internal error occurred", status_code=500, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    def to_dict(self):
        rv = dict(self.payload or ())
        rv['message'] = self.message
        rv['status'] = 'error'
        return rv

class BusinessLogicError(PosError):
    """Exception raised for business logic violations."""
    def __init__(self, message, status_code=400, payload=None):
        super().__init__(message, status_code, payload)

class NotFoundError(PosError):
    """Exception raised when a resource is not found."""
    def __init__(self, message="Resource not found", payload=None):
        super().__init__(message, 404, payload)


# Cart guards

class WarehouseNotSelectedError(BusinessLogicError):
    """Raised when adding to the cart before a warehouse is chosen."""
    def __init__(self):
        super().__init__("Please select a warehouse first", payload={'code': 'warehouse_not_selected'})

class OutOfStockError(BusinessLogicError):
    """Raised when the catalog entry has no remaining stock."""
    def __init__(self, product_name):
        super().__init__(
            f"{product_name} is out of stock",
            status_code=409,
            payload={'code': 'out_of_stock'}
        )

class StockExceededError(BusinessLogicError):
    """Raised when a line quantity would go above its stock ceiling."""
    def __init__(self, product_name, requested, available):
        self.requested = requested
        self.available = available
        message = f"Only {available} units of {product_name} available in stock"
        super().__init__(
            message,
            status_code=409,
            payload={'code': 'stock_exceeded', 'requested': requested, 'available': available}
        )


# Checkout guards

class CheckoutValidationError(BusinessLogicError):
    """Base class for local pre-submit validation failures."""
    code = 'checkout_invalid'

    def __init__(self, message):
        super().__init__(message, status_code=422, payload={'code': self.code})

class CustomerRequiredError(CheckoutValidationError):
    code = 'customer_required'

    def __init__(self):
        super().__init__("Please select a customer")

class EmptyCartError(CheckoutValidationError):
    code = 'empty_cart'

    def __init__(self):
        super().__init__("Cart is empty")

class OverpaymentRejectedError(CheckoutValidationError):
    code = 'overpayment_rejected'

    def __init__(self):
        super().__init__("Paid amount cannot exceed total")

class PaymentAccountRequiredError(CheckoutValidationError):
    code = 'payment_account_required'

    def __init__(self):
        super().__init__("Please select a payment account")

class CheckoutInProgressError(BusinessLogicError):
    """Raised when submit is called while a previous submission is in flight."""
    def __init__(self):
        super().__init__(
            "A sale is already being processed",
            status_code=409,
            payload={'code': 'checkout_in_progress'}
        )


# Server origin

class BackofficeError(PosError):
    """Raised when the back-office API call fails (network or error envelope)."""
    def __init__(self, message=None, status_code=None):
        # upstream_status is None for network failures
        self.upstream_status = status_code
        self.server_message = message
        super().__init__(message or "Back-office service unavailable", 502)

class SaleSubmissionFailedError(PosError):
    """Raised when the back office rejects or fails the sale creation."""
    def __init__(self, message="Sale failed", upstream_status=None):
        self.upstream_status = upstream_status
        super().__init__(message, 502, payload={'code': 'sale_submission_failed'})
