"""Custom exceptions for the pharmacy POS invoice engine."""
from decimal import Decimal


def _fmt_amount(value) -> str:
    return f"{Decimal(value).quantize(Decimal('0.01'))}"


class PosError(Exception):
    """Base exception for all application errors."""
    code = 'ERROR'

    def __init__(self, message="An internal error occurred", status_code=500, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    def to_dict(self):
        rv = dict(self.payload or ())
        rv['message'] = self.message
        rv['code'] = self.code
        rv['status'] = 'error'
        return rv


class ValidationError(PosError):
    """Malformed input rejected at the boundary, before any mutation."""
    code = 'VALIDATION_ERROR'

    def __init__(self, message, status_code=400, payload=None):
        super().__init__(message, status_code, payload)


class InvalidQuantityError(ValidationError):
    """Quantity is not a positive integer."""
    code = 'INVALID_QUANTITY'

    def __init__(self, message="Quantity must be a positive whole number", payload=None):
        super().__init__(message, payload=payload)


class InvalidDiscountError(ValidationError):
    """Discount percentage is malformed or out of range."""
    code = 'INVALID_DISCOUNT'

    def __init__(self, message="Discount must be a percentage between 0 and 100", payload=None):
        super().__init__(message, payload=payload)


class NotFoundError(PosError):
    """Exception raised when a resource is not found."""
    code = 'NOT_FOUND'

    def __init__(self, message="Resource not found", payload=None):
        super().__init__(message, 404, payload)


class OutOfStockError(PosError):
    """Soft add-time check: the medicine has no stock at all."""
    code = 'OUT_OF_STOCK'

    def __init__(self, medicine_name):
        super().__init__(f"{medicine_name} is out of stock", 409, {'medicine': medicine_name})


class InsufficientStockError(PosError):
    """Hard finalize-time check: not enough stock to commit the sale."""
    code = 'INSUFFICIENT_STOCK'

    def __init__(self, medicine_name, required, available):
        message = f"Insufficient stock for {medicine_name}: required {int(required)}, available {int(available)}"
        super().__init__(message, 409, {
            'medicine': medicine_name,
            'required': int(required),
            'available': int(available),
        })


class EmptyDraftError(PosError):
    code = 'EMPTY_DRAFT'

    def __init__(self, message="The current invoice has no items"):
        super().__init__(message, 409)


class NoActiveDraftError(PosError):
    """No open draft for the session (already finalized or discarded)."""
    code = 'NO_ACTIVE_DRAFT'

    def __init__(self, message="There is no open invoice for this session"):
        super().__init__(message, 409)


class InsufficientPaymentError(PosError):
    code = 'INSUFFICIENT_PAYMENT'

    def __init__(self, net_total, cash_paid):
        message = (
            f"Cash paid ({_fmt_amount(cash_paid)}) must be at least "
            f"the net total ({_fmt_amount(net_total)})"
        )
        super().__init__(message, 400, {
            'net_total': _fmt_amount(net_total),
            'cash_paid': _fmt_amount(cash_paid),
        })


class UnavailableError(PosError):
    """Transient infrastructure failure; callers may retry with backoff."""
    code = 'UNAVAILABLE'

    def __init__(self, message="Service temporarily unavailable, please retry"):
        super().__init__(message, 503, {'retryable': True})


class UnauthorizedError(PosError):
    code = 'UNAUTHORIZED'

    def __init__(self, message="Authentication required"):
        super().__init__(message, 401)
