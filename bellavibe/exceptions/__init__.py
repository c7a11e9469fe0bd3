"""Custom exceptions for the BellaVibe API."""


class ApiError(Exception):
    """Base exception for all application errors."""
    code = 'INTERNAL_ERROR'

    def __init__(self, message="An internal error occurred", status_code=500, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    def to_dict(self):
        rv = dict(self.payload or ())
        rv['message'] = self.message
        rv['status'] = 'error'
        rv['code'] = self.code
        return rv


class BusinessLogicError(ApiError):
    """Exception raised for business logic violations."""
    code = 'BUSINESS_RULE'

    def __init__(self, message, status_code=400, payload=None):
        super().__init__(message, status_code, payload)


class ValidationError(BusinessLogicError):
    """Malformed or missing request data."""
    code = 'VALIDATION_ERROR'


class NotFoundError(ApiError):
    """Exception raised when a resource is not found."""
    code = 'NOT_FOUND'

    def __init__(self, message="Resource not found", payload=None):
        super().__init__(message, 404, payload)


class ConflictError(ApiError):
    """Raised when a resource cannot change because others depend on it."""
    code = 'CONFLICT'

    def __init__(self, message, payload=None):
        super().__init__(message, 409, payload)


class UnauthorizedError(ApiError):
    """Raised when a request carries no valid credentials."""
    code = 'UNAUTHORIZED'

    def __init__(self, message="Unauthorized access"):
        super().__init__(message, 401)


# =====================================================
# CHECKOUT
# =====================================================

class ProductNotFoundError(BusinessLogicError):
    """Referenced product is absent from the catalog."""
    code = 'PRODUCT_NOT_FOUND'

    def __init__(self, product_id):
        self.product_id = product_id
        super().__init__(
            f'Product with ID {product_id} not found',
            payload={'product_id': product_id}
        )


class InsufficientStockError(BusinessLogicError):
    """Raised when an operation fails due to lack of stock."""
    code = 'INSUFFICIENT_STOCK'

    def __init__(self, product_id, available, requested, product_name=None):
        self.product_id = product_id
        self.available = available
        self.requested = requested
        label = f'"{product_name}"' if product_name else f'ID {product_id}'
        message = f'Insufficient stock for product {label}: available {available}, requested {requested}'
        super().__init__(message, payload={
            'product_id': product_id,
            'available': available,
            'requested': requested,
        })


class EmptyCartError(BusinessLogicError):
    """Checkout attempted with nothing in the cart."""
    code = 'EMPTY_CART'

    def __init__(self, message='The cart is empty. Add items before checking out.'):
        super().__init__(message)


class TransactionStartError(ApiError):
    code = 'TRANSACTION_START_FAILED'

    def __init__(self, message='Internal error while starting the sale'):
        super().__init__(message, 500)


class TransactionCommitError(ApiError):
    code = 'TRANSACTION_COMMIT_FAILED'

    def __init__(self, message='Internal error while finishing the sale'):
        super().__init__(message, 500)


class StockUpdateError(ApiError):
    code = 'STOCK_UPDATE_FAILED'

    def __init__(self, product_id):
        self.product_id = product_id
        super().__init__('Error updating stock during the sale', 500, {'product_id': product_id})


class ProductLookupError(ApiError):
    code = 'PRODUCT_LOOKUP_FAILED'

    def __init__(self, product_id):
        self.product_id = product_id
        super().__init__('Error fetching product for the sale', 500, {'product_id': product_id})


class CheckoutTimeoutError(ApiError):
    """The sale did not finish within CHECKOUT_TIMEOUT_MS; it was rolled back."""
    code = 'CHECKOUT_TIMEOUT'

    def __init__(self, message='The sale took too long and was cancelled'):
        super().__init__(message, 504)
