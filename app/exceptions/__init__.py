"""Custom exceptions for the manufacturing inventory application."""
from decimal import Decimal


def _fmt_qty(value) -> str:
    """Render a quantity without trailing zeros (10.500 -> 10.5, 70.000 -> 70)."""
    value = Decimal(str(value))
    if value % 1 == 0:
        return f"{int(value)}"
    return f"{value:f}".rstrip('0').rstrip('.')


class SaasError(Exception):
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
        rv['error'] = self.__class__.__name__
        return rv


class BusinessLogicError(SaasError):
    """Exception raised for business logic violations."""
    def __init__(self, message, status_code=400, payload=None):
        super().__init__(message, status_code, payload)


class InvalidInputError(BusinessLogicError):
    """Malformed or out-of-range input, detected before any mutation."""
    def __init__(self, message, payload=None):
        super().__init__(message, 400, payload)


class InvalidQuantityError(InvalidInputError):
    """Zero quantity, or non-positive quantity for a non-adjustment movement."""


class InvalidMovementTypeError(InvalidInputError):
    """Movement type outside the vocabulary of the stock item kind."""
    def __init__(self, movement_type, stock_item_kind):
        self.movement_type = movement_type
        self.stock_item_kind = stock_item_kind
        super().__init__(
            f'Tipo de movimiento inválido: {movement_type}',
            payload={'type': str(movement_type), 'stock_item_kind': stock_item_kind.value}
        )


class NotFoundError(SaasError):
    """Exception raised when a resource is not found."""
    def __init__(self, message="Resource not found", payload=None):
        super().__init__(message, 404, payload)


class ForbiddenError(SaasError):
    """Resource exists but belongs to another tenant."""
    def __init__(self, message="Acceso denegado a este recurso", payload=None):
        super().__init__(message, 403, payload)


class ConflictError(BusinessLogicError):
    """Duplicate balance projection or referential integrity violation."""
    def __init__(self, message, payload=None):
        super().__init__(message, status_code=409, payload=payload)


class InsufficientStockError(BusinessLogicError):
    """Raised when an operation would drive a balance below zero."""
    def __init__(self, item_name, required, available, unit=None, stock_item_id=None):
        self.item_name = item_name
        self.required = Decimal(str(required))
        self.available = Decimal(str(available))
        self.unit = unit
        self.stock_item_id = stock_item_id
        suffix = f" {unit}" if unit else ""
        message = (
            f"Stock insuficiente para {item_name}: se requieren "
            f"{_fmt_qty(required)}{suffix}, disponible {_fmt_qty(available)}{suffix}"
        )
        payload = {
            'stock_item_id': stock_item_id,
            'required': str(self.required),
            'available': str(self.available),
            'unit': unit,
        }
        super().__init__(message, status_code=409, payload=payload)
