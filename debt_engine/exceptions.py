"""Custom exceptions for the debt engine."""


class DebtEngineError(Exception):
    """Base exception for all debt engine errors."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class InvalidDebtError(DebtEngineError):
    """Raised when debt terms or an extra payment fail validation."""

    def __init__(self, field: str, message: str, value=None):
        details = {'field': field}
        if value is not None:
            details['value'] = str(value)
        super().__init__(message, details)
        self.field = field


class DebtNotFoundError(DebtEngineError):
    """Raised when a debt cannot be found for the requesting owner."""

    def __init__(self, debt_id: str = None):
        details = {}
        message = "Debt not found"
        if debt_id:
            details['debt_id'] = debt_id
            message = f"Debt '{debt_id}' not found"
        super().__init__(message, details)
