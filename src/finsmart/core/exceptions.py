"""Custom exception classes for the FinSmart domain services.

Each exception carries an ``error_code`` that maps to the catalog in
errors.py and the HTTP status the API layer should answer with. Services
raise these; the handlers in ``finsmart.api.middleware.error_handler`` turn
them into JSON responses.
"""

from typing import Any


class FinSmartError(Exception):
    """Base exception for all domain errors.

    Attributes:
        error_code: Code from the error catalog (e.g., "GOAL_001")
        details: Additional context about the error
        http_status: HTTP status code to return (default: 500)
    """

    # Whether ``details`` is safe to return to the caller.
    expose_details = False

    def __init__(
        self,
        error_code: str,
        details: dict[str, Any] | None = None,
        http_status: int = 500,
    ):
        """Initialize the exception.

        Args:
            error_code: Error code from errors.py
            details: Additional error context
            http_status: HTTP status code (default: 500)
        """
        self.error_code = error_code
        self.details = details or {}
        self.http_status = http_status
        super().__init__(error_code)


class ValidationError(FinSmartError):
    """Raised when input is malformed or violates a business rule.

    Details (field names, limits) are returned to the caller.
    """

    expose_details = True

    def __init__(self, error_code: str = "VAL_001", details: dict[str, Any] | None = None):
        super().__init__(error_code, details, http_status=400)


class CapacityExceededError(ValidationError):
    """Raised when a contribution would push a goal past its target."""

    def __init__(self, max_amount: int):
        super().__init__("GOAL_002", {"max_amount": max_amount})
        self.max_amount = max_amount


class NotFoundError(FinSmartError):
    """Raised when an entity is absent or not owned by the caller."""

    def __init__(self, error_code: str, details: dict[str, Any] | None = None):
        super().__init__(error_code, details, http_status=404)


class ConflictError(FinSmartError):
    """Raised when a unique resource already exists."""

    def __init__(self, error_code: str, details: dict[str, Any] | None = None):
        super().__init__(error_code, details, http_status=409)


class InternalError(FinSmartError):
    """Raised on persistence or otherwise unexpected failures."""

    def __init__(self, error_code: str = "SYS_001", details: dict[str, Any] | None = None):
        super().__init__(error_code, details, http_status=500)
