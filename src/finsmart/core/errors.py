"""Error codes and user-friendly messages.

Each error has:
- code: Unique identifier
- message: Technical description (for logs)
- user_message: User-friendly explanation
- suggestion: Actionable guidance for the user
- retry_allowed: Whether the error is retryable
"""

ERROR_CATALOG: dict[str, dict] = {
    "VAL_001": {
        "code": "VAL_001",
        "message": "Request data failed validation",
        "user_message": "Invalid input data",
        "suggestion": "Please check your input and try again",
        "retry_allowed": True,
    },
    "AUTH_001": {
        "code": "AUTH_001",
        "message": "Email already registered",
        "user_message": "This email address is already registered.",
        "suggestion": "Log in instead, or register with a different email.",
        "retry_allowed": False,
    },
    "TXN_001": {
        "code": "TXN_001",
        "message": "Transaction not found",
        "user_message": "We couldn't find this transaction.",
        "suggestion": "Please refresh and try again.",
        "retry_allowed": False,
    },
    "GOAL_001": {
        "code": "GOAL_001",
        "message": "Goal not found",
        "user_message": "We couldn't find this goal.",
        "suggestion": "Check that the goal exists and is still active.",
        "retry_allowed": False,
    },
    "GOAL_002": {
        "code": "GOAL_002",
        "message": "Contribution exceeds the goal target",
        "user_message": "This amount would exceed the goal's target.",
        "suggestion": "Contribute at most the remaining amount shown in max_amount.",
        "retry_allowed": True,
    },
    "GOAL_003": {
        "code": "GOAL_003",
        "message": "Active goal limit reached",
        "user_message": "You have reached the maximum number of active goals.",
        "suggestion": "Complete, pause or cancel an existing goal first.",
        "retry_allowed": False,
    },
    "DB_001": {
        "code": "DB_001",
        "message": "Database operation failed",
        "user_message": "A database error occurred",
        "suggestion": "Please try again later",
        "retry_allowed": True,
    },
    "DB_002": {
        "code": "DB_002",
        "message": "Resource already exists",
        "user_message": "This record already exists",
        "suggestion": "Please check if the record was already created",
        "retry_allowed": False,
    },
    "SYS_001": {
        "code": "SYS_001",
        "message": "Internal server error",
        "user_message": "An unexpected error occurred",
        "suggestion": "Please try again later or contact support",
        "retry_allowed": True,
    },
}


def get_error(error_code: str) -> dict:
    """Get error definition by code.

    Unknown codes resolve to a generic definition instead of raising.
    """
    if error_code not in ERROR_CATALOG:
        return {
            "code": "UNKNOWN",
            "message": f"Unknown error code: {error_code}",
            "user_message": "An unexpected error occurred.",
            "suggestion": "Please try again. Contact support if the problem persists.",
            "retry_allowed": True,
        }
    return ERROR_CATALOG[error_code]


def is_retryable(error_code: str) -> bool:
    return get_error(error_code)["retry_allowed"]
