"""
Domain-specific errors for the betting bounded context.

All errors raised from the betting domain layer must be defined here.
These are mapped to HTTP responses at the interface layer.
No framework imports allowed.
"""

from typing import Any, Optional


class ValidationError(Exception):
    """Raised when input has the wrong shape or is out of range.

    Validation errors are local: they are never retried.
    """

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        self.message = message
        self.field = field
        super().__init__(self.message)


class DomainError(Exception):
    """Base error for business-rule violations.

    Every subclass carries a stable ``code`` that the interface layer
    translates into an HTTP status.
    """

    code = "DOMAIN_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.message = message
        if code is not None:
            self.code = code
        self.details = details or {}
        super().__init__(self.message)


class _BetTransitionError(DomainError):
    verb = "change"

    def __init__(self, bet_id: str, current_status: str) -> None:
        super().__init__(
            f"Cannot {self.verb} bet {bet_id} in status {current_status}",
            details={"betId": bet_id, "currentStatus": current_status},
        )
        self.bet_id = bet_id
        self.current_status = current_status


class BetCannotSettleError(_BetTransitionError):
    """Raised when settling a bet that is no longer open."""

    code = "BET_CANNOT_SETTLE"
    verb = "settle"


class BetCannotCancelError(_BetTransitionError):
    """Raised when cancelling a bet that is no longer open."""

    code = "BET_CANNOT_CANCEL"
    verb = "cancel"


class BetCannotVoidError(_BetTransitionError):
    """Raised when voiding a bet that is no longer open."""

    code = "BET_CANNOT_VOID"
    verb = "void"


class BetNotFoundError(DomainError):
    """Raised when a bet cannot be found."""

    code = "BET_NOT_FOUND"

    def __init__(self, bet_id: str) -> None:
        super().__init__(f"Bet not found: {bet_id}", details={"betId": bet_id})
        self.bet_id = bet_id


class BetAlreadySettledError(DomainError):
    """Raised when a settlement request targets an already settled bet."""

    code = "BET_ALREADY_SETTLED"

    def __init__(self, bet_id: str, current_status: str) -> None:
        super().__init__(
            f"Bet {bet_id} is already settled ({current_status})",
            details={"betId": bet_id, "currentStatus": current_status},
        )
        self.bet_id = bet_id
        self.current_status = current_status
