"""Domain error kinds raised by the service layer.

Services never raise HTTP errors directly; the API layer maps these
exceptions to responses in ``rentledger.main``.
"""


class RentLedgerError(Exception):
    """Base class for all domain errors."""

    error_type = "domain_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(RentLedgerError):
    """A referenced aggregate or one of its dependents does not exist."""

    error_type = "not_found"


class ValidationError(RentLedgerError):
    """The operation would break a ledger or billing invariant."""

    error_type = "validation_error"


class ConflictError(RentLedgerError):
    """A concurrent write won the race; the caller may retry."""

    error_type = "conflict"
