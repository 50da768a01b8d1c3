"""
Typed error conditions raised by the ledger services.
"""


class LedgerError(Exception):
    """Base class for all ledger errors."""
    status_code = 400

    def __init__(self, message: str, details=None):
        super().__init__(message)
        self.message = message
        self.details = details


class LedgerValidationError(LedgerError):
    """Malformed input: non-positive amounts, missing selections, bad ranges."""
    status_code = 422


class NotFoundError(LedgerError):
    """A referenced party, product, transaction or payment does not exist."""
    status_code = 404


class StoreUnavailableError(LedgerError):
    """The database failed to serve a read or write."""
    status_code = 503
