"""Error types for smartremit.

Every error carries a stable machine-readable code and the HTTP status the
API layer responds with.
"""

from typing import Optional

INVALID_INPUT = "INVALID_INPUT"
UNAUTHORIZED = "UNAUTHORIZED"
TRANSACTION_FAILED = "TRANSACTION_FAILED"
NETWORK_ERROR = "NETWORK_ERROR"
CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
BALANCE_FETCH_FAILED = "BALANCE_FETCH_FAILED"


class AppError(Exception):
    """Base exception for all application errors."""

    code = NETWORK_ERROR
    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"message": self.message, "code": self.code}


class ValidationError(AppError):
    """Malformed or semantically invalid input, detected before any I/O."""

    code = INVALID_INPUT
    status_code = 400


class UnauthorizedError(AppError):
    """Missing or rejected credentials."""

    code = UNAUTHORIZED
    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class TransactionError(AppError):
    """The build/prepare/sign/submit pipeline failed.

    When ``tx_hash`` is set the transaction may have reached the network;
    callers must treat the outcome as unknown rather than rolled back.
    """

    code = TRANSACTION_FAILED
    status_code = 500

    def __init__(self, message: str, tx_hash: Optional[str] = None):
        self.tx_hash = tx_hash
        super().__init__(message)


class NetworkError(AppError):
    """Transport failure or unparseable response from a remote endpoint."""

    code = NETWORK_ERROR
    status_code = 503


class BalanceFetchError(AppError):
    """The balance aggregation step itself failed."""

    code = BALANCE_FETCH_FAILED
    status_code = 500

    def __init__(self, message: str, failed_accounts: Optional[list[str]] = None):
        self.failed_accounts = failed_accounts or []
        super().__init__(message)


class ConfigurationError(AppError):
    """Startup configuration is missing or unusable."""

    code = CONFIGURATION_ERROR
    status_code = 500
