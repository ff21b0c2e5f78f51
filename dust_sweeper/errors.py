"""Exception types raised by the sweeper and its collaborators."""
from __future__ import annotations


class SweeperError(Exception):
    """Base class for all sweeper errors."""


class DiscoveryError(SweeperError):
    """Raised when the token-account query for the wallet fails."""


class QuoteError(SweeperError):
    """Raised when the quoting service returns no usable route."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class SwapBuildError(SweeperError):
    """Raised when the swap service does not return a transaction."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class SigningError(SweeperError):
    """Raised when the wallet cannot sign a transaction."""


class TransactionDecodeError(SweeperError, ValueError):
    """Raised for truncated or malformed transaction bytes."""


class TransactionRejectedError(SweeperError):
    """The chain settled the transaction with an error."""

    def __init__(self, signature: str, reason: object):
        super().__init__(f"Transaction {signature} rejected: {reason}")
        self.signature = signature
        self.reason = reason


class ConfirmationTimeoutError(SweeperError):
    """No confirmation was observed before the deadline."""

    def __init__(self, signature: str, timeout: float):
        super().__init__(
            f"Transaction {signature} not confirmed within {timeout:g}s"
        )
        self.signature = signature
        self.timeout = timeout
