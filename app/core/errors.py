"""
Portal exceptions.

Only genuinely exceptional outcomes are raised. Expected outcomes such as a
denied freeze or a file that could not be deleted are returned as values
(see EligibilityResult, BulkActionReport and BindingReport).
"""

from typing import Optional


class PortalError(Exception):
    """Base class for errors raised by the service layer."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PortalError):
    """Malformed caller input. Raised before any side effect happens."""


class NotFoundError(PortalError):
    """A referenced student or reference record does not exist."""


class DataAccessFault(PortalError):
    """The store or filesystem failed. Final state is unknown, retry or inspect."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause
