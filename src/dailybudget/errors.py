"""Typed errors raised by the budget and ledger services.

``status_code`` is a hint for the HTTP layer that wraps this package; nothing
here depends on a web framework.
"""

from __future__ import annotations


class DailyBudgetError(Exception):
    """Base class for every error raised by the core."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(DailyBudgetError, LookupError):
    """A client, category, budget or transaction does not exist."""

    status_code = 404

    def __init__(self, entity: str, identifier: object) -> None:
        super().__init__(f"{entity} not found: {identifier}")
        self.entity = entity
        self.identifier = identifier


class ValidationError(DailyBudgetError, ValueError):
    """Input rejected before touching persistence."""

    status_code = 400


class InvalidRangeError(ValidationError):
    """A numeric value falls outside its allowed range."""


class InvalidAmountError(InvalidRangeError):
    """A money amount is non-numeric or not strictly positive."""


class InvalidDateError(ValidationError):
    """A date could not be parsed or is out of bounds."""


class ConflictError(DailyBudgetError):
    """A concurrent writer kept winning after the bounded retries."""

    status_code = 409


class ForbiddenError(DailyBudgetError):
    """A referenced entity belongs to another client."""

    status_code = 403


__all__ = [
    "ConflictError",
    "DailyBudgetError",
    "ForbiddenError",
    "InvalidAmountError",
    "InvalidDateError",
    "InvalidRangeError",
    "NotFoundError",
    "ValidationError",
]
