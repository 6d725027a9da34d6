from __future__ import annotations

from typing import Optional, Sequence


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""


class ShiftUnresolvedError(DomainError):
    """Raised when a shift window cannot be resolved for a date."""

    def __init__(self, message: str, *, shift_code: str = ""):
        super().__init__(message)
        self.shift_code = shift_code


class ShiftNotFoundError(ShiftUnresolvedError):
    """Raised when the shift code is unknown."""


class PolicyViolationError(DomainError):
    """Raised when an operation is rejected by HR policy (e.g. leave cap)."""

    def __init__(
        self,
        message: str,
        *,
        year: Optional[int] = None,
        quarter: Optional[int] = None,
        cap: Optional[int] = None,
    ):
        super().__init__(message)
        self.year = year
        self.quarter = quarter
        self.cap = cap


class DuplicateLeaveError(PolicyViolationError):
    """Raised when a leave is already recorded for the employee and date."""


class InconsistentLedgerError(DomainError):
    """Raised when leave audit records disagree with attendance or with each other."""

    def __init__(self, message: str, *, duplicates: Sequence[tuple] = (), orphans: Sequence[tuple] = ()):
        super().__init__(message)
        self.duplicates = tuple(duplicates)
        self.orphans = tuple(orphans)


class ConcurrentUpdateError(DomainError):
    """Raised when an optimistic update keeps losing to concurrent writers."""
