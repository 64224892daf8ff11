"""
Contract exception hierarchy for tokenvest.

Every contract failure is a typed exception so callers can tell the failure
kinds apart. Contracts raise these the way an EVM contract reverts: the call
fails as a whole and no state is modified.
"""

from __future__ import annotations
from typing import Optional, Any, Dict


class ContractError(Exception):
    """Base exception for all contract errors.

    Attributes:
        message: Human-readable error description
        details: Additional context about the error
        recoverable: Whether the operation can be retried as-is
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable


class ConfigurationError(ContractError):
    """Raised when required configuration is missing or invalid."""
    pass


# ==================== Token Errors ====================


class TokenError(ContractError):
    """Raised when an ERC20 operation is rejected.

    Examples: zero address, negative amount, transfer exceeding balance.
    """
    pass


# ==================== Vesting Errors ====================


class VestingError(ContractError):
    """Base class for vesting contract failures."""
    pass


class InvalidScheduleError(VestingError):
    """Raised when schedule parameters are malformed."""
    pass


class InsufficientCapacityError(VestingError):
    """Raised when a schedule asks for more than the uncommitted balance."""

    def __init__(self, message: str, requested: int = 0, available: int = 0, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.requested = requested
        self.available = available


class DuplicateScheduleError(VestingError):
    """Raised when the receiver already has a schedule."""
    pass


class NoScheduleError(VestingError):
    """Raised when a receiver has no schedule."""
    pass


class NotStartedError(VestingError):
    """Raised when vesting is queried before the schedule start."""

    def __init__(self, message: str, start: int = 0, now: int = 0, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.start = start
        self.now = now


class UnauthorizedError(VestingError):
    """Raised when the caller is not allowed to perform the operation."""
    pass


class FullyReleasedError(VestingError):
    """Raised when every token of a schedule was already released."""
    pass


class TransferFailedError(VestingError):
    """Raised when the token refused a payout.

    The schedule's released amount is left untouched.
    """
    pass


class ContractLockedError(VestingError):
    """Raised on a reentrant call while an external transfer is in flight."""
    pass


# ==================== Ballot Errors ====================


class BallotError(ContractError):
    """Base class for poll contract failures."""
    pass


class InvalidBallotError(BallotError):
    """Raised for an unknown ballot id."""
    pass


class BallotEndedError(BallotError):
    """Raised when voting after the ballot deadline."""
    pass


class InvalidOptionError(BallotError):
    """Raised for an option index outside the ballot's option list."""
    pass


class AlreadyVotedError(BallotError):
    """Raised when a voter votes twice on the same ballot."""
    pass
