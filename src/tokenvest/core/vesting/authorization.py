"""
Release authorization: only the receiver or the contract owner may trigger a
release.
"""

from __future__ import annotations

from ..contract_exceptions import UnauthorizedError
from .schedule import VestingSchedule


def can_release(caller: str, schedule: VestingSchedule, contract_owner: str) -> bool:
    caller_norm = caller.lower()
    return caller_norm == schedule.receiver.lower() or caller_norm == contract_owner.lower()


def require_release_permission(caller: str, schedule: VestingSchedule, contract_owner: str) -> None:
    """Raise UnauthorizedError unless ``caller`` may release ``schedule``."""
    if not can_release(caller, schedule, contract_owner):
        raise UnauthorizedError(
            "Only receiver and owner can release vested tokens",
            details={"caller": caller.lower(), "receiver": schedule.receiver},
        )
