"""
Quarterly release calculator.

Vesting is a step function of time: nothing vests until the first quarter
boundary, and each of the four boundaries unlocks one quarter of the total.
The amount is computed as ``total * quarters // TOTAL_QUARTERS`` so the
truncation never compounds and the fourth quarter lands exactly on ``total``.

All functions are pure; the caller supplies ``now``.
"""

from __future__ import annotations

from ..constants import QUARTER, TOTAL_QUARTERS
from ..contract_exceptions import NotStartedError
from .schedule import VestingSchedule


def quarters_elapsed(schedule: VestingSchedule, now: int) -> int:
    """Number of whole quarters since ``schedule.start``, capped at TOTAL_QUARTERS."""
    if now < schedule.start:
        raise NotStartedError(
            "Vesting period has not started yet",
            start=schedule.start,
            now=now,
            details={"receiver": schedule.receiver, "start": schedule.start, "now": now},
        )
    return min((now - schedule.start) // QUARTER, TOTAL_QUARTERS)


def vested_amount(schedule: VestingSchedule, now: int) -> int:
    """
    Tokens vested for ``schedule`` at ``now``, released or not.

    Raises:
        NotStartedError: If ``now`` is before the schedule start
    """
    return schedule.total * quarters_elapsed(schedule, now) // TOTAL_QUARTERS


def releasable_amount(schedule: VestingSchedule, now: int) -> int:
    """Vested tokens not yet paid out."""
    return vested_amount(schedule, now) - schedule.released


def next_release_time(schedule: VestingSchedule, now: int) -> int | None:
    """Timestamp of the next quarter boundary, or None once fully vested."""
    if now < schedule.start:
        return schedule.start + QUARTER
    quarters = quarters_elapsed(schedule, now)
    if quarters >= TOTAL_QUARTERS:
        return None
    return schedule.start + (quarters + 1) * QUARTER
