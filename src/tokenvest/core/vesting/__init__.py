"""
Quarterly token vesting.

- VestingSchedule / ScheduleRegistry: one schedule per receiver
- CapacityLedger: custodied balance not yet committed
- release_calculator: pure step-function vesting math
- authorization: who may trigger a release
- VestingContract: orchestrates creation and release
"""

from .authorization import can_release, require_release_permission
from .capacity import CapacityLedger
from .contract import VestingContract
from .release_calculator import (
    next_release_time,
    quarters_elapsed,
    releasable_amount,
    vested_amount,
)
from .schedule import ScheduleRegistry, VestingSchedule

__all__ = [
    "VestingContract",
    "VestingSchedule",
    "ScheduleRegistry",
    "CapacityLedger",
    "can_release",
    "require_release_permission",
    "vested_amount",
    "releasable_amount",
    "quarters_elapsed",
    "next_release_time",
]
