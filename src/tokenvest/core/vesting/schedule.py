"""
Vesting schedule record and the per-receiver schedule registry.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Iterator

from ..constants import LOG_ADDRESS_PREFIX_LENGTH
from ..contract_exceptions import (
    DuplicateScheduleError,
    NoScheduleError,
    VestingError,
)

logger = logging.getLogger(__name__)


@dataclass
class VestingSchedule:
    """
    A commitment to release ``total`` tokens to ``receiver`` in four
    quarterly tranches starting at ``start``.

    ``total`` never changes after creation; ``released`` only grows.
    """

    receiver: str
    start: int
    total: int
    released: int = 0

    @property
    def remaining(self) -> int:
        """Tokens still committed to this schedule."""
        return self.total - self.released

    @property
    def is_fully_released(self) -> bool:
        return self.released >= self.total

    def copy(self) -> "VestingSchedule":
        return replace(self)

    def to_dict(self) -> dict[str, Any]:
        return {
            "receiver": self.receiver,
            "start": self.start,
            "total": self.total,
            "released": self.released,
            "remaining": self.remaining,
        }


class ScheduleRegistry:
    """
    Keyed storage of vesting schedules, at most one per receiver.

    Receivers are compared case-insensitively. All mutation goes through
    ``insert`` and ``update_released`` so the uniqueness and monotonicity
    rules stay in one place.
    """

    def __init__(self) -> None:
        self._schedules: dict[str, VestingSchedule] = {}

    @staticmethod
    def _key(receiver: str) -> str:
        return receiver.lower()

    def get(self, receiver: str) -> VestingSchedule | None:
        return self._schedules.get(self._key(receiver))

    def insert(self, schedule: VestingSchedule) -> None:
        key = self._key(schedule.receiver)
        if key in self._schedules:
            raise DuplicateScheduleError(
                "This receiver already has a VestingSchedule",
                details={"receiver": key},
            )
        self._schedules[key] = schedule
        logger.debug(
            "Schedule stored",
            extra={
                "event": "vesting.registry.insert",
                "receiver": key[:LOG_ADDRESS_PREFIX_LENGTH],
                "total": schedule.total,
            }
        )

    def update_released(self, receiver: str, new_released: int) -> None:
        """Set the released amount of an existing schedule."""
        schedule = self.get(receiver)
        if schedule is None:
            raise NoScheduleError(
                "No VestingSchedule for this receiver",
                details={"receiver": self._key(receiver)},
            )
        if new_released < schedule.released or new_released > schedule.total:
            raise VestingError(
                "Released amount must stay between the previous release and the total",
                details={
                    "receiver": schedule.receiver,
                    "released": schedule.released,
                    "new_released": new_released,
                    "total": schedule.total,
                },
            )
        schedule.released = new_released

    def __contains__(self, receiver: object) -> bool:
        return isinstance(receiver, str) and self._key(receiver) in self._schedules

    def __len__(self) -> int:
        return len(self._schedules)

    def __iter__(self) -> Iterator[VestingSchedule]:
        return iter(self._schedules.values())
