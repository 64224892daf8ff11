"""
Quarterly Vesting Contract.

Holds tokens on behalf of receivers and pays them out in four quarterly
tranches over twelve months:
- One schedule per receiver, created by the owner
- Schedules can only reserve tokens the contract holds and has not already
  promised to another schedule
- Releases pay whatever has vested and not been paid, so calling release
  repeatedly (or late) is always safe

Security features:
- Only the receiver or the owner can trigger a release
- The released amount is committed only after the token confirms the transfer
- Reentrant calls during the external transfer are rejected
- A single lock spans every read-check-write sequence
"""

from __future__ import annotations

import hashlib
import itertools
import logging
import threading
import time
from typing import Any, Callable

from ..constants import LOG_ADDRESS_PREFIX_LENGTH
from ..contract_exceptions import (
    ContractError,
    ContractLockedError,
    DuplicateScheduleError,
    FullyReleasedError,
    InsufficientCapacityError,
    InvalidScheduleError,
    NoScheduleError,
    TransferFailedError,
    UnauthorizedError,
    VestingError,
)
from ..contracts.token_interface import TokenLedger
from .authorization import require_release_permission
from .capacity import CapacityLedger
from .release_calculator import next_release_time, vested_amount
from .schedule import ScheduleRegistry, VestingSchedule

logger = logging.getLogger(__name__)

_P = LOG_ADDRESS_PREFIX_LENGTH


class VestingContract:
    """
    Quarterly vesting engine over a custodied token balance.

    Usage:
        token = ERC20Token.deploy(owner, initial_supply=100_000)
        vesting = VestingContract(token, owner)
        token.transfer(owner, vesting.address, 100)
        vesting.create_vesting_schedule(receiver, start=now, total=100)
        vesting.release(receiver, receiver)
    """

    def __init__(
        self,
        token: TokenLedger,
        owner: str,
        address: str = "",
        time_provider: Callable[[], int] | None = None,
    ) -> None:
        if not owner:
            raise VestingError("Contract owner cannot be empty")
        if not isinstance(token, TokenLedger):
            raise TypeError("token must provide balance_of() and transfer()")

        self.token = token
        self.owner = owner.lower()
        self.address = (address or self._derive_address(owner)).lower()

        self._registry = ScheduleRegistry()
        self._capacity = CapacityLedger(token, self.address, self._registry)
        self._time_provider = time_provider or (lambda: int(time.time()))

        self._lock = threading.RLock()
        # Reentrancy guard, set while the token transfer is in flight
        self._locked = False

        logger.info(
            "VestingContract deployed",
            extra={
                "event": "vesting.deployed",
                "address": self.address,
                "owner": self.owner[:_P],
                "deterministic_clock": time_provider is not None,
            }
        )

    _deploy_nonce = itertools.count()

    @classmethod
    def _derive_address(cls, owner: str) -> str:
        nonce = next(cls._deploy_nonce)
        addr_hash = hashlib.sha3_256(f"vesting:{owner}:{nonce}:{time.time_ns()}".encode()).digest()
        return f"0x{addr_hash[-20:].hex()}"

    def _current_time(self, now: int | None = None) -> int:
        """Resolve an explicit ``now`` override or read the clock."""
        timestamp = self._time_provider() if now is None else now
        if isinstance(timestamp, bool):
            raise ValueError("timestamp must be an integer")
        try:
            return int(timestamp)
        except (TypeError, ValueError) as exc:
            raise ValueError("timestamp must be an integer") from exc

    # ==================== State-Changing Functions ====================

    def create_vesting_schedule(
        self,
        receiver: str,
        start: int,
        total: int,
        caller: str | None = None,
    ) -> VestingSchedule:
        """
        Reserve ``total`` custodied tokens for ``receiver``.

        No tokens move; the reservation is purely an accounting entry that
        lowers the available amount.

        Args:
            receiver: Address entitled to the schedule
            start: Unix timestamp the vesting clock starts at
            total: Amount committed to the schedule
            caller: Address creating the schedule; must be the owner when given

        Returns:
            A copy of the created schedule

        Raises:
            InvalidScheduleError: If parameters are malformed
            UnauthorizedError: If caller is given and is not the owner
            DuplicateScheduleError: If receiver already has a schedule
            InsufficientCapacityError: If total exceeds the available amount
        """
        self._validate_schedule_params(receiver, start, total)

        with self._lock:
            self._require_not_locked()

            if caller is not None and caller.lower() != self.owner:
                raise UnauthorizedError(
                    "Only owner can create vesting schedules",
                    details={"caller": caller.lower()},
                )

            if receiver in self._registry:
                raise DuplicateScheduleError(
                    "This receiver already has a VestingSchedule",
                    details={"receiver": receiver.lower()},
                )

            available = self._capacity.available_amount()
            if total > available:
                raise InsufficientCapacityError(
                    "Not enough available tokens in contract",
                    requested=total,
                    available=available,
                    details={"receiver": receiver.lower(), "requested": total, "available": available},
                )

            schedule = VestingSchedule(receiver=receiver.lower(), start=start, total=total)
            self._registry.insert(schedule)

            logger.info(
                "Vesting schedule created",
                extra={
                    "event": "vesting.created",
                    "receiver": schedule.receiver[:_P],
                    "start": start,
                    "total": total,
                    "available_after": available - total,
                }
            )
            return schedule.copy()

    def release(self, caller: str, receiver: str, now: int | None = None) -> int:
        """
        Pay ``receiver`` every vested token not yet released.

        Calling again before the next quarter boundary is a no-op that
        returns 0.

        Args:
            caller: Address triggering the release (receiver or owner)
            receiver: Schedule to release
            now: Current timestamp; read from the clock when omitted

        Returns:
            Amount transferred by this call

        Raises:
            NoScheduleError: If receiver has no schedule
            UnauthorizedError: If caller is neither receiver nor owner
            NotStartedError: If the schedule has not started
            FullyReleasedError: If everything was released already
            TransferFailedError: If the token refused the payout
            ContractLockedError: On reentrant calls
        """
        with self._lock:
            self._require_not_locked()

            schedule = self._get_schedule(receiver)

            try:
                require_release_permission(caller, schedule, self.owner)
            except UnauthorizedError:
                logger.warning(
                    "Release denied: caller not authorized",
                    extra={
                        "event": "vesting.release_unauthorized",
                        "caller": caller.lower()[:_P],
                        "receiver": schedule.receiver[:_P],
                    }
                )
                raise

            current_time = self._current_time(now)
            vested = vested_amount(schedule, current_time)

            if schedule.is_fully_released:
                raise FullyReleasedError(
                    "All tokens have been released already",
                    details={"receiver": schedule.receiver, "total": schedule.total},
                )

            amount_due = vested - schedule.released
            if amount_due == 0:
                logger.debug(
                    "Nothing to release",
                    extra={
                        "event": "vesting.release_noop",
                        "receiver": schedule.receiver[:_P],
                        "released": schedule.released,
                    }
                )
                return 0

            new_released = schedule.released + amount_due
            self._pay(schedule, amount_due)
            self._registry.update_released(schedule.receiver, new_released)

            logger.info(
                "Vested tokens released",
                extra={
                    "event": "vesting.release",
                    "receiver": schedule.receiver[:_P],
                    "caller": caller.lower()[:_P],
                    "amount": amount_due,
                    "released": new_released,
                    "total": schedule.total,
                }
            )
            return amount_due

    # ==================== View Functions ====================

    def get_available_amount(self) -> int:
        """Custodied tokens not committed to any schedule."""
        with self._lock:
            return self._capacity.available_amount()

    def get_vesting_schedule(self, receiver: str) -> VestingSchedule | None:
        """Return a copy of the receiver's schedule, or None."""
        with self._lock:
            schedule = self._registry.get(receiver)
            return schedule.copy() if schedule is not None else None

    def get_vested_amount(self, receiver: str, now: int | None = None) -> int:
        with self._lock:
            schedule = self._get_schedule(receiver)
            current_time = self._current_time(now)
            return vested_amount(schedule, current_time)

    def get_releasable_amount(self, receiver: str, now: int | None = None) -> int:
        with self._lock:
            schedule = self._get_schedule(receiver)
            current_time = self._current_time(now)
            return vested_amount(schedule, current_time) - schedule.released

    def get_next_release_time(self, receiver: str, now: int | None = None) -> int | None:
        """Next quarter boundary for the receiver, or None once fully vested."""
        with self._lock:
            schedule = self._get_schedule(receiver)
            current_time = self._current_time(now)
            return next_release_time(schedule, current_time)

    def get_contract_stats(self) -> dict[str, Any]:
        with self._lock:
            return {
                "address": self.address,
                "owner": self.owner,
                "total_schedules": len(self._registry),
                "total_committed": self._capacity.committed_amount(),
                "total_released": sum(s.released for s in self._registry),
                "custodied_balance": self._capacity.custodied_balance(),
                "available": self._capacity.available_amount(),
            }

    # ==================== Helpers ====================

    def _get_schedule(self, receiver: str) -> VestingSchedule:
        schedule = self._registry.get(receiver)
        if schedule is None:
            raise NoScheduleError(
                "No VestingSchedule for this receiver",
                details={"receiver": receiver.lower()},
            )
        return schedule

    def _pay(self, schedule: VestingSchedule, amount: int) -> None:
        """Transfer ``amount`` to the receiver; raise TransferFailedError on refusal."""
        self._locked = True
        try:
            try:
                success = self.token.transfer(self.address, schedule.receiver, amount)
            except ContractError as exc:
                logger.warning(
                    "Release transfer reverted",
                    extra={
                        "event": "vesting.transfer_failed",
                        "receiver": schedule.receiver[:_P],
                        "amount": amount,
                        "reason": exc.message,
                    }
                )
                raise TransferFailedError(
                    f"Token transfer failed: {exc.message}",
                    details={"receiver": schedule.receiver, "amount": amount},
                ) from exc
            if not success:
                logger.warning(
                    "Release transfer refused",
                    extra={
                        "event": "vesting.transfer_failed",
                        "receiver": schedule.receiver[:_P],
                        "amount": amount,
                    }
                )
                raise TransferFailedError(
                    "Token transfer failed",
                    details={"receiver": schedule.receiver, "amount": amount},
                )
        finally:
            self._locked = False

    def _require_not_locked(self) -> None:
        if self._locked:
            logger.warning(
                "Reentrant call rejected",
                extra={"event": "vesting.reentrancy_blocked", "contract": self.address[:_P]},
            )
            raise ContractLockedError("Vesting contract is locked")

    @staticmethod
    def _validate_schedule_params(receiver: str, start: int, total: int) -> None:
        if not receiver or not isinstance(receiver, str):
            raise InvalidScheduleError("Receiver address cannot be empty.")
        if not isinstance(start, int) or isinstance(start, bool) or start < 0:
            raise InvalidScheduleError(
                "Start must be a non-negative integer timestamp.",
                details={"start": start},
            )
        if not isinstance(total, int) or isinstance(total, bool) or total < 0:
            raise InvalidScheduleError(
                "Total amount must be a non-negative integer.",
                details={"total": total},
            )
