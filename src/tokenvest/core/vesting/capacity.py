"""
Capacity ledger: how much of the custodied balance is not yet promised.
"""

from __future__ import annotations

import logging

from ..constants import LOG_ADDRESS_PREFIX_LENGTH
from ..contracts.token_interface import TokenLedger
from .schedule import ScheduleRegistry

logger = logging.getLogger(__name__)


class CapacityLedger:
    """
    Derived view over the token balance of the custodian and the registry.

    Nothing is cached: the custodied balance changes with every deposit and
    every release, so each query reads both sources again.
    """

    def __init__(self, token: TokenLedger, custodian: str, registry: ScheduleRegistry) -> None:
        self._token = token
        self._custodian = custodian
        self._registry = registry

    def custodied_balance(self) -> int:
        return self._token.balance_of(self._custodian)

    def committed_amount(self) -> int:
        """Tokens still owed to live schedules."""
        return sum(schedule.remaining for schedule in self._registry)

    def available_amount(self) -> int:
        """Custodied tokens not committed to any schedule."""
        balance = self.custodied_balance()
        committed = self.committed_amount()
        available = balance - committed
        if available < 0:
            # Only reachable when tokens left the custodian out of band
            logger.warning(
                "Custodied balance below committed amount",
                extra={
                    "event": "vesting.capacity.undercollateralized",
                    "custodian": self._custodian[:LOG_ADDRESS_PREFIX_LENGTH],
                    "balance": balance,
                    "committed": committed,
                }
            )
            return 0
        return available
