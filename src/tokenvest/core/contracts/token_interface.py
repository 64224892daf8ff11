"""
Token capability consumed by the vesting contract.

The vesting contract only ever reads a balance and requests transfers, so it
depends on this Protocol rather than on a concrete token. ERC20Token satisfies
it; tests can pass any object with the same two methods.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class TokenLedger(Protocol):
    """Fungible token balance storage with transfers."""

    def balance_of(self, account: str) -> int:
        """Return the balance held by ``account``. Never fails."""
        ...

    def transfer(self, sender: str, recipient: str, amount: int) -> bool:
        """
        Move ``amount`` from ``sender`` to ``recipient``.

        Returns True on success. Implementations may either return False or
        raise to signal failure.
        """
        ...
