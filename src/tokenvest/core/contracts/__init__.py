"""
tokenvest contract standards.

- ERC20: Fungible token holding the custodied vesting balance
- TokenLedger: Protocol the vesting contract consumes
"""

from .erc20 import ERC20Token, TokenEvent
from .token_interface import TokenLedger

__all__ = [
    "ERC20Token",
    "TokenEvent",
    "TokenLedger",
]
