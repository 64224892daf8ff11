"""
tokenvest - Token vesting and ballot contracts

Ledger-style contract primitives on top of a fungible-token balance.

Main Components:
- Vesting: Quarterly token release engine with capacity accounting
- Contracts: In-memory ERC20 token used as the custodied balance
- Governance: Simple ballot creation and vote tallying
"""

__version__ = "0.1.0"
__author__ = "tokenvest Development Team"

__all__ = []
