"""
ERC20 Token Implementation.

In-memory fungible token ledger used as the custodied balance of the vesting
contract. Covers the subset of EIP-20 the contracts in this package rely on:
- Balance queries and transfers
- Owner-only minting, holder burning
- Pause switch (transfers revert while paused)
- Transfer events

Security features:
- Overflow protection (256-bit arithmetic)
- Zero address checks
- Balance underflow prevention
"""

from __future__ import annotations

import hashlib
import logging
import time
from dataclasses import dataclass, field

from ..constants import LOG_ADDRESS_PREFIX_LENGTH, ZERO_ADDRESS
from ..contract_exceptions import TokenError

logger = logging.getLogger(__name__)

_P = LOG_ADDRESS_PREFIX_LENGTH


@dataclass
class TokenEvent:
    """Represents an ERC20 Transfer event."""

    event_type: str
    from_address: str
    to_address: str
    value: int
    timestamp: float = field(default_factory=time.time)


@dataclass
class ERC20Token:
    """
    ERC20 token with minting, burning and pausing.

    Balances are stored in-memory keyed by lowercase address. Every failure
    raises TokenError and leaves balances untouched, like a reverted call.
    """

    # Token metadata
    name: str
    symbol: str
    decimals: int = 18
    total_supply: int = 0

    # Contract address
    address: str = ""

    # Owner (for minting and pausing)
    owner: str = ""

    # State
    balances: dict[str, int] = field(default_factory=dict)
    events: list[TokenEvent] = field(default_factory=list)

    # Supply cap (0 = unlimited)
    max_supply: int = 0

    paused: bool = False

    UINT256_MAX: int = 2**256 - 1

    def __post_init__(self) -> None:
        if not self.address:
            addr_input = f"{self.name}{self.symbol}{time.time()}".encode()
            addr_hash = hashlib.sha3_256(addr_input).digest()
            self.address = f"0x{addr_hash[-20:].hex()}"
        self.owner = self._normalize(self.owner)

    @classmethod
    def deploy(
        cls,
        owner: str,
        initial_supply: int = 0,
        name: str = "Example Token",
        symbol: str = "EXT",
        max_supply: int = 0,
    ) -> "ERC20Token":
        """
        Deploy a token and mint the initial supply to the deployer.

        Args:
            owner: Deployer address (becomes owner)
            initial_supply: Amount minted to the owner
            name: Token name
            symbol: Token symbol
            max_supply: Supply cap (0 = unlimited)

        Returns:
            The deployed token
        """
        if not name:
            raise TokenError("ERC20: name cannot be empty")
        if not symbol:
            raise TokenError("ERC20: symbol cannot be empty")
        if max_supply > 0 and initial_supply > max_supply:
            raise TokenError("ERC20: initial supply exceeds max")

        token = cls(name=name, symbol=symbol, owner=owner, max_supply=max_supply)
        if initial_supply > 0:
            token.mint(owner, owner, initial_supply)

        logger.info(
            "ERC20 token deployed",
            extra={
                "event": "erc20.deployed",
                "address": token.address,
                "symbol": symbol,
                "initial_supply": initial_supply,
                "owner": token.owner[:_P],
            }
        )
        return token

    # ==================== View Functions ====================

    def balance_of(self, account: str) -> int:
        """
        Get the token balance of an account.

        Args:
            account: Address to check

        Returns:
            Token balance
        """
        return self.balances.get(self._normalize(account), 0)

    # ==================== State-Changing Functions ====================

    def transfer(self, sender: str, recipient: str, amount: int) -> bool:
        """
        Transfer tokens from sender to recipient.

        Args:
            sender: Address sending tokens (msg.sender)
            recipient: Address receiving tokens
            amount: Amount to transfer

        Returns:
            True if successful

        Raises:
            TokenError: If transfer fails
        """
        self._require_not_paused()
        sender_norm = self._normalize(sender)
        recipient_norm = self._normalize(recipient)

        self._validate_address(recipient_norm, "recipient")
        self._validate_amount(amount)

        sender_balance = self.balances.get(sender_norm, 0)
        if sender_balance < amount:
            raise TokenError(
                f"ERC20: transfer amount exceeds balance "
                f"({amount} > {sender_balance})",
                details={"sender": sender_norm, "amount": amount, "balance": sender_balance},
            )

        self.balances[sender_norm] = sender_balance - amount
        self.balances[recipient_norm] = self.balances.get(recipient_norm, 0) + amount

        self._emit_transfer(sender_norm, recipient_norm, amount)

        logger.debug(
            "ERC20 transfer",
            extra={
                "event": "erc20.transfer",
                "token": self.symbol,
                "from": sender_norm[:_P],
                "to": recipient_norm[:_P],
                "amount": amount,
            }
        )

        return True

    # ==================== Minting & Burning ====================

    def mint(self, minter: str, to: str, amount: int) -> bool:
        """
        Mint new tokens (owner only).

        Raises:
            TokenError: If caller is not owner or the cap would be exceeded
        """
        self._require_not_paused()
        self._require_owner(minter)

        to_norm = self._normalize(to)
        self._validate_address(to_norm, "recipient")
        self._validate_amount(amount)

        if self.max_supply > 0 and self.total_supply + amount > self.max_supply:
            raise TokenError(
                f"ERC20: mint would exceed max supply "
                f"({self.total_supply + amount} > {self.max_supply})"
            )

        self.total_supply += amount
        self.balances[to_norm] = self.balances.get(to_norm, 0) + amount

        # Mints are transfers from the zero address
        self._emit_transfer(ZERO_ADDRESS, to_norm, amount)

        logger.info(
            "ERC20 mint",
            extra={
                "event": "erc20.mint",
                "token": self.symbol,
                "to": to_norm[:_P],
                "amount": amount,
                "new_supply": self.total_supply,
            }
        )

        return True

    def burn(self, holder: str, amount: int) -> bool:
        """
        Burn tokens from holder's balance.

        Raises:
            TokenError: If the holder's balance is too small
        """
        self._require_not_paused()
        holder_norm = self._normalize(holder)
        self._validate_amount(amount)

        balance = self.balances.get(holder_norm, 0)
        if balance < amount:
            raise TokenError(
                f"ERC20: burn amount exceeds balance ({amount} > {balance})"
            )

        self.balances[holder_norm] = balance - amount
        self.total_supply -= amount

        self._emit_transfer(holder_norm, ZERO_ADDRESS, amount)

        logger.info(
            "ERC20 burn",
            extra={
                "event": "erc20.burn",
                "token": self.symbol,
                "from": holder_norm[:_P],
                "amount": amount,
                "new_supply": self.total_supply,
            }
        )

        return True

    # ==================== Admin Functions ====================

    def pause(self, caller: str) -> bool:
        """Pause all transfers (owner only)."""
        self._require_owner(caller)
        self.paused = True
        logger.warning(
            "ERC20 paused",
            extra={"event": "erc20.paused", "token": self.symbol},
        )
        return True

    def unpause(self, caller: str) -> bool:
        """Resume transfers (owner only)."""
        self._require_owner(caller)
        self.paused = False
        return True

    # ==================== Helpers ====================

    def _normalize(self, address: str) -> str:
        return address.lower()

    def _validate_address(self, address: str, field: str) -> None:
        if address == ZERO_ADDRESS or not address:
            raise TokenError(f"ERC20: {field} is zero address")

    def _validate_amount(self, amount: int) -> None:
        if amount < 0:
            raise TokenError("ERC20: amount cannot be negative")
        if amount > self.UINT256_MAX:
            raise TokenError("ERC20: amount exceeds uint256")

    def _require_owner(self, caller: str) -> None:
        if self._normalize(caller) != self.owner:
            raise TokenError("ERC20: caller is not owner")

    def _require_not_paused(self) -> None:
        if self.paused:
            raise TokenError("ERC20: token is paused")

    def _emit_transfer(self, from_addr: str, to_addr: str, amount: int) -> None:
        self.events.append(
            TokenEvent(
                event_type="Transfer",
                from_address=from_addr,
                to_address=to_addr,
                value=amount,
            )
        )
