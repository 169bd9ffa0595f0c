"""Errors raised by the slot-filling protocol and the intent executors."""
from __future__ import annotations

from enum import Enum
from typing import List, Optional


class SlotFillingError(Exception):
    """Base class for conversation protocol errors."""


class ExtractionError(SlotFillingError):
    """The structured-generation call failed or returned unusable data."""


class ConfirmationAmbiguousError(SlotFillingError):
    """A confirmation reply could not be classified."""


class InvalidTransitionError(SlotFillingError):
    """A conversation state was asked to move along an illegal edge."""

    def __init__(self, current: str, target: str) -> None:
        self.current = current
        self.target = target
        super().__init__(f"Cannot move conversation from {current} to {target}.")


class InvalidTokenError(SlotFillingError):
    """The requested token is not held in, or listed for, the wallet."""

    def __init__(self, token: str, available: List[str]) -> None:
        self.token = token
        self.available = list(available)
        super().__init__(f"Invalid token {token}. Valid tokens: {', '.join(self.available)}")


class InvalidAddressError(SlotFillingError):
    """The recipient address is not a 0x-prefixed 20-byte hex string."""

    EXPECTED_FORMAT = "0x followed by 40 hex characters"

    def __init__(self, address: str) -> None:
        self.address = address
        super().__init__(f"Invalid address {address}. Expected {self.EXPECTED_FORMAT}.")


class InvalidAmountError(SlotFillingError):
    """The amount rounds down to zero base units of the token."""

    def __init__(self, token: str, amount: str, decimals: int) -> None:
        self.token = token
        self.amount = amount
        self.decimals = decimals
        super().__init__(
            f"Invalid amount {amount} {token}. {token} supports at most {decimals} decimal places."
        )


class InsufficientBalanceError(SlotFillingError):
    """The wallet snapshot holds less than the requested amount."""

    def __init__(self, token: str, available: str, required: str) -> None:
        self.token = token
        self.available = available
        self.required = required
        super().__init__(
            f"Insufficient {token} balance. Have {available}, need {required}"
        )


class ExternalCallCategory(str, Enum):
    """User-facing buckets for failed swaps and transfers."""

    INSUFFICIENT_LIQUIDITY = "insufficient_liquidity"
    HIGH_SLIPPAGE = "high_slippage"
    TIMEOUT = "timeout"
    FAILED = "failed"


class ExternalCallError(SlotFillingError):
    """An aggregator or chain call failed after all local checks passed."""

    def __init__(
        self,
        category: ExternalCallCategory,
        message: str,
        *,
        tx_hash: Optional[str] = None,
    ) -> None:
        self.category = category
        self.tx_hash = tx_hash
        super().__init__(message)

    @classmethod
    def from_exception(cls, exc: Exception) -> "ExternalCallError":
        if isinstance(exc, ExternalCallError):
            return exc
        message = str(exc) or exc.__class__.__name__
        lowered = message.lower()
        if isinstance(exc, TimeoutError) or "timed out" in lowered:
            category = ExternalCallCategory.TIMEOUT
        elif "insufficient" in lowered:
            category = ExternalCallCategory.INSUFFICIENT_LIQUIDITY
        elif "slippage" in lowered:
            category = ExternalCallCategory.HIGH_SLIPPAGE
        else:
            category = ExternalCallCategory.FAILED
        return cls(category, message, tx_hash=getattr(exc, "tx_hash", None))


class WalletUnavailableError(SlotFillingError):
    """No wallet collaborator is configured for this runtime."""

    def __init__(self) -> None:
        super().__init__("Wallet not initialized or accessible")
