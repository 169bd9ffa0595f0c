"""Swap intent: trade one token in the pouch for another."""
from __future__ import annotations

from typing import ClassVar, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

from ruggy.intents.base import SlotIntent, normalize_amount, normalize_symbol


class SwapIntent(SlotIntent):
    kind: Literal["swap"] = "swap"
    from_token: Optional[str] = None
    to_token: Optional[str] = None
    amount: Optional[str] = None

    REQUIRED_FIELDS: ClassVar[Tuple[str, ...]] = ("from_token", "to_token", "amount")
    FIELD_GUIDANCE: ClassVar[Dict[str, Tuple[str, List[str]]]] = {
        "from_token": ("Which token would you like to swap from?", ["BERA", "USDC", "HONEY"]),
        "to_token": ("Which token would you like to receive?", ["HONEY", "BERA", "YEET"]),
        "amount": ("How much would you like to swap?", ["50", "100", "10.5"]),
    }

    @field_validator("from_token", "to_token", mode="before")
    @classmethod
    def _norm_token(cls, value):
        return normalize_symbol(value)

    @field_validator("amount", mode="before")
    @classmethod
    def _norm_amount(cls, value):
        return normalize_amount(value)


class SwapExtraction(BaseModel):
    """Schema handed to the model when reading a swap request."""

    from_token: Optional[str] = Field(
        None, description="Token symbol the user wants to swap from, uppercase, null if unknown."
    )
    to_token: Optional[str] = Field(
        None, description="Token symbol the user wants to receive, uppercase, null if unknown."
    )
    amount: Optional[str] = Field(
        None, description="Positive amount of the source token as a string, null if not given."
    )
