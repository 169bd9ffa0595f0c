"""Send intent: transfer a token from the pouch to an address."""
from __future__ import annotations

import re
from typing import ClassVar, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

from ruggy.intents.base import SlotIntent, normalize_amount, normalize_symbol

ADDRESS_PATTERN = re.compile(r"^0x[a-fA-F0-9]{40}$")


def is_valid_address(address: Optional[str]) -> bool:
    return bool(address) and ADDRESS_PATTERN.match(address) is not None


class SendIntent(SlotIntent):
    kind: Literal["send"] = "send"
    token: Optional[str] = None
    amount: Optional[str] = None
    address: Optional[str] = None
    include_fee: Optional[bool] = None

    REQUIRED_FIELDS: ClassVar[Tuple[str, ...]] = ("token", "amount", "address")
    FIELD_GUIDANCE: ClassVar[Dict[str, Tuple[str, List[str]]]] = {
        "token": ("Which token would you like me to send?", ["BERA", "HONEY", "YEET"]),
        "amount": ("How much would you like me to send?", ["10", "50", "100"]),
        "address": (
            "What's the recipient's address?",
            ["0x1234...", "0x78cC2A80b3D7B0D8b1409696b1E78C0041910b36"],
        ),
    }

    @field_validator("token", mode="before")
    @classmethod
    def _norm_token(cls, value):
        return normalize_symbol(value)

    @field_validator("amount", mode="before")
    @classmethod
    def _norm_amount(cls, value):
        return normalize_amount(value)

    @field_validator("address", mode="before")
    @classmethod
    def _norm_address(cls, value):
        if value is None:
            return None
        address = str(value).strip()
        return address or None

    @property
    def wants_fee(self) -> bool:
        return bool(self.include_fee)


class SendExtraction(BaseModel):
    """Schema handed to the model when reading a send request."""

    token: Optional[str] = Field(
        None, description="Token symbol to send, uppercase, null if unknown."
    )
    amount: Optional[str] = Field(
        None, description="Positive amount to send as a string, null if not given."
    )
    address: Optional[str] = Field(
        None, description="Recipient address, 42 characters starting with 0x, null if not given."
    )
    include_fee: Optional[bool] = Field(
        None, description="True when the user also asks for gas/fee money, null if not mentioned."
    )
