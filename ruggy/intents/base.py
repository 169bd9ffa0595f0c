"""Shared behaviour for slot-filled intents."""
from __future__ import annotations

import re
from typing import Any, ClassVar, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from ruggy.units import format_decimal, to_decimal

_TOKEN_SUFFIX = re.compile(r"TOKENS?$")


def normalize_symbol(value: Any) -> Optional[str]:
    if value is None:
        return None
    symbol = re.sub(r"\s+", "", str(value)).upper().lstrip("$")
    symbol = _TOKEN_SUFFIX.sub("", symbol)
    return symbol or None


def normalize_amount(value: Any) -> Optional[str]:
    amount = to_decimal(value)
    if amount is None or amount <= 0:
        return None
    return format_decimal(amount)


class SlotIntent(BaseModel):
    """An operation whose fields are collected over several chat turns.

    Subclasses declare ``REQUIRED_FIELDS`` in the order they should be asked
    for and a ``FIELD_GUIDANCE`` table with the question and example values
    for each of them.
    """

    model_config = ConfigDict(extra="ignore")

    REQUIRED_FIELDS: ClassVar[Tuple[str, ...]] = ()
    FIELD_GUIDANCE: ClassVar[Dict[str, Tuple[str, List[str]]]] = {}

    @classmethod
    def slot_fields(cls) -> List[str]:
        return [name for name in cls.model_fields if name != "kind"]

    def slot_values(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in self.slot_fields()}

    def missing_fields(self) -> List[str]:
        return [name for name in self.REQUIRED_FIELDS if getattr(self, name) is None]

    def is_complete(self) -> bool:
        return not self.missing_fields()
