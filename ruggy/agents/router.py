"""
Keyword routing of inbound messages to intent agents.

Compiled patterns pick an agent from the raw text before any model call.
A message without a keyword is left to the caller, which sends it to the
user's open conversation if there is one.
"""

from __future__ import annotations

import re
from typing import Dict, Iterable, Optional

_ROUTES: Dict[str, re.Pattern[str]] = {
    "balance": re.compile(
        r"\b(?:balances?|pouch|portfolio|holdings?|how\s+much\s+(?:do\s+)?(?:you|i)\s+have)\b",
        re.IGNORECASE,
    ),
    "send": re.compile(r"\b(?:send|transfer|give|tip)\b", re.IGNORECASE),
    "swap": re.compile(
        r"\b(?:swap|trade|convert|exchange|ape|grab|buy)\b|\b(?:get|gimme)\s+(?:me\s+)?(?:some|\d)",
        re.IGNORECASE,
    ),
}

# "send it into X" is swap slang, not a transfer.
_SEND_IT_INTO = re.compile(r"\bsend\s+it\s+into\b", re.IGNORECASE)


def route(text: str, available: Iterable[str] | None = None) -> Optional[str]:
    """Return the name of the agent whose keywords appear in ``text``."""
    allowed = set(available) if available is not None else set(_ROUTES)
    if "swap" in allowed and _SEND_IT_INTO.search(text):
        return "swap"
    for name, pattern in _ROUTES.items():
        if name in allowed and pattern.search(text):
            return name
    return None
