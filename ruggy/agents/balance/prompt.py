"""Extraction prompt for balance questions."""
from __future__ import annotations

BALANCE_TEMPLATE = """Determine whether the user is asking about one specific token balance.

{recent_messages}

If the last message mentions a specific token (like BERA, HONEY, etc.), extract it as "token".
If they are asking about all balances or their general portfolio, return null.

Common patterns for a specific token:
- "how much BERA do you have"
- "check HONEY balance"
- "what's your USDC balance"

Common patterns for a general balance check:
- "what's in your pouch"
- "show me your balance"
- "how's your portfolio"
"""
