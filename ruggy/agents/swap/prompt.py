"""Extraction and confirmation prompts for the swap agent."""
from __future__ import annotations

SWAP_EXTRACTION_TEMPLATE = """Extract the values of a token swap request from the recent messages. Use null for any value that cannot be determined.

{recent_messages}

Given the recent messages, extract the following information about a token swap request:
- from_token: the token they want to swap from (remove any "token" suffix)
- to_token: the token they want to swap to (remove any "token" suffix)
- amount: the amount to swap (must be a positive number)

Look for phrases like:
- "grab/get/ape into X"
- "swap/trade/convert X for/to Y"
- "let me get some X"
- "can you get me X"
- "need/want some X"
- "send it into X"
- "do X more" or "X more" (use the exact number specified)

Common patterns:
- "swap 10 BERA for HONEY" -> {{"from_token": "BERA", "to_token": "HONEY", "amount": "10"}}
- "ape into HONEY" -> {{"from_token": "USDC", "to_token": "HONEY", "amount": null}}
- "get me 5 HONEY ser" -> {{"from_token": "USDC", "to_token": "HONEY", "amount": "5"}}
- "let's do 25 more" -> {{"from_token": null, "to_token": null, "amount": "25"}}

Notes:
- When the user only names the token they want, the source token is USDC
- For "X more" requests, use the exact amount specified, not the previous amount
- If the user corrects an earlier value ("actually 25, not 50"), return the corrected value
- Remove words like "token(s)", "coin(s)" from token names
- Handle common variations like "ser", "pls", "please"
- Convert token symbols to uppercase
- Ignore emojis and extra punctuation

If the amount is missing, return null for it."""

SWAP_CONFIRMATION_TEMPLATE = """Given the recent messages, determine if the user is confirming or denying a swap request.

Look for confirmation phrases like:
- "yes", "yeah", "sure", "confirm"
- "do it", "send it", "lets go", "lfg"
- "ok", "okay", "alright", "fine"

Look for denial phrases like:
- "no", "nah", "cancel", "stop"
- "wait", "hold on", "nevermind"
- "don't", "dont", "not now"

Answer with type "confirm" or "deny". When unsure, answer "deny".

{recent_messages}"""
