"""Extraction and confirmation prompts for the send agent."""
from __future__ import annotations

SEND_EXTRACTION_TEMPLATE = """Extract the values of a token transfer request from the recent messages. Use null for any value that cannot be determined.

{recent_messages}

Given the recent messages, extract the following information about the requested token transfer:
- token: the token symbol to send (remove any "token" suffix)
- amount: the amount to send (must be a positive number)
- address: the recipient wallet address (42 characters starting with 0x)
- include_fee: true if the user also asks for some BERA to cover gas or fees

Common patterns:
- "send 100 HONEY to 0x1234..." -> {{"token": "HONEY", "amount": "100", "address": "0x1234...", "include_fee": null}}
- "give my friend some yeet" -> {{"token": "YEET", "amount": null, "address": null, "include_fee": null}}
- "could you send some honey and bera as fee? 0x1234..." -> {{"token": "HONEY", "amount": null, "address": "0x1234...", "include_fee": true}}

Notes:
- If the user corrects an earlier value, return the corrected value
- Remove words like "token(s)", "coin(s)" from token names
- Convert token symbols to uppercase
- Copy addresses exactly as written
- Ignore emojis and extra punctuation"""

SEND_CONFIRMATION_TEMPLATE = """Given the recent messages, determine if the user is confirming or denying a token transfer request.

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
