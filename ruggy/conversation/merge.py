"""Combine a freshly extracted intent with the cached one."""
from __future__ import annotations

from typing import Optional

from ruggy.intents.base import SlotIntent


def merge(extracted: SlotIntent, cached: Optional[SlotIntent]) -> SlotIntent:
    """Prefer non-null extracted values, falling back to cached ones.

    A ``None`` from the latest extraction never erases a value the user gave
    in an earlier turn. Merging the same extraction twice is a no-op.
    """
    if cached is None:
        return extracted
    if cached.kind != extracted.kind:
        raise ValueError(
            f"Cannot merge a {extracted.kind} extraction into a {cached.kind} intent."
        )
    updates = {
        name: value
        for name, value in extracted.slot_values().items()
        if value is not None
    }
    return cached.model_copy(update=updates)
