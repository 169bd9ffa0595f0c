"""Per-field prompts for the slots an intent is still missing."""
from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from ruggy.intents.base import SlotIntent


class FieldGuidance(BaseModel):
    field: str
    description: str
    examples: List[str] = Field(default_factory=list)


class Guidance(BaseModel):
    missing_fields: List[str] = Field(default_factory=list)
    guidance: List[FieldGuidance] = Field(default_factory=list)

    def describe(self) -> str:
        """Render the guidance as ``description (examples: a, b)`` lines."""
        lines = []
        for item in self.guidance:
            line = f"- {item.description}"
            if item.examples:
                line += f" (examples: {', '.join(item.examples)})"
            lines.append(line)
        return "\n".join(lines)


def generate_guidance(intent: SlotIntent) -> Guidance:
    """Build guidance for every null required field, in schema order."""
    missing = intent.missing_fields()
    entries: List[FieldGuidance] = []
    for name in missing:
        description, examples = intent.FIELD_GUIDANCE.get(name, (f"Please provide {name}.", []))
        entries.append(FieldGuidance(field=name, description=description, examples=list(examples)))
    return Guidance(missing_fields=missing, guidance=entries)
