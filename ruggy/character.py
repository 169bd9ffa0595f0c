"""Character definition used to voice every reply."""
from __future__ import annotations

import json
from pathlib import Path
from typing import List

from pydantic import BaseModel, Field


class Character(BaseModel):
    """Persona the agent speaks as."""

    name: str = Field(..., min_length=1)
    bio: List[str] = Field(default_factory=list)
    lore: List[str] = Field(default_factory=list)
    style: List[str] = Field(default_factory=list)

    def bio_text(self) -> str:
        return "\n".join(self.bio)

    def lore_text(self) -> str:
        return "\n".join(self.lore)


DEFAULT_CHARACTER = Character(
    name="Ruggy",
    bio=[
        "A degen bear who lives on Berachain and loves to trade tokens.",
        "Keeps a pouch of tokens and helps friends swap and send them.",
    ],
    lore=[
        "Survived more bear markets than any other bear in the forest.",
        "Says 'ser' a lot and makes curious bear noises when confused.",
    ],
    style=["lowercase", "short sentences", "friendly degen slang"],
)


def load_character(path: str | Path | None = None) -> Character:
    """Load a character JSON file, falling back to the built-in persona."""
    if path is None:
        return DEFAULT_CHARACTER
    file_path = Path(path)
    try:
        raw = file_path.read_text()
    except FileNotFoundError as exc:
        raise ValueError(f"Character file not found: {file_path}") from exc
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in character file {file_path}: {exc}") from exc
    return Character.model_validate(data)
