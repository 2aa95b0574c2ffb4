"""Pydantic schemas for POST /roll."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

RollModeEnum = Literal["single", "riff", "random", "tapping"]
GenreEnum = Literal["any", "jazz", "blues", "rock", "pop", "folk", "metal", "extreme-metal"]


class RollRequest(BaseModel):
    """Dice roll request. Omitted dice are rolled server-side."""

    mode: RollModeEnum = "single"
    genre: GenreEnum = "any"
    color_roll: int | None = Field(default=None, ge=1, le=8)
    number_roll: int | None = Field(default=None, ge=1, le=8)


class RollResponse(BaseModel):
    mode: RollModeEnum
    genre: GenreEnum
    root_note: str
    chord: str | None = None
    progression: list[str] | None = None
    color_group_name: str | None = None
    color_roll: int | None = None
    number_roll: int | None = None
    remaining_rolls: int | None = Field(
        default=None,
        description="Rolls left after this one; null for unlimited accounts",
    )
