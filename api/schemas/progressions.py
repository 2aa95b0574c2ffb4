"""Pydantic schemas for /progressions endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from api.schemas.roll import GenreEnum, RollModeEnum


class ProgressionResponse(BaseModel):
    """Serialized SavedProgression for API responses."""

    id: str
    mode: RollModeEnum
    chords: list[str]
    genre: str
    color_roll: int | None = None
    number_roll: int | None = None
    is_favorite: bool
    created_at: datetime | None = None


class CreateProgressionRequest(BaseModel):
    mode: RollModeEnum
    chords: list[str] = Field(..., min_length=1, max_length=4)
    genre: GenreEnum = "any"
    color_roll: int | None = Field(default=None, ge=1, le=8)
    number_roll: int | None = Field(default=None, ge=1, le=8)
    is_favorite: bool = False


class UpdateProgressionRequest(BaseModel):
    chords: list[str] | None = Field(default=None, min_length=1, max_length=4)
    genre: GenreEnum | None = None
    is_favorite: bool | None = None


class ProgressionListResponse(BaseModel):
    progressions: list[ProgressionResponse]
    total: int
