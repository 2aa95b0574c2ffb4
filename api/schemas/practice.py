"""Pydantic schemas for the premium /generate practice endpoints."""

from __future__ import annotations

from pydantic import BaseModel


class ScaleOut(BaseModel):
    slug: str
    name: str
    notes: list[str]
    description: str


class ScaleCombinationResponse(BaseModel):
    scales: list[ScaleOut]


class OctaveChordOut(BaseModel):
    name: str
    octave: int
    notes: list[str]
    fret_position: str


class OctaveCombinationResponse(BaseModel):
    chords: list[OctaveChordOut]
