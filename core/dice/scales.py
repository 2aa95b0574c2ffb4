"""
core/dice/scales.py — Soloing scale and octave-chord combinations.

Premium practice generators: pick 2–3 scales to blend during a solo, or 2–4
octave chord shapes to move between on the neck. Pure, seeded sampling.
"""

from __future__ import annotations

import random
from dataclasses import dataclass


@dataclass(frozen=True)
class SoloScale:
    """A named scale with its notes, as shown on the practice card."""

    slug: str
    name: str
    notes: tuple[str, ...]
    description: str


@dataclass(frozen=True)
class OctaveChord:
    """A chord shape played at a given octave and fret position."""

    name: str
    octave: int
    notes: tuple[str, ...]
    fret_position: str


SOLO_SCALES: tuple[SoloScale, ...] = (
    SoloScale(
        "minor_pentatonic",
        "Minor Pentatonic",
        ("A", "C", "D", "E", "G"),
        "Classic blues and rock foundation",
    ),
    SoloScale(
        "major_pentatonic",
        "Major Pentatonic",
        ("C", "D", "E", "G", "A"),
        "Bright, uplifting melodic scale",
    ),
    SoloScale("blues", "Blues Scale", ("A", "C", "D", "D#", "E", "G"), "Minor pentatonic with blue note"),
    SoloScale(
        "dorian",
        "Dorian Mode",
        ("D", "E", "F", "G", "A", "B", "C"),
        "Minor with natural 6th - jazzy feel",
    ),
    SoloScale(
        "mixolydian",
        "Mixolydian Mode",
        ("G", "A", "B", "C", "D", "E", "F"),
        "Major with flat 7th - dominant sound",
    ),
    SoloScale(
        "natural_minor",
        "Natural Minor",
        ("A", "B", "C", "D", "E", "F", "G"),
        "Classic minor scale foundation",
    ),
)

OCTAVE_CHORDS: tuple[OctaveChord, ...] = (
    OctaveChord("Am", 1, ("A3", "C4", "E4"), "5th fret"),
    OctaveChord("Am", 2, ("A4", "C5", "E5"), "12th fret"),
    OctaveChord("C", 1, ("C3", "E3", "G3"), "3rd fret"),
    OctaveChord("C", 2, ("C4", "E4", "G4"), "8th fret"),
    OctaveChord("Em", 1, ("E3", "G3", "B3"), "Open"),
    OctaveChord("Em", 2, ("E4", "G4", "B4"), "7th fret"),
    OctaveChord("G", 1, ("G3", "B3", "D4"), "3rd fret"),
    OctaveChord("G", 2, ("G4", "B4", "D5"), "10th fret"),
)


def generate_scale_combination(seed: int | None = None) -> list[SoloScale]:
    """Pick 2–3 distinct scales to blend in one solo."""
    rng = random.Random(seed)
    return rng.sample(SOLO_SCALES, rng.randint(2, 3))


def generate_octave_combination(seed: int | None = None) -> list[OctaveChord]:
    """Pick 2–4 distinct octave chord shapes."""
    rng = random.Random(seed)
    return rng.sample(OCTAVE_CHORDS, rng.randint(2, 4))
