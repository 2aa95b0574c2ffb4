"""
core/dice/types.py — Frozen value objects for the dice generation engine.

All types are immutable frozen dataclasses. No I/O, no side effects.

Types:
    ChordQuality  — named chord quality selected by the number die
    KeyGroup      — a colour-die face: 1–2 enharmonically related keys
    RollResult    — the output of a single roll (chord or 4-chord progression)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

GenreId = Literal["any", "jazz", "blues", "rock", "pop", "folk", "metal", "extreme-metal"]
RollMode = Literal["single", "riff", "random", "tapping"]

# ---------------------------------------------------------------------------
# ChordQuality
# ---------------------------------------------------------------------------


class ChordQuality(Enum):
    """Chord qualities the dice can produce, keyed by their display name."""

    MAJOR = "Major"
    MINOR = "Minor"
    SIXTH = "6th"
    SEVENTH = "7th"
    NINTH = "9th"
    MINOR_SIXTH = "Minor 6th"
    MINOR_SEVENTH = "Minor 7th"
    MAJOR_SEVENTH = "Major 7th"
    DIMINISHED = "Diminished"
    AUGMENTED = "Augmented"
    SUSPENDED = "Suspended"


# ---------------------------------------------------------------------------
# KeyGroup
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class KeyGroup:
    """A colour-die face bundling one or two enharmonically related keys.

    Attributes:
        name:       Colour label shown to the player, e.g. "Yellow"
        keys:       Ordered key spellings, e.g. ("C", "D♭") or ("A♭m", "Am").
                    A trailing "m" marks the minor member of the group.
        visual_tag: Opaque UI hint (CSS class in the web client)
    """

    name: str
    keys: tuple[str, ...]
    visual_tag: str

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("KeyGroup.name must not be empty")
        if not (1 <= len(self.keys) <= 2):
            raise ValueError(f"KeyGroup.keys must hold 1 or 2 keys, got {len(self.keys)}")


# ---------------------------------------------------------------------------
# RollResult
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RollResult:
    """Result of one dice roll.

    Single rolls carry ``chord``; riff, random and tapping rolls carry a
    4-chord ``progression``. Transient — persisted only when the player saves it.

    Attributes:
        mode:             "single" | "riff" | "random" | "tapping"
        genre:            Genre id the roll was made with
        root_note:        Resolved root in sharp spelling, e.g. "C#"
        chord:            Chord string for single rolls, e.g. "C#M7"
        progression:      Four chord strings for riff-style rolls
        color_group_name: Colour of the key group the colour die selected
        color_roll:       Colour die face (1–8), None for pure random samplers
        number_roll:      Number die face (1–8), None for pure random samplers
    """

    mode: RollMode
    genre: GenreId
    root_note: str
    chord: str | None = None
    progression: tuple[str, ...] = field(default_factory=tuple)
    color_group_name: str | None = None
    color_roll: int | None = None
    number_roll: int | None = None

    @property
    def chords(self) -> tuple[str, ...]:
        """All chord strings in the result, in play order."""
        if self.chord is not None:
            return (self.chord,)
        return self.progression

    def __post_init__(self) -> None:
        if self.mode == "single" and self.chord is None:
            raise ValueError("single RollResult requires a chord")
        if self.mode != "single" and len(self.progression) != 4:
            raise ValueError(
                f"{self.mode} RollResult requires 4 chords, got {len(self.progression)}"
            )
