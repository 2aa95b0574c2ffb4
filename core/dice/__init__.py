"""
core/dice/ — Dice-driven chord and riff generation engine.

Exports:
    Types:    ChordQuality, KeyGroup, RollResult, GenreId, RollMode
    Tables:   COLOR_GROUPS, GENRES, PREMIUM_GENRES, PREMIUM_MODES
    Engine:   normalize_note, build_chord, format_chord, genre_progression,
              roll_dice, roll_single_chord, roll_riff,
              generate_random_chords, generate_tapping_chords, sample_progression
    Practice: generate_scale_combination, generate_octave_combination
"""

from core.dice.engine import (
    build_chord,
    format_chord,
    generate_random_chords,
    generate_tapping_chords,
    genre_progression,
    normalize_note,
    roll_dice,
    roll_riff,
    roll_single_chord,
    sample_progression,
)
from core.dice.scales import generate_octave_combination, generate_scale_combination
from core.dice.tables import COLOR_GROUPS, GENRES, PREMIUM_GENRES, PREMIUM_MODES
from core.dice.types import ChordQuality, GenreId, KeyGroup, RollMode, RollResult

__all__ = [
    # Types
    "ChordQuality",
    "GenreId",
    "KeyGroup",
    "RollMode",
    "RollResult",
    # Tables
    "COLOR_GROUPS",
    "GENRES",
    "PREMIUM_GENRES",
    "PREMIUM_MODES",
    # Engine
    "build_chord",
    "format_chord",
    "generate_random_chords",
    "generate_tapping_chords",
    "genre_progression",
    "normalize_note",
    "roll_dice",
    "roll_riff",
    "roll_single_chord",
    "sample_progression",
    # Practice
    "generate_octave_combination",
    "generate_scale_combination",
]
