"""
core/dice/tables.py — Static lookup tables for the dice engine.

These tables are the musical content of the product: key groups addressed by
the colour die, exotic qualities addressed by the number die, fixed genre
progressions, and the quality pools used by the random and tapping samplers.

Exports:
    NOTE_NAMES          12-element chromatic alphabet (sharp spelling)
    FLAT_TO_SHARP       flat/unicode spellings → canonical sharp spelling
    COLOR_GROUPS        eight KeyGroups, index = colour die face - 1
    EXOTIC_NUMBERS      number die face → ChordQuality (faces 1–5)
    QUALITY_SUFFIXES    ChordQuality → chord-name suffix
    GENRE_PROGRESSIONS  genre → {"major": steps, "minor": steps}
    GENRES              all selectable genre ids, "any" first
    PREMIUM_GENRES      genres reserved for subscribers
    PREMIUM_MODES       roll modes reserved for subscribers
    RANDOM_QUALITIES    suffix pool for generate_random_chords()
    TAPPING_QUALITIES   wide-interval suffix pool for generate_tapping_chords()
    TAPPING_INTERVALS   root offsets of the tapping progression
"""

from __future__ import annotations

from core.dice.types import ChordQuality, KeyGroup

DIE_FACES: int = 8

# ---------------------------------------------------------------------------
# Chromatic alphabet
# ---------------------------------------------------------------------------

NOTE_NAMES: tuple[str, ...] = (
    "C",
    "C#",
    "D",
    "D#",
    "E",
    "F",
    "F#",
    "G",
    "G#",
    "A",
    "A#",
    "B",
)

# Input normalisation: flat → sharp (unicode and ASCII spellings)
FLAT_TO_SHARP: dict[str, str] = {
    "A♭": "G#",
    "Ab": "G#",
    "B♭": "A#",
    "Bb": "A#",
    "D♭": "C#",
    "Db": "C#",
    "E♭": "D#",
    "Eb": "D#",
    "G♭": "F#",
    "Gb": "F#",
}

# ---------------------------------------------------------------------------
# Colour die
# ---------------------------------------------------------------------------

COLOR_GROUPS: tuple[KeyGroup, ...] = (
    KeyGroup(name="Red", keys=("A♭", "A"), visual_tag="key-ab-a"),
    KeyGroup(name="Orange", keys=("B♭", "B"), visual_tag="key-bb-b"),
    KeyGroup(name="Yellow", keys=("C", "D♭"), visual_tag="key-c-db"),
    KeyGroup(name="Green", keys=("D", "E♭"), visual_tag="key-d-eb"),
    KeyGroup(name="Blue", keys=("E", "F"), visual_tag="key-e-f"),
    KeyGroup(name="Purple", keys=("F♯", "G"), visual_tag="key-fs-g"),
    KeyGroup(name="Dark Red", keys=("A♭m", "Am"), visual_tag="key-abm-am"),
    KeyGroup(name="Dark Orange", keys=("B♭m", "Bm"), visual_tag="key-bbm-bm"),
)

# ---------------------------------------------------------------------------
# Number die
# ---------------------------------------------------------------------------

# Faces 6–8 are not listed: they roll a plain major chord.
EXOTIC_NUMBERS: dict[int, ChordQuality] = {
    1: ChordQuality.DIMINISHED,
    2: ChordQuality.AUGMENTED,
    3: ChordQuality.SUSPENDED,
    4: ChordQuality.MAJOR_SEVENTH,
    5: ChordQuality.NINTH,
}

QUALITY_SUFFIXES: dict[ChordQuality, str] = {
    ChordQuality.MAJOR: "",
    ChordQuality.MINOR: "m",
    ChordQuality.SIXTH: "6",
    ChordQuality.SEVENTH: "7",
    ChordQuality.NINTH: "9",
    ChordQuality.MINOR_SIXTH: "m6",
    ChordQuality.MINOR_SEVENTH: "m7",
    ChordQuality.MAJOR_SEVENTH: "M7",
    ChordQuality.DIMINISHED: "°",
    ChordQuality.AUGMENTED: "+",
    ChordQuality.SUSPENDED: "sus",
}

# ---------------------------------------------------------------------------
# Genre progressions: (semitone offset from root, chord suffix) × 4
# ---------------------------------------------------------------------------

Step = tuple[int, str]

GENRE_PROGRESSIONS: dict[str, dict[str, tuple[Step, ...]]] = {
    "jazz": {
        "major": ((2, "m7"), (7, "7"), (0, "M7"), (9, "m7")),  # ii7-V7-IM7-vi7
        "minor": ((2, "m7b5"), (7, "7"), (0, "m"), (8, "7")),  # ii°-V7-i-♭VI7
    },
    "blues": {
        "major": ((0, "7"), (5, "7"), (0, "7"), (7, "7")),  # I7-IV7-I7-V7
        "minor": ((0, "7"), (5, "7"), (0, "7"), (7, "7")),
    },
    "rock": {
        "major": ((0, ""), (7, ""), (9, "m"), (5, "")),  # I-V-vi-IV
        "minor": ((0, "m"), (10, ""), (8, ""), (10, "")),  # i-♭VII-♭VI-♭VII
    },
    "pop": {
        "major": ((9, "m"), (5, ""), (0, ""), (7, "")),  # vi-IV-I-V
        "minor": ((0, "m"), (8, ""), (3, ""), (10, "")),  # i-♭VI-♭III-♭VII
    },
    "folk": {
        "major": ((0, ""), (9, "m"), (5, ""), (7, "")),  # I-vi-IV-V
        "minor": ((0, "m"), (10, ""), (8, ""), (10, "")),  # i-♭VII-♭VI-♭VII
    },
    "metal": {
        "major": ((0, "5"), (10, "5"), (8, "5"), (10, "5")),  # I5-♭VII5-♭VI5-♭VII5
        "minor": ((0, "5"), (8, "5"), (10, "5"), (0, "5")),  # i5-♭VI5-♭VII5-i5
    },
    "extreme-metal": {
        "major": ((0, "5"), (1, "5"), (6, "°"), (0, "m")),  # I5-♭ii5-tritone°-i
        "minor": ((0, "m"), (1, "5"), (3, "°"), (5, "m")),  # i-♭ii5-♭iii°-iv
    },
}

GENRES: tuple[str, ...] = ("any", *GENRE_PROGRESSIONS)

PREMIUM_GENRES: frozenset[str] = frozenset({"metal", "extreme-metal"})
PREMIUM_MODES: frozenset[str] = frozenset({"random", "tapping"})

# ---------------------------------------------------------------------------
# Pure random samplers
# ---------------------------------------------------------------------------

RANDOM_QUALITIES: tuple[str, ...] = (
    "", "m", "7", "M7", "m7", "6", "m6", "9", "m9", "add9", "sus2", "sus4",
    "°", "+", "dim7", "m7b5", "11", "13", "maj9", "maj11", "maj13",
    "7sus4", "7sus2", "add11", "add13", "6/9", "m6/9", "alt", "7#5", "7b5",
    "m(maj7)", "mMaj9", "7#9", "7b9", "7#11", "maj7#11",
)  # fmt: skip

# Extended voicings with wide intervals — comfortable under two tapping hands
TAPPING_QUALITIES: tuple[str, ...] = (
    "add9", "add11", "maj9", "maj11", "maj13",
    "m9", "m11", "m(maj7)", "mMaj9",
    "9", "11", "13", "7#11", "7b9", "7#9",
    "sus2", "sus4", "7sus4", "7sus2",
    "maj7#11", "6/9", "m6/9", "add13",
)  # fmt: skip

TAPPING_INTERVALS: tuple[int, ...] = (0, 5, 2, 7)
