"""
core/dice/engine.py — Dice → chord / riff generation.

Two 8-sided dice drive every roll:
    - the colour die picks a KeyGroup (a major/minor pair of related keys)
    - the number die picks an "exotic" chord quality (faces 1–5) or plain major

Within a KeyGroup one key is chosen uniformly at random. That choice is the
only randomness in the dice path: for fixed dice, genre and chosen key, the
resulting chord or progression is fully determined.

Riff asymmetry:
    For genre "any", chord 1 of a riff comes from the caller's dice while chords
    2–4 come from freshly rolled dice pairs. Every other genre returns its fixed
    4-chord progression and ignores the number die.

All public functions accept ``seed`` for reproducibility (None = non-deterministic).
Out-of-range dice or unknown genres raise ValueError: callers are expected to
validate input before reaching the engine.
"""

from __future__ import annotations

import random

from core.dice.tables import (
    COLOR_GROUPS,
    DIE_FACES,
    EXOTIC_NUMBERS,
    FLAT_TO_SHARP,
    GENRE_PROGRESSIONS,
    GENRES,
    NOTE_NAMES,
    QUALITY_SUFFIXES,
    RANDOM_QUALITIES,
    TAPPING_INTERVALS,
    TAPPING_QUALITIES,
)
from core.dice.types import ChordQuality, GenreId, KeyGroup, RollResult

_RIFF_LENGTH = 4

# ---------------------------------------------------------------------------
# Note arithmetic
# ---------------------------------------------------------------------------


def normalize_note(note: str) -> str:
    """Map flat spellings to the sharp alphabet; pass everything else through.

    Handles unicode (``A♭``, ``F♯``) and ASCII (``Ab``) spellings.

    Examples:
        >>> normalize_note("D♭")
        'C#'
        >>> normalize_note("C#")
        'C#'
    """
    if note in FLAT_TO_SHARP:
        return FLAT_TO_SHARP[note]
    return note.replace("♯", "#")


def build_chord(root_index: int, semitone_offset: int, suffix: str = "") -> str:
    """Build a chord name ``semitone_offset`` semitones above ``root_index``.

    The result index is always normalised into [0, 12), negative offsets included.
    """
    index = ((root_index + semitone_offset) % 12 + 12) % 12
    return NOTE_NAMES[index] + suffix


def quality_suffix(quality: ChordQuality | str) -> str:
    """Return the chord-name suffix for a quality.

    Accepts a ChordQuality or its display name ("Major 7th"). Any name that is
    not a known quality falls back to the empty suffix, i.e. a major chord.
    """
    if isinstance(quality, str):
        try:
            quality = ChordQuality(quality)
        except ValueError:
            return ""
    return QUALITY_SUFFIXES.get(quality, "")


def format_chord(root: str, quality: ChordQuality | str) -> str:
    """Join a root note and a quality, e.g. ("C", MAJOR_SEVENTH) → "CM7"."""
    return root + quality_suffix(quality)


def quality_for_number(number_roll: int) -> ChordQuality:
    """Chord quality selected by the number die (faces 6–8 → major)."""
    _check_face("number_roll", number_roll)
    return EXOTIC_NUMBERS.get(number_roll, ChordQuality.MAJOR)


# ---------------------------------------------------------------------------
# Keys
# ---------------------------------------------------------------------------


def key_group(color_roll: int) -> KeyGroup:
    """KeyGroup addressed by a colour die face (1–8)."""
    _check_face("color_roll", color_roll)
    return COLOR_GROUPS[color_roll - 1]


def is_minor_key(key: str) -> bool:
    """True for the minor member of a key group, e.g. "A♭m"."""
    return key.endswith("m")


def key_root(key: str) -> str:
    """Root note of a key spelling in sharp spelling, e.g. "B♭m" → "A#"."""
    return normalize_note(key.removesuffix("m"))


# ---------------------------------------------------------------------------
# Genre progressions
# ---------------------------------------------------------------------------


def genre_progression(genre: str, root: str, minor: bool = False) -> list[str]:
    """Fixed 4-chord progression of ``genre`` relative to ``root``.

    Args:
        genre: Any genre id except "any" (which has no fixed progression)
        root:  Root note; flat spellings are normalised first
        minor: Use the genre's minor-key table

    Raises:
        ValueError: Unknown genre, "any", or a root outside the chromatic alphabet
    """
    if genre not in GENRE_PROGRESSIONS:
        raise ValueError(
            f"No fixed progression for genre {genre!r}. Available: {sorted(GENRE_PROGRESSIONS)}"
        )
    root = normalize_note(root)
    if root not in NOTE_NAMES:
        raise ValueError(f"Invalid root note {root!r}")
    root_index = NOTE_NAMES.index(root)
    steps = GENRE_PROGRESSIONS[genre]["minor" if minor else "major"]
    return [build_chord(root_index, offset, suffix) for offset, suffix in steps]


# ---------------------------------------------------------------------------
# Dice rolls
# ---------------------------------------------------------------------------


def roll_dice(seed: int | None = None) -> tuple[int, int]:
    """Roll the colour and number dice: a uniform pair from [1, 8] × [1, 8]."""
    return _roll_pair(random.Random(seed))


def roll_single_chord(
    color_roll: int,
    number_roll: int,
    genre: GenreId = "any",
    seed: int | None = None,
) -> RollResult:
    """Roll a single chord from two dice faces.

    For genre "any" the number die decides the quality. For every other genre
    the chord is the first chord of the genre's progression, in the minor
    table when the chosen key is the minor member of its group.

    Examples:
        >>> roll_single_chord(3, 4).chord in {"CM7", "C#M7"}
        True
    """
    _check_genre(genre)
    _check_face("number_roll", number_roll)
    rng = random.Random(seed)
    group, root, minor = _resolve_key(color_roll, rng)
    chord = _first_chord(root, minor, number_roll, genre)
    return RollResult(
        mode="single",
        genre=genre,
        root_note=root,
        chord=chord,
        color_group_name=group.name,
        color_roll=color_roll,
        number_roll=number_roll,
    )


def roll_riff(
    color_roll: int,
    number_roll: int,
    genre: GenreId = "any",
    seed: int | None = None,
) -> RollResult:
    """Roll a 4-chord riff.

    Genre "any": chord 1 uses the supplied dice, chords 2–4 each use a fresh
    dice pair. Other genres: the genre's fixed progression from the resolved
    root and mode, independent of ``number_roll``.
    """
    _check_genre(genre)
    _check_face("number_roll", number_roll)
    rng = random.Random(seed)
    group, root, minor = _resolve_key(color_roll, rng)

    if genre == "any":
        progression = [_first_chord(root, minor, number_roll, genre)]
        for _ in range(_RIFF_LENGTH - 1):
            extra_color, extra_number = _roll_pair(rng)
            _group, extra_root, extra_minor = _resolve_key(extra_color, rng)
            progression.append(_first_chord(extra_root, extra_minor, extra_number, genre))
    else:
        progression = genre_progression(genre, root, minor)

    return RollResult(
        mode="riff",
        genre=genre,
        root_note=root,
        progression=tuple(progression),
        color_group_name=group.name,
        color_roll=color_roll,
        number_roll=number_roll,
    )


# ---------------------------------------------------------------------------
# Pure random samplers (no dice semantics)
# ---------------------------------------------------------------------------


def generate_random_chords(seed: int | None = None) -> list[str]:
    """Four independent chords: uniform root × uniform quality from RANDOM_QUALITIES."""
    rng = random.Random(seed)
    return [rng.choice(NOTE_NAMES) + rng.choice(RANDOM_QUALITIES) for _ in range(_RIFF_LENGTH)]


def generate_tapping_chords(seed: int | None = None) -> list[str]:
    """Four chords for two-hand tapping.

    One random base note; chord roots follow TAPPING_INTERVALS (0, 5, 2, 7)
    above it, each paired with a random wide-interval quality.
    """
    rng = random.Random(seed)
    base_index = rng.randrange(len(NOTE_NAMES))
    return [
        build_chord(base_index, interval, rng.choice(TAPPING_QUALITIES))
        for interval in TAPPING_INTERVALS
    ]


def sample_progression(mode: str, seed: int | None = None) -> RollResult:
    """Wrap a pure random sampler ("random" | "tapping") in a RollResult."""
    if mode == "random":
        progression = generate_random_chords(seed)
    elif mode == "tapping":
        progression = generate_tapping_chords(seed)
    else:
        raise ValueError(f"mode must be 'random' or 'tapping', got {mode!r}")
    return RollResult(
        mode=mode,  # type: ignore[arg-type]
        genre="any",
        root_note=_chord_root(progression[0]),
        progression=tuple(progression),
    )


# ---------------------------------------------------------------------------
# Internals
# ---------------------------------------------------------------------------


def _check_face(name: str, value: int) -> None:
    if not (1 <= value <= DIE_FACES):
        raise ValueError(f"{name} must be in [1, {DIE_FACES}], got {value}")


def _check_genre(genre: str) -> None:
    if genre not in GENRES:
        raise ValueError(f"Unknown genre {genre!r}. Available: {list(GENRES)}")


def _roll_pair(rng: random.Random) -> tuple[int, int]:
    return rng.randint(1, DIE_FACES), rng.randint(1, DIE_FACES)


def _resolve_key(color_roll: int, rng: random.Random) -> tuple[KeyGroup, str, bool]:
    group = key_group(color_roll)
    key = rng.choice(group.keys)
    return group, key_root(key), is_minor_key(key)


def _first_chord(root: str, minor: bool, number_roll: int, genre: str) -> str:
    if genre == "any":
        return format_chord(root, quality_for_number(number_roll))
    return genre_progression(genre, root, minor)[0]


def _chord_root(chord: str) -> str:
    return chord[:2] if chord[1:2] == "#" else chord[:1]
