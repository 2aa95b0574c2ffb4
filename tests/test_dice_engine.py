"""
Tests for core/dice/engine.py — dice → chord / riff generation.

Validates:
    - normalize_note / build_chord: spelling and modular note arithmetic
    - quality lookup: number die faces, unknown names → major
    - genre_progression: exact progressions per genre and mode
    - roll_single_chord / roll_riff: key-group resolution, determinism, riff asymmetry
    - random and tapping samplers
    - precondition errors
"""

from __future__ import annotations

from typing import get_args

import pytest

from core.dice.engine import (
    build_chord,
    format_chord,
    generate_random_chords,
    generate_tapping_chords,
    genre_progression,
    key_group,
    key_root,
    normalize_note,
    quality_for_number,
    quality_suffix,
    roll_dice,
    roll_riff,
    roll_single_chord,
    sample_progression,
)
from core.dice.tables import (
    COLOR_GROUPS,
    GENRE_PROGRESSIONS,
    GENRES,
    NOTE_NAMES,
    RANDOM_QUALITIES,
    TAPPING_QUALITIES,
)
from core.dice.types import ChordQuality, GenreId, KeyGroup, RollResult


def _split(chord: str) -> tuple[str, str]:
    """Split "C#m7" into ("C#", "m7")."""
    cut = 2 if chord[1:2] == "#" else 1
    return chord[:cut], chord[cut:]


def _group_roots(color_roll: int) -> set[str]:
    return {key_root(k) for k in COLOR_GROUPS[color_roll - 1].keys}


# ---------------------------------------------------------------------------
# Note arithmetic
# ---------------------------------------------------------------------------


class TestNormalizeNote:
    @pytest.mark.parametrize(
        ("note", "expected"),
        [("A♭", "G#"), ("Ab", "G#"), ("B♭", "A#"), ("D♭", "C#"), ("E♭", "D#"), ("G♭", "F#")],
    )
    def test_flats_map_to_sharps(self, note: str, expected: str) -> None:
        assert normalize_note(note) == expected

    def test_unicode_sharp_becomes_ascii(self) -> None:
        assert normalize_note("F♯") == "F#"

    def test_naturals_pass_through(self) -> None:
        for note in NOTE_NAMES:
            assert normalize_note(note) == note

    def test_idempotent(self) -> None:
        for note in ("A♭", "Bb", "F♯", "C", "G#", "E♭"):
            once = normalize_note(note)
            assert normalize_note(once) == once


class TestBuildChord:
    def test_closure_over_negative_and_large_offsets(self) -> None:
        for root_index in range(12):
            for offset in range(-24, 25):
                root, suffix = _split(build_chord(root_index, offset, "m"))
                assert root in NOTE_NAMES
                assert suffix == "m"

    def test_wraps_below_c(self) -> None:
        assert build_chord(0, -1) == "B"

    def test_wraps_above_b(self) -> None:
        assert build_chord(11, 1, "7") == "C7"

    def test_octave_offset_is_identity(self) -> None:
        assert build_chord(4, 12) == build_chord(4, -12) == "E"


class TestQualities:
    @pytest.mark.parametrize(
        ("face", "quality"),
        [
            (1, ChordQuality.DIMINISHED),
            (2, ChordQuality.AUGMENTED),
            (3, ChordQuality.SUSPENDED),
            (4, ChordQuality.MAJOR_SEVENTH),
            (5, ChordQuality.NINTH),
            (6, ChordQuality.MAJOR),
            (7, ChordQuality.MAJOR),
            (8, ChordQuality.MAJOR),
        ],
    )
    def test_number_die_faces(self, face: int, quality: ChordQuality) -> None:
        assert quality_for_number(face) is quality

    def test_format_chord_by_enum(self) -> None:
        assert format_chord("C", ChordQuality.MAJOR_SEVENTH) == "CM7"
        assert format_chord("F#", ChordQuality.DIMINISHED) == "F#°"

    def test_format_chord_by_display_name(self) -> None:
        assert format_chord("A", "Minor 7th") == "Am7"

    def test_unknown_quality_name_is_major(self) -> None:
        assert quality_suffix("Lydian Dominant") == ""
        assert format_chord("D", "Lydian Dominant") == "D"


# ---------------------------------------------------------------------------
# Genre progressions
# ---------------------------------------------------------------------------


class TestGenreProgression:
    @pytest.mark.parametrize(
        ("genre", "root", "minor", "expected"),
        [
            ("jazz", "C", False, ["Dm7", "G7", "CM7", "Am7"]),
            ("jazz", "A", True, ["Bm7b5", "E7", "Am", "F7"]),
            ("blues", "E", False, ["E7", "A7", "E7", "B7"]),
            ("blues", "E", True, ["E7", "A7", "E7", "B7"]),
            ("rock", "C", False, ["C", "G", "Am", "F"]),
            ("rock", "A", True, ["Am", "G", "F", "G"]),
            ("pop", "C", False, ["Am", "F", "C", "G"]),
            ("pop", "A", True, ["Am", "F", "C", "G"]),
            ("folk", "G", False, ["G", "Em", "C", "D"]),
            ("metal", "E", False, ["E5", "D5", "C5", "D5"]),
            ("metal", "A", True, ["A5", "F5", "G5", "A5"]),
            ("extreme-metal", "C", False, ["C5", "C#5", "F#°", "Cm"]),
            ("extreme-metal", "E", True, ["Em", "F5", "G°", "Am"]),
        ],
    )
    def test_known_progressions(
        self, genre: str, root: str, minor: bool, expected: list[str]
    ) -> None:
        assert genre_progression(genre, root, minor) == expected

    def test_every_genre_and_mode_has_four_chords(self) -> None:
        for genre in GENRE_PROGRESSIONS:
            for minor in (False, True):
                for root in NOTE_NAMES:
                    assert len(genre_progression(genre, root, minor)) == 4

    def test_flat_root_is_normalised(self) -> None:
        assert genre_progression("rock", "B♭") == genre_progression("rock", "A#")

    def test_any_has_no_fixed_progression(self) -> None:
        with pytest.raises(ValueError, match="No fixed progression"):
            genre_progression("any", "C")

    def test_invalid_root_raises(self) -> None:
        with pytest.raises(ValueError, match="Invalid root note"):
            genre_progression("rock", "H")

    def test_genre_id_matches_table(self) -> None:
        assert get_args(GenreId) == GENRES

    @pytest.mark.parametrize("genre", get_args(GenreId))
    def test_rolls_carry_genre_id(self, genre: GenreId) -> None:
        assert roll_single_chord(1, 1, genre=genre, seed=0).genre == genre
        assert roll_riff(1, 1, genre=genre, seed=0).genre == genre


# ---------------------------------------------------------------------------
# Single chord
# ---------------------------------------------------------------------------


class TestRollSingleChord:
    def test_any_applies_number_die_quality(self) -> None:
        result = roll_single_chord(3, 4, seed=7)
        assert result.chord in {"CM7", "C#M7"}
        assert result.mode == "single"
        assert result.color_group_name == "Yellow"
        assert (result.color_roll, result.number_roll) == (3, 4)

    def test_root_always_from_colour_group(self) -> None:
        for color_roll in range(1, 9):
            for seed in range(10):
                result = roll_single_chord(color_roll, 6, seed=seed)
                assert result.root_note in _group_roots(color_roll)
                assert result.chord == result.root_note

    def test_deterministic_for_fixed_seed(self) -> None:
        for genre in GENRES:
            first = roll_single_chord(7, 2, genre, seed=42)
            second = roll_single_chord(7, 2, genre, seed=42)
            assert first == second

    def test_genre_uses_first_progression_chord(self) -> None:
        result = roll_single_chord(3, 1, "rock", seed=0)
        expected = genre_progression("rock", result.root_note)[0]
        assert result.chord == expected

    def test_minor_group_uses_minor_table(self) -> None:
        # Dark Red holds only minor keys: A♭m and Am
        for seed in range(10):
            result = roll_single_chord(7, 8, "rock", seed=seed)
            assert result.chord in {"G#m", "Am"}

    def test_genre_ignores_number_die(self) -> None:
        chords = {roll_single_chord(5, n, "blues", seed=3).chord for n in range(1, 9)}
        assert len(chords) == 1

    def test_both_keys_reachable(self) -> None:
        roots = {roll_single_chord(1, 6, seed=s).root_note for s in range(50)}
        assert roots == {"G#", "A"}


# ---------------------------------------------------------------------------
# Riff
# ---------------------------------------------------------------------------


class TestRollRiff:
    def test_genre_riff_is_fixed_progression(self) -> None:
        result = roll_riff(3, 4, "rock", seed=11)
        assert list(result.progression) == genre_progression("rock", result.root_note)
        assert result.chord is None

    def test_genre_riff_ignores_number_die(self) -> None:
        riffs = {roll_riff(2, n, "jazz", seed=5).progression for n in range(1, 9)}
        assert len(riffs) == 1

    def test_any_riff_first_chord_from_caller_dice(self) -> None:
        for seed in range(20):
            result = roll_riff(3, 4, seed=seed)
            assert len(result.progression) == 4
            assert result.progression[0] in {"CM7", "C#M7"}

    def test_any_riff_later_chords_come_from_fresh_dice(self) -> None:
        later = set()
        for seed in range(40):
            result = roll_riff(5, 8, seed=seed)
            later.update(result.progression[1:])
        # Fresh dice reach other key groups and exotic qualities
        assert any(_split(c)[0] not in {"E", "F"} for c in later)
        assert any(_split(c)[1] != "" for c in later)

    def test_any_riff_chords_are_valid(self) -> None:
        valid_suffixes = {"", "°", "+", "sus", "M7", "9"}
        for seed in range(20):
            for chord in roll_riff(1, 1, seed=seed).progression:
                root, suffix = _split(chord)
                assert root in NOTE_NAMES
                assert suffix in valid_suffixes

    def test_deterministic_for_fixed_seed(self) -> None:
        assert roll_riff(6, 3, seed=99) == roll_riff(6, 3, seed=99)


# ---------------------------------------------------------------------------
# Random samplers
# ---------------------------------------------------------------------------


class TestRandomSamplers:
    def test_random_chords_draw_from_tables(self) -> None:
        for seed in range(20):
            chords = generate_random_chords(seed)
            assert len(chords) == 4
            for chord in chords:
                root, suffix = _split(chord)
                assert root in NOTE_NAMES
                assert suffix in RANDOM_QUALITIES

    def test_tapping_roots_follow_interval_pattern(self) -> None:
        for seed in range(20):
            chords = generate_tapping_chords(seed)
            roots = [NOTE_NAMES.index(_split(c)[0]) for c in chords]
            base = roots[0]
            assert [(r - base) % 12 for r in roots] == [0, 5, 2, 7]
            assert all(_split(c)[1] in TAPPING_QUALITIES for c in chords)

    def test_seeded_samplers_repeat(self) -> None:
        assert generate_random_chords(4) == generate_random_chords(4)
        assert generate_tapping_chords(4) == generate_tapping_chords(4)

    def test_sample_progression_wraps_result(self) -> None:
        result = sample_progression("tapping", seed=1)
        assert result.mode == "tapping"
        assert result.genre == "any"
        assert result.root_note == _split(result.progression[0])[0]
        assert result.color_roll is None

    def test_sample_progression_rejects_dice_modes(self) -> None:
        with pytest.raises(ValueError, match="random' or 'tapping"):
            sample_progression("single")

    def test_table_sizes(self) -> None:
        assert len(RANDOM_QUALITIES) == 36
        assert len(TAPPING_QUALITIES) == 23


# ---------------------------------------------------------------------------
# Preconditions and types
# ---------------------------------------------------------------------------


class TestPreconditions:
    @pytest.mark.parametrize(("color", "number"), [(0, 1), (9, 1), (1, 0), (1, 9)])
    def test_out_of_range_dice_raise(self, color: int, number: int) -> None:
        with pytest.raises(ValueError, match=r"must be in \[1, 8\]"):
            roll_single_chord(color, number)
        with pytest.raises(ValueError, match=r"must be in \[1, 8\]"):
            roll_riff(color, number)

    def test_unknown_genre_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown genre"):
            roll_single_chord(1, 1, "polka")

    def test_roll_dice_in_range(self) -> None:
        for seed in range(50):
            color, number = roll_dice(seed)
            assert 1 <= color <= 8
            assert 1 <= number <= 8

    def test_key_group_lookup(self) -> None:
        assert key_group(6).keys == ("F♯", "G")
        assert key_root("F♯") == "F#"
        assert key_root("B♭m") == "A#"

    def test_roll_result_requires_chord_for_single(self) -> None:
        with pytest.raises(ValueError, match="requires a chord"):
            RollResult(mode="single", genre="any", root_note="C")

    def test_roll_result_requires_four_chords_for_riff(self) -> None:
        with pytest.raises(ValueError, match="requires 4 chords"):
            RollResult(mode="riff", genre="any", root_note="C", progression=("C", "F", "G"))

    def test_key_group_rejects_three_keys(self) -> None:
        with pytest.raises(ValueError, match="1 or 2 keys"):
            KeyGroup(name="X", keys=("C", "D", "E"), visual_tag="x")
