"""Tests for the suggestion engine.

Tests cover:
- Diatonic chord suggestions with roman numeral functions
- Scale suggestions filtered by the current chord
- Extension suggestions for triads
- Ordering and input validation contracts
"""

import pytest
from pathlib import Path
import sys

# Add package root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from live_harmony.inference import (
    Suggestion,
    suggest_diatonic_chords,
    suggest_scales,
    suggest_extensions,
    chord_pitch_classes,
    get_scale_notes,
    parse_key_name,
)


# ============================================================================
# Test Fixtures - Helper functions to create test data
# ============================================================================

def names(suggestions) -> list:
    return [s.name for s in suggestions]


def functions(suggestions) -> dict:
    return {s.name: s.function for s in suggestions}


def assert_sorted(suggestions):
    """Confidence must never increase down the list."""
    for previous, current in zip(suggestions, suggestions[1:]):
        assert current.confidence <= previous.confidence


def assert_well_formed(suggestions):
    for s in suggestions:
        assert isinstance(s, Suggestion)
        assert isinstance(s.name, str)
        assert isinstance(s.function, str)
        assert isinstance(s.confidence, float)
        assert 0.0 <= s.confidence <= 1.0


# ============================================================================
# Diatonic Chords
# ============================================================================

class TestDiatonicChords:
    """Test suggest_diatonic_chords."""

    def test_c_major(self):
        suggestions = suggest_diatonic_chords("C Major", None)
        assert len(suggestions) == 7

        found = names(suggestions)
        for chord in ["C Major", "F Major", "G Major", "A Minor"]:
            assert chord in found

    def test_functions_are_roman_numerals(self):
        funcs = functions(suggest_diatonic_chords("C Major", None))

        assert funcs["C Major"] == "I"
        assert funcs["D Minor"] == "ii"
        assert funcs["F Major"] == "IV"
        assert funcs["G Major"] == "V"
        assert funcs["A Minor"] == "vi"
        assert funcs["B Diminished"] == "vii°"

    def test_tonic_dominant_subdominant_first(self):
        suggestions = suggest_diatonic_chords("C Major", None)
        assert names(suggestions)[:3] == ["C Major", "G Major", "F Major"]
        assert names(suggestions)[-1] == "B Diminished"

    def test_excludes_current_chord(self):
        found = names(suggest_diatonic_chords("C Major", "G Major"))

        assert "G Major" not in found
        assert "C Major" in found
        assert "F Major" in found
        assert len(found) == 6

    def test_non_diatonic_current_chord(self):
        """A current chord outside the key excludes nothing."""
        assert len(suggest_diatonic_chords("C Major", "F# Major")) == 7

    def test_a_minor(self):
        suggestions = suggest_diatonic_chords("A Minor", None)
        funcs = functions(suggestions)

        assert funcs["A Minor"] == "i"
        assert funcs["C Major"] == "III"
        assert funcs["E Minor"] == "v"
        assert funcs["B Diminished"] == "ii°"

    def test_well_formed_and_sorted(self):
        suggestions = suggest_diatonic_chords("C Major", None)
        assert_well_formed(suggestions)
        assert_sorted(suggestions)

    def test_pentatonic_key_has_no_triads(self):
        assert suggest_diatonic_chords("C Pentatonic Major", None) == []

    @pytest.mark.parametrize("key,current", [
        ("", None),
        (None, None),
        ("X Invalid", None),
        ("C Nonsense", None),
        (123, 456),
        ("C Major", 456),
        ("C Major", "Q Major"),
    ])
    def test_invalid_input(self, key, current):
        assert suggest_diatonic_chords(key, current) == []


# ============================================================================
# Scales
# ============================================================================

class TestScales:
    """Test suggest_scales."""

    def test_parent_scale_first(self):
        suggestions = suggest_scales("C Major", None)

        assert suggestions[0].name == "C Major"
        assert suggestions[0].function == "parent scale"
        assert suggestions[0].confidence == 1.0

    def test_relative_scale_without_chord(self):
        funcs = functions(suggest_scales("C Major", None))
        assert funcs["A Minor"] == "relative scale"

        funcs = functions(suggest_scales("A Minor", None))
        assert funcs["C Major"] == "relative scale"

    def test_parallel_scales_without_chord(self):
        funcs = functions(suggest_scales("C Major", None))
        assert funcs["C Minor"] == "parallel scale"
        assert funcs["C Mixolydian"] == "parallel scale"

    def test_filters_by_chord(self):
        """Every suggested scale contains every chord tone."""
        suggestions = suggest_scales("C Major", "G Dom7")
        chord_pcs = chord_pitch_classes("G Dom7")

        assert "C Major" in names(suggestions)
        for s in suggestions:
            root, scale = s.name.split(" ", 1)
            assert chord_pcs <= set(get_scale_notes(root, scale))

    def test_chord_scale_and_mode_of_parent(self):
        funcs = functions(suggest_scales("C Major", "G Dom7"))

        # Same notes as C Major
        assert funcs["G Mixolydian"] == "mode of parent"
        # Different notes, still fits G Dom7
        assert "G Blues" not in funcs  # no B in G Blues
        assert funcs["G Mixolydian"] != "chord scale"

    def test_chord_scale_outside_parent(self):
        funcs = functions(suggest_scales("C Major", "D Major"))
        assert funcs["D Major"] == "chord scale"
        assert "C Major" in funcs

    def test_related_scales_below_parent(self):
        suggestions = suggest_scales("C Major", "C Major")
        assert all(s.confidence < 1.0 for s in suggestions[1:])

    def test_well_formed_and_sorted(self):
        for current in [None, "C Major", "G Dom7", "A Minor"]:
            suggestions = suggest_scales("C Major", current)
            assert_well_formed(suggestions)
            assert_sorted(suggestions)

    def test_no_duplicates(self):
        found = names(suggest_scales("C Major", "C Major"))
        assert len(found) == len(set(found))

    def test_deterministic(self):
        assert suggest_scales("D Dorian", "D Min7") == suggest_scales("D Dorian", "D Min7")

    def test_all_suggested_keys_parse(self):
        for s in suggest_scales("E Minor", "B Major"):
            assert parse_key_name(s.name) is not None

    @pytest.mark.parametrize("key,current", [
        ("", ""),
        (None, None),
        ({}, []),
        ("C Major", ""),
        ("C Dom7", None),
    ])
    def test_invalid_input(self, key, current):
        assert suggest_scales(key, current) == []


# ============================================================================
# Extensions
# ============================================================================

class TestExtensions:
    """Test suggest_extensions."""

    def test_major_triad(self):
        found = names(suggest_extensions("C Major"))
        assert "C Maj7" in found
        assert "C Dom7" in found
        assert found[0] == "C Maj7"

    def test_minor_triad(self):
        found = names(suggest_extensions("A Minor"))
        assert "A Min7" in found

    def test_diminished_triad(self):
        found = names(suggest_extensions("B Diminished"))
        assert "B m7b5 (Half-Dim)" in found
        assert "B Dim7" in found

    def test_sus4(self):
        assert names(suggest_extensions("G Sus4")) == ["G 7sus4"]

    def test_functions(self):
        funcs = functions(suggest_extensions("C Major"))
        assert funcs["C Dom7"] == "dominant 7th"

    def test_well_formed_and_sorted(self):
        suggestions = suggest_extensions("C Major")
        assert_well_formed(suggestions)
        assert_sorted(suggestions)

    @pytest.mark.parametrize("chord", ["G Dom7", "C Maj7", "D Min9", "C Sus2"])
    def test_already_extended(self, chord):
        assert suggest_extensions(chord) == []

    @pytest.mark.parametrize("chord", ["", None, "X Unknown", 42, ["C", "Major"]])
    def test_invalid_input(self, chord):
        assert suggest_extensions(chord) == []


class TestPureFunctions:
    """Test that the suggestion functions never raise."""

    def test_odd_types(self):
        assert suggest_diatonic_chords(123, 456) == []
        assert suggest_scales({}, []) == []
        assert suggest_extensions(None) == []

    def test_inputs_not_mutated(self):
        key = "C Major"
        chord = "G Dom7"
        suggest_diatonic_chords(key, chord)
        suggest_scales(key, chord)
        assert key == "C Major"
        assert chord == "G Dom7"
