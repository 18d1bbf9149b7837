"""Tests for history-based key detection.

Tests cover:
- Progressions in major and minor keys
- Recency weighting and the tie-break chain
- Bounded history and eviction
- Unknown chords ignored
- Configuration validation
- Relative and parallel keys
"""

import pytest
from pathlib import Path
import sys

# Add package root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from live_harmony.inference import (
    KeyDetector,
    KeyDetectorConfig,
    get_scale_notes,
    parse_key_name,
    relative_key,
    parallel_key,
)


# ============================================================================
# Test Fixtures - Helper functions to create test data
# ============================================================================

def detector_with(chords, **kwargs) -> KeyDetector:
    """Create a KeyDetector fed with a chord progression."""
    detector = KeyDetector(**kwargs)
    for name in chords:
        detector.add_chord(name)
    return detector


def scores_by_name(candidates) -> dict:
    return {c.name: c.score for c in candidates}


# ============================================================================
# Detection Tests
# ============================================================================

class TestKeyDetection:
    """Test key inference from chord progressions."""

    def test_empty_history(self):
        """No chords means no key candidates."""
        detector = KeyDetector()
        assert detector.detect() == []
        assert detector.best() is None

    def test_two_five_one_in_c(self):
        """D Minor, G Major, C Major points to C Major."""
        keys = detector_with(["D Minor", "G Major", "C Major"]).detect()

        assert keys[0].root == "C"
        assert keys[0].scale == "Major"

    def test_two_five_one_in_g(self):
        keys = detector_with(["A Minor", "D Dom7", "G Major"]).detect()
        assert keys[0].name == "G Major"

    def test_relative_minor_wins_on_tonic(self):
        """Ending on A Minor tips the tie toward A Minor."""
        keys = detector_with(["D Minor", "G Major", "C Major", "A Minor"]).detect()

        assert keys[0].name == "A Minor"
        assert keys[1].name == "C Major"
        assert keys[0].score == keys[1].score

    def test_minor_progression(self):
        keys = detector_with(["D Minor", "G Minor", "D Minor"]).detect()
        assert keys[0].name == "D Minor"

    def test_score_is_weighted_fit(self):
        """The newest chord weighs 1.0, older ones decay geometrically."""
        keys = detector_with(["D Minor", "G Major", "C Major"]).detect()
        scores = scores_by_name(keys)

        assert scores["C Major"] == pytest.approx(0.81 + 0.9 + 1.0)
        # D Minor has F, which is not in G Major
        assert scores["G Major"] == pytest.approx(0.9 + 1.0)

    def test_plain_count_without_decay(self):
        keys = detector_with(["C Major", "G Major", "F Major"], recency_decay=1.0).detect()
        scores = scores_by_name(keys)

        assert scores["C Major"] == 3.0
        assert scores["G Major"] == 2.0
        assert scores["F Major"] == 2.0

    def test_only_fitting_keys_returned(self):
        """Keys containing none of the chords are left out."""
        keys = detector_with(["C Major"]).detect()

        assert all(c.score > 0 for c in keys)
        assert "F# Major" not in scores_by_name(keys)

    def test_sorted_descending(self):
        keys = detector_with(["C Major", "E Minor", "F Major", "G Dom7", "D Minor"]).detect()
        scores = [c.score for c in keys]
        assert scores == sorted(scores, reverse=True)

    def test_deterministic(self):
        progression = ["C Major", "A Minor", "F Major", "G Major"]
        first = detector_with(progression).detect()
        second = detector_with(progression).detect()
        assert first == second
        assert detector_with(progression).detect() == detector_with(progression).detect()

    def test_seventh_chords_count(self):
        """A chord fits only when all of its tones are in the key."""
        keys = detector_with(["G Dom7"]).detect()
        names = scores_by_name(keys)

        assert "C Major" in names
        assert "G Major" not in names  # F is not in G Major

    def test_flat_names_accepted(self):
        detector = KeyDetector()
        assert detector.add_chord("Bb Major")
        assert detector.history == ("A# Major",)

    def test_extra_scales(self):
        """Modes share a pitch set with their parent; the tonic triad decides."""
        keys = detector_with(
            ["D Minor", "G Major", "C Major"],
            scales=("Major", "Minor", "Dorian"),
        ).detect()

        assert keys[0].name == "C Major"
        assert "D Dorian" in scores_by_name(keys)


class TestHistory:
    """Test the bounded chord history."""

    def test_unknown_chords_ignored(self):
        detector = KeyDetector()
        assert not detector.add_chord("X Weird")
        assert not detector.add_chord(None)
        assert not detector.add_chord("")
        assert len(detector) == 0
        assert detector.detect() == []

    def test_eviction(self):
        """Oldest chord leaves when the history is full."""
        detector = detector_with(["C Major", "F Major", "G Major"], history_size=2)
        assert detector.history == ("F Major", "G Major")

    def test_eviction_changes_key(self):
        detector = detector_with(["F# Major", "C# Major", "C Major", "G Major"], history_size=2)
        assert detector.best().name == "G Major"

    def test_clear(self):
        detector = detector_with(["C Major"])
        detector.clear()
        assert detector.history == ()
        assert detector.detect() == []

    def test_instances_are_independent(self):
        first = detector_with(["C Major"])
        second = KeyDetector()
        assert len(first) == 1
        assert len(second) == 0


# ============================================================================
# Configuration Tests
# ============================================================================

class TestKeyDetectorConfig:
    """Test configuration handling."""

    def test_defaults(self):
        config = KeyDetectorConfig()
        assert config.history_size == 16
        assert config.recency_decay == 0.9
        assert config.scales == ("Major", "Minor")

    def test_config_object(self):
        config = KeyDetectorConfig(history_size=3, recency_decay=1.0)
        detector = KeyDetector(config=config)
        assert detector.config is config

    @pytest.mark.parametrize("kwargs", [
        {"history_size": 0},
        {"recency_decay": 0.0},
        {"recency_decay": 1.5},
        {"scales": ()},
        {"scales": ("Major", "Bogus")},
    ])
    def test_invalid_config(self, kwargs):
        with pytest.raises(ValueError):
            KeyDetectorConfig(**kwargs)


# ============================================================================
# Helper Tests
# ============================================================================

class TestKeyHelpers:
    """Test key names, scale notes and key relationships."""

    def test_relative_key(self):
        assert relative_key("C Major") == "A Minor"
        assert relative_key("A Minor") == "C Major"
        assert relative_key("Eb Major") == "C Minor"
        assert relative_key("D Dorian") is None
        assert relative_key("nonsense") is None

    def test_parallel_key(self):
        assert parallel_key("C Major") == "C Minor"
        assert parallel_key("E Minor") == "E Major"
        assert parallel_key("G Mixolydian") is None

    def test_relative_of_best_key(self):
        best = detector_with(["D Minor", "G Major", "C Major"]).best()
        assert relative_key(best.name) == "A Minor"

    def test_scale_notes(self):
        assert get_scale_notes("C", "Major") == [0, 2, 4, 5, 7, 9, 11]
        assert get_scale_notes("A", "Minor") == [9, 11, 0, 2, 4, 5, 7]
        assert get_scale_notes("H", "Major") == []
        assert get_scale_notes("C", "Unknown") == []

    def test_parse_key_name(self):
        assert parse_key_name("C Major") == (0, "Major")
        assert parse_key_name("A Harmonic Minor") == (9, "Harmonic Minor")
        assert parse_key_name("Eb Major") == (3, "Major")
        assert parse_key_name("C Dom7") is None
        assert parse_key_name(123) is None
