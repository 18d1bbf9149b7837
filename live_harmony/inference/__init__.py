"""Inference layer - Harmonic understanding of the live note set.

This layer builds higher-level musical understanding from active pitches:
- Chord classification (pitch-class set matching)
- Key detection (bounded chord history)
- Harmonic suggestions (diatonic chords, scales, extensions)

Pipeline: Active pitches → Chord → [Key history, Suggestions]
"""

from .chords import (
    ChordAnalyzer,
    Chord,
    detect_chord,
    classify_chord,
    parse_chord_name,
    chord_pitch_classes,
    diatonic_triads,
    roman_numeral,
)
from .key import (
    KeyDetector,
    KeyDetectorConfig,
    KeyCandidate,
    get_scale_notes,
    parse_key_name,
    relative_key,
    parallel_key,
)
from .suggestions import (
    Suggestion,
    suggest_diatonic_chords,
    suggest_scales,
    suggest_extensions,
)

__all__ = [
    # Chord classification
    "ChordAnalyzer",
    "Chord",
    "detect_chord",
    "classify_chord",
    "parse_chord_name",
    "chord_pitch_classes",
    "diatonic_triads",
    "roman_numeral",
    # Key detection
    "KeyDetector",
    "KeyDetectorConfig",
    "KeyCandidate",
    "get_scale_notes",
    "parse_key_name",
    "relative_key",
    "parallel_key",
    # Suggestions
    "Suggestion",
    "suggest_diatonic_chords",
    "suggest_scales",
    "suggest_extensions",
]
