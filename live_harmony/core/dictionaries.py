"""Interval dictionaries - chord and scale formulas.

Each formula is an ascending tuple of semitone offsets (0-11) from an implicit
root. Chord formulas are declared in precedence order: when a pitch-class set
matches several formulas, the earliest declared one wins.
"""

from typing import Dict, Tuple

# Chord formulas, ordered by precedence (more common chords first)
CHORD_FORMULAS: Dict[str, Tuple[int, ...]] = {
    # Triads
    "Major": (0, 4, 7),
    "Minor": (0, 3, 7),
    "Diminished": (0, 3, 6),
    "Augmented": (0, 4, 8),
    "Sus4": (0, 5, 7),
    "Sus2": (0, 2, 7),
    # Seventh chords
    "Dom7": (0, 4, 7, 10),
    "Maj7": (0, 4, 7, 11),
    "Min7": (0, 3, 7, 10),
    "m7b5 (Half-Dim)": (0, 3, 6, 10),
    "Dim7": (0, 3, 6, 9),
    "MinMaj7": (0, 3, 7, 11),
    "Aug7": (0, 4, 8, 10),
    "7sus4": (0, 5, 7, 10),
    # Added-tone chords
    "6": (0, 4, 7, 9),
    "Min6": (0, 3, 7, 9),
    "add9": (0, 2, 4, 7),
    # Ninths
    "Dom9": (0, 2, 4, 7, 10),
    "Maj9": (0, 2, 4, 7, 11),
    "Min9": (0, 2, 3, 7, 10),
    "6/9": (0, 2, 4, 7, 9),
}

SCALE_FORMULAS: Dict[str, Tuple[int, ...]] = {
    "Major": (0, 2, 4, 5, 7, 9, 11),
    "Minor": (0, 2, 3, 5, 7, 8, 10),  # Natural minor
    "Harmonic Minor": (0, 2, 3, 5, 7, 8, 11),
    "Melodic Minor": (0, 2, 3, 5, 7, 9, 11),
    "Dorian": (0, 2, 3, 5, 7, 9, 10),
    "Mixolydian": (0, 2, 4, 5, 7, 9, 10),
    "Lydian": (0, 2, 4, 6, 7, 9, 11),
    "Phrygian": (0, 1, 3, 5, 7, 8, 10),
    "Locrian": (0, 1, 3, 5, 6, 8, 10),
    "Pentatonic Major": (0, 2, 4, 7, 9),
    "Pentatonic Minor": (0, 3, 5, 7, 10),
    "Blues": (0, 3, 5, 6, 7, 10),
}

# Richer qualities a triad (or suspended chord) can grow into, with
# confidence weights. Sevenths rank above sixths and ninths.
EXTENSIONS: Dict[str, Tuple[Tuple[str, str, float], ...]] = {
    "Major": (
        ("Maj7", "major 7th", 0.9),
        ("Dom7", "dominant 7th", 0.85),
        ("6", "added 6th", 0.7),
        ("add9", "added 9th", 0.65),
    ),
    "Minor": (
        ("Min7", "minor 7th", 0.9),
        ("MinMaj7", "minor-major 7th", 0.75),
        ("Min6", "minor 6th", 0.7),
        ("Min9", "minor 9th", 0.6),
    ),
    "Diminished": (
        ("m7b5 (Half-Dim)", "half-diminished 7th", 0.9),
        ("Dim7", "diminished 7th", 0.8),
    ),
    "Augmented": (
        ("Aug7", "augmented 7th", 0.8),
    ),
    "Sus4": (
        ("7sus4", "dominant 7th sus4", 0.85),
    ),
}


def validate_formulas(formulas: Dict[str, Tuple[int, ...]], kind: str) -> None:
    """
    Check that every formula is well formed.

    A formula must be a non-empty ascending sequence of unique integer
    offsets in 0-11 that starts at 0.

    Raises:
        ValueError: If any formula is malformed
    """
    for name, offsets in formulas.items():
        if not isinstance(name, str) or not name.strip():
            raise ValueError(f"Invalid {kind} name: {name!r}")
        if not offsets:
            raise ValueError(f"{kind} '{name}' has no offsets")
        for offset in offsets:
            if isinstance(offset, bool) or not isinstance(offset, int) or not 0 <= offset <= 11:
                raise ValueError(f"{kind} '{name}' has invalid offset {offset!r}")
        if list(offsets) != sorted(set(offsets)):
            raise ValueError(f"{kind} '{name}' offsets must be ascending and unique: {offsets}")
        if offsets[0] != 0:
            raise ValueError(f"{kind} '{name}' must contain the root offset 0")


def validate_extensions() -> None:
    """Check that every extension maps between known chord qualities."""
    for base, entries in EXTENSIONS.items():
        if base not in CHORD_FORMULAS:
            raise ValueError(f"Extension base '{base}' is not a known chord quality")
        for quality, _, confidence in entries:
            if quality not in CHORD_FORMULAS:
                raise ValueError(f"Extension '{quality}' of '{base}' is not a known chord quality")
            if not 0.0 <= confidence <= 1.0:
                raise ValueError(f"Extension '{quality}' confidence out of range: {confidence}")


validate_formulas(CHORD_FORMULAS, "chord")
validate_formulas(SCALE_FORMULAS, "scale")
validate_extensions()
