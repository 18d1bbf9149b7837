"""Chord analysis - Classify sets of active pitches as named chords.

Implements exact pitch-class set matching:
- Octave and voicing independent (bass note is irrelevant)
- Every distinct pitch class is tried as the root
- Ambiguous sets resolve by dictionary precedence order
- Roman numeral labels for scale-degree triads
"""

import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple

from ..core import PITCH_NAMES, CHORD_FORMULAS, SCALE_FORMULAS, is_midi_int, pitch_class_index
from ..core.constants import MIN_CHORD_PITCH_CLASSES
from ..core.dictionaries import validate_formulas

logger = logging.getLogger(__name__)

ROMAN_NUMERALS = ["I", "II", "III", "IV", "V", "VI", "VII"]

# Triad qualities read as lowercase numerals
LOWERCASE_QUALITIES = {"Minor", "Diminished"}


@dataclass(frozen=True)
class Chord:
    """Represents a recognized chord instance."""

    root: str  # Root note (e.g., "C", "F#")
    quality: str  # Chord dictionary quality (e.g., "Major", "Dom7")

    @property
    def name(self) -> str:
        """Get canonical name (e.g., 'G Dom7')."""
        return f"{self.root} {self.quality}"

    @property
    def root_pitch_class(self) -> int:
        """Get root as pitch class (0-11)."""
        return PITCH_NAMES.index(self.root)

    @property
    def pitch_classes(self) -> FrozenSet[int]:
        """Get pitch classes in the chord."""
        root_pc = self.root_pitch_class
        return frozenset((root_pc + i) % 12 for i in CHORD_FORMULAS[self.quality])

    def get_roman_numeral(self, key_root: str, scale: str) -> str:
        """
        Get roman numeral representation in given key.

        Args:
            key_root: Key root (e.g., "C")
            scale: Scale name (e.g., "Major")

        Returns:
            Roman numeral (e.g., "IV", "ii", "vii°"), or the chord name in
            parentheses if the root is not a scale degree
        """
        key_root_pc = pitch_class_index(key_root)
        offsets = SCALE_FORMULAS.get(scale)
        if key_root_pc is None or offsets is None:
            return f"({self.name})"

        interval = (self.root_pitch_class - key_root_pc) % 12
        if interval not in offsets:
            # Non-diatonic chord
            return f"({self.name})"

        return roman_numeral(offsets.index(interval), self.quality)

    def __str__(self) -> str:
        return self.name


def roman_numeral(degree: int, quality: str) -> str:
    """
    Build a roman numeral for a scale degree.

    Args:
        degree: Zero-based scale degree (0-6)
        quality: Chord quality of the degree's chord

    Returns:
        Numeral, uppercase for major, lowercase for minor, with "°" for
        diminished and "+" for augmented
    """
    numeral = ROMAN_NUMERALS[degree % len(ROMAN_NUMERALS)]

    if quality in LOWERCASE_QUALITIES:
        numeral = numeral.lower()

    if quality == "Diminished":
        numeral += "°"
    elif quality == "Augmented":
        numeral += "+"

    return numeral


def split_name(name) -> Optional[Tuple[int, str]]:
    """
    Split "<Root> <Quality>" into (root pitch class, quality).

    The quality may contain spaces ("m7b5 (Half-Dim)", "Harmonic Minor").
    Returns None for anything that is not a string of that shape.
    """
    if not isinstance(name, str):
        return None
    parts = name.strip().split(None, 1)
    if len(parts) != 2:
        return None
    root_pc = pitch_class_index(parts[0])
    if root_pc is None:
        return None
    return root_pc, parts[1].strip()


def parse_chord_name(name) -> Optional[Chord]:
    """Parse a chord name into a Chord, or None if it is not resolvable."""
    parsed = split_name(name)
    if parsed is None:
        return None
    root_pc, quality = parsed
    if quality not in CHORD_FORMULAS:
        return None
    return Chord(root=PITCH_NAMES[root_pc], quality=quality)


def chord_pitch_classes(name) -> Optional[FrozenSet[int]]:
    """Get pitch classes of a named chord, or None if it is not resolvable."""
    chord = parse_chord_name(name)
    return chord.pitch_classes if chord else None


def notes_to_pitch_classes(pitches) -> Optional[FrozenSet[int]]:
    """Convert MIDI pitches to a pitch class set, or None if any pitch is malformed."""
    if isinstance(pitches, (str, bytes)):
        return None
    try:
        items = list(pitches)
    except TypeError:
        return None
    if not all(is_midi_int(p) for p in items):
        return None
    return frozenset(int(p) % 12 for p in items)


def diatonic_triads(root_pc: int, scale: str) -> List[Chord]:
    """
    Build the stacked-third triad on every degree of a 7-note scale.

    Args:
        root_pc: Scale root as pitch class (0-11)
        scale: Scale name from the scale dictionary

    Returns:
        One Chord per degree in degree order; empty for unknown or
        non-heptatonic scales
    """
    offsets = SCALE_FORMULAS.get(scale)
    if offsets is None or len(offsets) != 7:
        return []

    triads = []
    for degree in range(7):
        third = (offsets[(degree + 2) % 7] - offsets[degree]) % 12
        fifth = (offsets[(degree + 4) % 7] - offsets[degree]) % 12
        quality = _quality_for_intervals((0, third, fifth))
        if quality is None:
            continue
        degree_root = (root_pc + offsets[degree]) % 12
        triads.append(Chord(root=PITCH_NAMES[degree_root], quality=quality))
    return triads


def _quality_for_intervals(intervals: Tuple[int, ...]) -> Optional[str]:
    target = tuple(sorted(set(intervals)))
    for quality, formula in CHORD_FORMULAS.items():
        if formula == target:
            return quality
    return None


class ChordAnalyzer:
    """Classify active pitches against a chord dictionary.

    Features:
    - Exact, order-independent pitch-class set matching
    - Voicing and inversion agnostic
    - Deterministic precedence for ambiguous sets
    """

    def __init__(
        self,
        formulas: Optional[Dict[str, Tuple[int, ...]]] = None,
        min_pitch_classes: int = MIN_CHORD_PITCH_CLASSES,
    ):
        """
        Initialize ChordAnalyzer.

        Args:
            formulas: Chord dictionary in precedence order (default: CHORD_FORMULAS)
            min_pitch_classes: Minimum distinct pitch classes to form a chord

        Raises:
            ValueError: If a custom dictionary is malformed
        """
        if formulas is None:
            formulas = CHORD_FORMULAS
        else:
            validate_formulas(formulas, "chord")
        self.formulas = dict(formulas)
        self.min_pitch_classes = min_pitch_classes

        # Group by cardinality once, keeping declaration order
        self._by_size: Dict[int, List[Tuple[str, FrozenSet[int]]]] = {}
        for quality, offsets in self.formulas.items():
            self._by_size.setdefault(len(offsets), []).append((quality, frozenset(offsets)))

    def classify(self, pitches: Iterable[int]) -> Optional[Chord]:
        """
        Classify pitches as a Chord.

        Args:
            pitches: MIDI pitches in any order, possibly spanning octaves

        Returns:
            Best matching Chord, or None
        """
        pitch_classes = notes_to_pitch_classes(pitches)
        if pitch_classes is None or len(pitch_classes) < self.min_pitch_classes:
            return None

        candidates = self._by_size.get(len(pitch_classes))
        if not candidates:
            return None

        # Intervals from each candidate root, lowest pitch class first
        rotations = [
            (root_pc, frozenset((pc - root_pc) % 12 for pc in pitch_classes))
            for root_pc in sorted(pitch_classes)
        ]

        for quality, formula in candidates:
            for root_pc, intervals in rotations:
                if intervals == formula:
                    return Chord(root=PITCH_NAMES[root_pc], quality=quality)

        logger.debug("No chord for pitch classes %s", sorted(pitch_classes))
        return None

    def detect(self, pitches: Iterable[int]) -> Optional[str]:
        """Classify pitches and return the canonical chord name, or None."""
        chord = self.classify(pitches)
        return chord.name if chord else None


_default_analyzer = ChordAnalyzer()


def classify_chord(pitches) -> Optional[Chord]:
    """Classify pitches with the default chord dictionary."""
    return _default_analyzer.classify(pitches)


def detect_chord(pitches) -> Optional[str]:
    """
    Detect the chord name for a collection of active pitches.

    Examples:
        detect_chord([60, 64, 67]) == "C Major"
        detect_chord([55, 59, 62, 65]) == "G Dom7"
        detect_chord([60]) is None
    """
    return _default_analyzer.detect(pitches)
