"""Harmonic suggestions - Rank chords and scales for the current context.

All functions are pure and stateless. Anything that cannot be resolved
(non-strings, malformed names, unknown qualities or scales) yields an empty
list rather than an exception. Every list is sorted by confidence
descending, ties by name.
"""

from dataclasses import dataclass
from typing import FrozenSet, List, Optional, Tuple

from ..core import PITCH_NAMES, SCALE_FORMULAS, EXTENSIONS
from .chords import Chord, parse_chord_name, diatonic_triads, roman_numeral
from .key import parse_key_name, get_scale_notes, relative_key


@dataclass(frozen=True)
class Suggestion:
    """A ranked harmonic suggestion."""
    name: str
    function: str  # Role label (e.g., "V", "parent scale", "dominant 7th")
    confidence: float  # 0.0 - 1.0, for ordering only


# Confidence by zero-based scale degree: tonic, dominant and subdominant
# first, then ii/vi/iii, then vii
DEGREE_WEIGHTS = {
    0: 1.0,   # I
    4: 0.9,   # V
    3: 0.85,  # IV
    1: 0.7,   # ii
    5: 0.65,  # vi
    2: 0.6,   # iii
    6: 0.4,   # vii
}

PARENT_CONFIDENCE = 1.0
MAX_RELATED_CONFIDENCE = 0.9


def _sorted(suggestions: List[Suggestion]) -> List[Suggestion]:
    return sorted(suggestions, key=lambda s: (-s.confidence, s.name))


def _current_chord(current_chord) -> Tuple[bool, Optional[Chord]]:
    """Resolve an optional current chord; the flag is False when it is invalid."""
    if current_chord is None:
        return True, None
    chord = parse_chord_name(current_chord)
    return chord is not None, chord


def suggest_diatonic_chords(key, current_chord=None) -> List[Suggestion]:
    """
    Suggest the scale-degree triads of a key.

    Args:
        key: Key name such as "C Major" or "A Minor" (7-note scales only)
        current_chord: Optional chord name to leave out

    Returns:
        One Suggestion per degree with its roman numeral as function
    """
    parsed = parse_key_name(key)
    valid, current = _current_chord(current_chord)
    if parsed is None or not valid:
        return []

    root_pc, scale = parsed
    offsets = SCALE_FORMULAS[scale]

    suggestions = []
    for triad in diatonic_triads(root_pc, scale):
        if current is not None and triad == current:
            continue
        degree = offsets.index((triad.root_pitch_class - root_pc) % 12)
        suggestions.append(Suggestion(
            name=triad.name,
            function=roman_numeral(degree, triad.quality),
            confidence=DEGREE_WEIGHTS[degree],
        ))

    return _sorted(suggestions)


def _related_confidence(scale_pcs: FrozenSet[int], parent_pcs: FrozenSet[int]) -> float:
    shared = len(scale_pcs & parent_pcs)
    return round(min(MAX_RELATED_CONFIDENCE, 0.4 + 0.5 * shared / len(scale_pcs)), 3)


def _scale_pcs(root_pc: int, scale: str) -> FrozenSet[int]:
    return frozenset(get_scale_notes(PITCH_NAMES[root_pc], scale))


def suggest_scales(key, current_chord=None) -> List[Suggestion]:
    """
    Suggest scales compatible with a key and, optionally, the current chord.

    The parent scale always comes first. With a current chord, the other
    candidates are scales rooted on the chord root or the key tonic that
    contain every chord tone. Without one, they are the other scales on the
    tonic plus the relative major/minor.

    Args:
        key: Key name such as "C Major"
        current_chord: Optional chord name such as "G Dom7"

    Returns:
        Scale suggestions, parent first
    """
    parsed = parse_key_name(key)
    valid, current = _current_chord(current_chord)
    if parsed is None or not valid:
        return []

    root_pc, parent_scale = parsed
    parent_name = f"{PITCH_NAMES[root_pc]} {parent_scale}"
    parent_pcs = _scale_pcs(root_pc, parent_scale)

    found = {}

    def consider(candidate_root: int, scale: str, function: str) -> None:
        name = f"{PITCH_NAMES[candidate_root]} {scale}"
        if name == parent_name or name in found:
            return
        scale_pcs = _scale_pcs(candidate_root, scale)
        if current is not None and not current.pitch_classes <= scale_pcs:
            return
        if function == "chord scale" and scale_pcs == parent_pcs:
            function = "mode of parent"
        found[name] = Suggestion(
            name=name,
            function=function,
            confidence=_related_confidence(scale_pcs, parent_pcs),
        )

    if current is not None:
        for scale in SCALE_FORMULAS:
            consider(current.root_pitch_class, scale, "chord scale")
        for scale in SCALE_FORMULAS:
            consider(root_pc, scale, "parallel scale")
    else:
        relative = relative_key(parent_name)
        if relative is not None:
            relative_root, relative_scale = parse_key_name(relative)
            consider(relative_root, relative_scale, "relative scale")
        for scale in SCALE_FORMULAS:
            consider(root_pc, scale, "parallel scale")

    parent = Suggestion(name=parent_name, function="parent scale", confidence=PARENT_CONFIDENCE)
    return [parent] + _sorted(list(found.values()))


def suggest_extensions(chord_name) -> List[Suggestion]:
    """
    Suggest richer chords built on a triad.

    Args:
        chord_name: Chord name such as "C Major"

    Returns:
        Extension suggestions; empty for chords that are already extended
        (e.g. "G Dom7") or cannot be resolved
    """
    chord = parse_chord_name(chord_name)
    if chord is None:
        return []

    suggestions = [
        Suggestion(name=f"{chord.root} {quality}", function=function, confidence=confidence)
        for quality, function, confidence in EXTENSIONS.get(chord.quality, ())
    ]
    return _sorted(suggestions)
