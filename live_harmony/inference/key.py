"""Key detection - Infer the tonal center from recent chords.

Implements history-based key detection with:
- A bounded, recency-ordered chord history
- Diatonic containment scoring (a chord fits a key when every one of its
  pitch classes belongs to the key's scale)
- Geometric recency weighting
- A deterministic tie-break chain (tonic support, scale order, root)
- Relative and parallel key helpers
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Optional, Sequence, Tuple

import numpy as np

from ..core import PITCH_NAMES, SCALE_FORMULAS, pitch_class_index
from ..core.constants import DEFAULT_HISTORY_SIZE, DEFAULT_RECENCY_DECAY, DEFAULT_KEY_SCALES
from .chords import parse_chord_name, diatonic_triads, split_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeyCandidate:
    """A candidate key with its fit score."""
    root: str
    scale: str
    score: float

    @property
    def name(self) -> str:
        return f"{self.root} {self.scale}"


@dataclass
class KeyDetectorConfig:
    """Configuration for key detection.

    Attributes:
        history_size: Maximum number of chords remembered (default: 16)
        recency_decay: Weight multiplier per step of age; the newest chord
            weighs 1.0, the one before it recency_decay, and so on. 1.0 gives
            a plain count (default: 0.9)
        scales: Scales tried on each of the 12 roots, in tie-break order
            (default: ("Major", "Minor"))
    """

    history_size: int = DEFAULT_HISTORY_SIZE
    recency_decay: float = DEFAULT_RECENCY_DECAY
    scales: Tuple[str, ...] = DEFAULT_KEY_SCALES

    def __post_init__(self):
        if self.history_size < 1:
            raise ValueError(f"history_size must be positive, got {self.history_size}")
        if not 0.0 < self.recency_decay <= 1.0:
            raise ValueError(f"recency_decay must be in (0, 1], got {self.recency_decay}")
        self.scales = tuple(self.scales)
        if not self.scales:
            raise ValueError("At least one scale is required")
        unknown = [s for s in self.scales if s not in SCALE_FORMULAS]
        if unknown:
            raise ValueError(f"Unknown scales: {unknown}")


def scale_mask(root_pc: int, scale: str) -> np.ndarray:
    """
    Get a 12-element boolean mask of the pitch classes in a scale.

    Args:
        root_pc: Scale root as pitch class (0-11)
        scale: Scale name from the scale dictionary

    Returns:
        Boolean array indexed by pitch class
    """
    mask = np.zeros(12, dtype=bool)
    mask[list(SCALE_FORMULAS[scale])] = True
    return np.roll(mask, root_pc)


def get_scale_notes(root: str, scale: str) -> List[int]:
    """
    Get the pitch classes (0-11) that belong to a scale.

    Args:
        root: Root note (e.g., "C", "G")
        scale: Scale name (e.g., "Major", "Dorian")

    Returns:
        Pitch classes in scale-degree order, empty if unknown
    """
    root_pc = pitch_class_index(root)
    offsets = SCALE_FORMULAS.get(scale)
    if root_pc is None or offsets is None:
        return []
    return [(root_pc + interval) % 12 for interval in offsets]


def parse_key_name(name) -> Optional[Tuple[int, str]]:
    """Parse "<Root> <Scale>" into (root pitch class, scale), or None."""
    parsed = split_name(name)
    if parsed is None or parsed[1] not in SCALE_FORMULAS:
        return None
    return parsed


def relative_key(key) -> Optional[str]:
    """
    Get the relative major/minor key name.

    Relative minor is 3 semitones down from major.
    Relative major is 3 semitones up from minor.

    Args:
        key: Key name such as "C Major"

    Returns:
        Key name such as "A Minor", or None for other scales
    """
    parsed = parse_key_name(key)
    if parsed is None:
        return None
    root_pc, scale = parsed

    if scale == "Major":
        return f"{PITCH_NAMES[(root_pc - 3) % 12]} Minor"
    elif scale == "Minor":
        return f"{PITCH_NAMES[(root_pc + 3) % 12]} Major"

    return None


def parallel_key(key) -> Optional[str]:
    """Get the parallel major/minor key name (same root, other mode)."""
    parsed = parse_key_name(key)
    if parsed is None:
        return None
    root_pc, scale = parsed

    if scale == "Major":
        return f"{PITCH_NAMES[root_pc]} Minor"
    elif scale == "Minor":
        return f"{PITCH_NAMES[root_pc]} Major"

    return None


class KeyDetector:
    """Detect the most likely keys from a bounded chord history.

    Each instance owns its own history; there is no shared global state.
    """

    def __init__(
        self,
        history_size: int = DEFAULT_HISTORY_SIZE,
        recency_decay: float = DEFAULT_RECENCY_DECAY,
        scales: Sequence[str] = DEFAULT_KEY_SCALES,
        config: Optional[KeyDetectorConfig] = None,
    ):
        """
        Initialize KeyDetector.

        Args:
            history_size: Maximum number of chords remembered
            recency_decay: Per-step weight decay for older chords
            scales: Scales tried on each root
            config: Optional KeyDetectorConfig (overrides the other arguments)
        """
        if config is not None:
            self.config = config
        else:
            self.config = KeyDetectorConfig(
                history_size=history_size,
                recency_decay=recency_decay,
                scales=tuple(scales),
            )

        self._history: Deque[str] = deque(maxlen=self.config.history_size)

        # One row per (scale, root) candidate, scale-major like the tie-break
        self._candidates = [
            (scale, root_pc)
            for scale in self.config.scales
            for root_pc in range(12)
        ]
        self._key_masks = np.array([scale_mask(root_pc, scale) for scale, root_pc in self._candidates])
        self._tonic_names = [self._tonic_triad_name(root_pc, scale) for scale, root_pc in self._candidates]

    @property
    def history(self) -> Tuple[str, ...]:
        """Chord history, oldest first."""
        return tuple(self._history)

    def __len__(self) -> int:
        return len(self._history)

    def add_chord(self, name) -> bool:
        """
        Append a chord to the history.

        Args:
            name: Chord name such as "G Dom7"; unknown names are ignored

        Returns:
            True if the chord was added
        """
        chord = parse_chord_name(name)
        if chord is None:
            logger.debug("Ignoring unresolvable chord: %r", name)
            return False

        if len(self._history) == self._history.maxlen:
            logger.debug("Chord history full, evicting %s", self._history[0])
        self._history.append(chord.name)
        return True

    def clear(self) -> None:
        """Forget all chords."""
        self._history.clear()

    def detect(self) -> List[KeyCandidate]:
        """
        Rank candidate keys by how well they contain the chord history.

        Score is the sum of recency weights of the history chords whose
        pitch classes are all in the key. Ties are broken by tonic support
        (weight of history chords equal to the key's own degree-I triad),
        then by scale order in the config, then by root pitch class.

        Returns:
            Candidates with score > 0, best first; empty if nothing fits
        """
        if not self._history:
            return []

        chords = [parse_chord_name(name) for name in self._history]
        weights = self._recency_weights(len(chords))

        # (n_chords, 12) membership of each history chord
        chord_masks = np.zeros((len(chords), 12), dtype=bool)
        for i, chord in enumerate(chords):
            chord_masks[i, list(chord.pitch_classes)] = True

        # fits[k, c]: chord c is a subset of key k
        outside = chord_masks[np.newaxis, :, :] & ~self._key_masks[:, np.newaxis, :]
        fits = ~outside.any(axis=2)
        scores = fits.astype(float) @ weights

        names = [chord.name for chord in chords]
        ranked = []
        for index, (scale, root_pc) in enumerate(self._candidates):
            score = round(float(scores[index]), 6)
            if score <= 0:
                continue
            tonic_name = self._tonic_names[index]
            tonic_support = round(
                float(sum(w for name, w in zip(names, weights) if name == tonic_name)), 6
            )
            ranked.append((
                -score,
                -tonic_support,
                self.config.scales.index(scale),
                root_pc,
                KeyCandidate(root=PITCH_NAMES[root_pc], scale=scale, score=score),
            ))

        ranked.sort(key=lambda item: item[:4])
        return [item[4] for item in ranked]

    def best(self) -> Optional[KeyCandidate]:
        """Get the top key candidate, or None."""
        candidates = self.detect()
        return candidates[0] if candidates else None

    def _recency_weights(self, count: int) -> np.ndarray:
        # Oldest first; the newest chord has age 0 and weight 1.0
        ages = np.arange(count - 1, -1, -1)
        return np.power(self.config.recency_decay, ages)

    @staticmethod
    def _tonic_triad_name(root_pc: int, scale: str) -> Optional[str]:
        triads = diatonic_triads(root_pc, scale)
        if triads:
            return triads[0].name
        # Pentatonic/blues scales: fall back to the plain major or minor triad
        third = 4 if 4 in SCALE_FORMULAS[scale] else 3
        quality = "Major" if third == 4 else "Minor"
        return f"{PITCH_NAMES[root_pc]} {quality}"
