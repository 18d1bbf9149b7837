"""Analysis session - wire note tracking, chord, key and suggestions together.

A session owns one tracker and one key detector. Note events trigger a
re-analysis of the active notes, right away or once a debounce window has
passed; chords reached by striking notes feed the key history.
"""

import logging
import time
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Deque, List, Optional

from .core import NoteEvent, NOTE_ON, NOTE_OFF, midi_to_note_name
from .core.constants import DEFAULT_DEBUG_LOG_SIZE
from .inference import (
    KeyDetector,
    KeyDetectorConfig,
    KeyCandidate,
    Suggestion,
    detect_chord,
    suggest_diatonic_chords,
    suggest_scales,
    suggest_extensions,
)
from .tracking import NoteStateTracker

logger = logging.getLogger(__name__)


@dataclass
class SessionConfig:
    """Configuration for an analysis session.

    Attributes:
        key_detector: Key detection settings
        dedupe_consecutive: Only add a chord to the key history when it
            differs from the last recognized chord (default: True)
        debug_log_size: Number of debug log lines kept (default: 20)
        auto_analyze: Re-analyze on every note event; callers that batch
            events turn this off and call analyze() themselves (default: True)
        debounce: Seconds of input quiet before an automatic analysis runs;
            0 analyzes on every event. Debounced sessions need update()
            called from the polling loop (default: 0.0)
        record_releases: Add chords left over after a note-off to the key
            history (default: False)
    """

    key_detector: KeyDetectorConfig = field(default_factory=KeyDetectorConfig)
    dedupe_consecutive: bool = True
    debug_log_size: int = DEFAULT_DEBUG_LOG_SIZE
    auto_analyze: bool = True
    debounce: float = 0.0
    record_releases: bool = False


@dataclass
class SessionSnapshot:
    """Everything the presentation layer needs at one point in time."""

    active_notes: List[int]
    chord: Optional[str]
    keys: List[KeyCandidate] = field(default_factory=list)
    diatonic: List[Suggestion] = field(default_factory=list)
    scales: List[Suggestion] = field(default_factory=list)
    extensions: List[Suggestion] = field(default_factory=list)

    @property
    def note_names(self) -> List[str]:
        """Get scientific names of the active notes (e.g., ['C4', 'E4'])."""
        return [midi_to_note_name(p) for p in self.active_notes]

    @property
    def key(self) -> Optional[KeyCandidate]:
        """Get the best key candidate."""
        return self.keys[0] if self.keys else None


class AnalysisSession:
    """Live harmonic analysis over a stream of note events.

    Chords reached only by releasing notes (a seventh chord losing its root,
    say) are shown as the current chord but are not added to the key
    history unless record_releases is set.
    """

    def __init__(
        self,
        config: Optional[SessionConfig] = None,
        tracker: Optional[NoteStateTracker] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize AnalysisSession.

        Args:
            config: Optional SessionConfig
            tracker: Optional tracker to analyze (a new one by default)
            clock: Time source for the debounce window, in seconds
        """
        self.config = config if config is not None else SessionConfig()
        self.tracker = tracker if tracker is not None else NoteStateTracker()
        self.key_detector = KeyDetector(config=self.config.key_detector)
        self._clock = clock

        self.current_chord: Optional[str] = None
        self.last_recognized: Optional[str] = None
        self._log: Deque[str] = deque(maxlen=self.config.debug_log_size)
        # Note-on seen since the last analysis
        self._struck = False
        # Time of the last event still waiting for a debounced analysis
        self._pending_since: Optional[float] = None

        self.tracker.on(NOTE_ON, self._on_note)
        self.tracker.on(NOTE_OFF, self._on_note)

    def handle(self, event: NoteEvent) -> bool:
        """Feed one note event through the tracker (and so through analysis)."""
        return self.tracker.handle(event)

    def _on_note(self, event: NoteEvent) -> None:
        if event.is_on:
            self._struck = True
            self.log(f"Note On: {event.pitch_name} ({event.pitch}) Vel:{event.velocity}")
        else:
            self.log(f"Note Off: {event.pitch_name} ({event.pitch})")

        if not self.config.auto_analyze:
            return
        if self.config.debounce > 0:
            self._pending_since = self._clock()
        else:
            self.analyze()

    def update(self) -> bool:
        """
        Run a pending debounced analysis once input has been quiet long enough.

        Returns:
            True if an analysis ran
        """
        if self._pending_since is None:
            return False
        if self._clock() - self._pending_since < self.config.debounce:
            return False
        self.analyze()
        return True

    def analyze(self) -> Optional[str]:
        """
        Classify the active notes and update the key history.

        Returns:
            Current chord name, or None
        """
        struck = self._struck
        self._struck = False
        self._pending_since = None

        chord = detect_chord(self.tracker.get_active_notes())
        self.current_chord = chord

        if chord is None:
            return None

        if not struck and not self.config.record_releases:
            logger.debug("Not recording %s, reached by release", chord)
            return chord

        if not self.config.dedupe_consecutive or chord != self.last_recognized:
            self.key_detector.add_chord(chord)
            self.last_recognized = chord
            logger.debug("Recognized %s", chord)

        return chord

    def snapshot(self) -> SessionSnapshot:
        """Build the current chord, key candidates and suggestions."""
        keys = self.key_detector.detect()
        chord = self.current_chord

        diatonic: List[Suggestion] = []
        scales: List[Suggestion] = []
        if keys:
            diatonic = suggest_diatonic_chords(keys[0].name, chord)
            scales = suggest_scales(keys[0].name, chord)

        return SessionSnapshot(
            active_notes=self.tracker.get_active_notes(),
            chord=chord,
            keys=keys,
            diatonic=diatonic,
            scales=scales,
            extensions=suggest_extensions(chord) if chord else [],
        )

    def log(self, message: str) -> None:
        """Add a timestamped line to the debug log (most recent first)."""
        self._log.appendleft(f"[{datetime.now():%H:%M:%S}] {message}")

    @property
    def debug_log(self) -> List[str]:
        """Debug log lines, most recent first."""
        return list(self._log)
