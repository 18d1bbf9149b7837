"""Live Harmony - Real-time chord, key and suggestion analysis for MIDI input.

Architecture Layers:
    1. core/       - Note events, constants, chord and scale dictionaries
    2. tracking/   - Live note state and note-on/note-off notifications
    3. inference/  - Musical understanding (chords, key, suggestions)
    4. input/      - Note events from live MIDI ports and MIDI files
    5. session.py  - Event-by-event analysis wiring
    6. cli.py      - Command-line presentation
"""

__version__ = "0.1.0"

# Core types
from .core import NoteEvent, NoteKind, midi_to_note_name

# Tracking layer
from .tracking import EventEmitter, NoteStateTracker

# Inference layer
from .inference import (
    detect_chord,
    KeyDetector,
    KeyCandidate,
    Suggestion,
    suggest_diatonic_chords,
    suggest_scales,
    suggest_extensions,
)

# Input layer
from .input import MidiSource, MidiSourceError, MidiFileReader

# Session
from .session import AnalysisSession, SessionConfig, SessionSnapshot

__all__ = [
    # Core
    "NoteEvent",
    "NoteKind",
    "midi_to_note_name",
    # Tracking
    "EventEmitter",
    "NoteStateTracker",
    # Inference
    "detect_chord",
    "KeyDetector",
    "KeyCandidate",
    "Suggestion",
    "suggest_diatonic_chords",
    "suggest_scales",
    "suggest_extensions",
    # Input
    "MidiSource",
    "MidiSourceError",
    "MidiFileReader",
    # Session
    "AnalysisSession",
    "SessionConfig",
    "SessionSnapshot",
]
