"""Core types, constants and interval dictionaries for Live Harmony."""

from .note import NoteEvent, NoteKind, midi_to_note_name, pitch_class_index, is_midi_int
from .constants import (
    PITCH_NAMES,
    MIDI_MIN,
    MIDI_MAX,
    NOTE_ON,
    NOTE_OFF,
    DEFAULT_HISTORY_SIZE,
)
from .dictionaries import CHORD_FORMULAS, SCALE_FORMULAS, EXTENSIONS, validate_formulas

__all__ = [
    "NoteEvent",
    "NoteKind",
    "midi_to_note_name",
    "pitch_class_index",
    "is_midi_int",
    "PITCH_NAMES",
    "MIDI_MIN",
    "MIDI_MAX",
    "NOTE_ON",
    "NOTE_OFF",
    "DEFAULT_HISTORY_SIZE",
    "CHORD_FORMULAS",
    "SCALE_FORMULAS",
    "EXTENSIONS",
    "validate_formulas",
]
