"""Input layer - Note events from live MIDI ports and MIDI files."""

from .midi_source import MidiSource, MidiSourceError
from .midi_file import MidiFileReader

__all__ = [
    "MidiSource",
    "MidiSourceError",
    "MidiFileReader",
]
