"""MIDI file loading - replay a file as a time-ordered note event stream."""

import pretty_midi
from pathlib import Path
from typing import List, Tuple

from ..core import NoteEvent, NoteKind

TimedEvent = Tuple[float, NoteEvent]


class MidiFileReader:
    """Turn a MIDI file into note-on/note-off events."""

    SUPPORTED_FORMATS = {".mid", ".midi"}

    def __init__(self, include_drums: bool = False):
        """
        Initialize MidiFileReader.

        Args:
            include_drums: Keep percussion instruments if True
        """
        self.include_drums = include_drums

    def load(self, path: str) -> pretty_midi.PrettyMIDI:
        """
        Load a MIDI file.

        Args:
            path: Path to MIDI file

        Returns:
            Parsed PrettyMIDI object

        Raises:
            ValueError: If file format not supported
            FileNotFoundError: If file doesn't exist
        """
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"MIDI file not found: {path}")

        if path.suffix.lower() not in self.SUPPORTED_FORMATS:
            raise ValueError(
                f"Unsupported format: {path.suffix}. "
                f"Supported: {self.SUPPORTED_FORMATS}"
            )

        return pretty_midi.PrettyMIDI(str(path))

    def events_from_midi(self, midi: pretty_midi.PrettyMIDI) -> List[TimedEvent]:
        """
        Flatten a PrettyMIDI object into timed note events.

        Each instrument's index (mod 16) is used as its channel. Events are
        sorted by time; at equal times note-offs come before note-ons so a
        repeated pitch is released before it is struck again.

        Returns:
            List of (time in seconds, NoteEvent)
        """
        timed = []
        for index, instrument in enumerate(midi.instruments):
            if instrument.is_drum and not self.include_drums:
                continue
            channel = index % 16
            for note in instrument.notes:
                timed.append((note.start, 1, NoteEvent(NoteKind.ON, note.pitch, note.velocity, channel).normalized()))
                timed.append((note.end, 0, NoteEvent(NoteKind.OFF, note.pitch, 0, channel)))

        timed.sort(key=lambda item: (item[0], item[1], item[2].pitch))
        return [(time, event) for time, _, event in timed]

    def read(self, path: str) -> List[TimedEvent]:
        """Load a MIDI file and return its timed note events."""
        return self.events_from_midi(self.load(path))

    def get_duration(self, midi: pretty_midi.PrettyMIDI) -> float:
        """Get duration in seconds."""
        return midi.get_end_time()
