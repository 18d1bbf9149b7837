"""Note events - the fundamental unit of the live analysis stream."""

from dataclasses import dataclass, replace
from enum import Enum
from numbers import Integral
from typing import Optional

from .constants import (
    PITCH_NAMES,
    FLAT_ALIASES,
    MIDI_MIN,
    MIDI_MAX,
    VELOCITY_MIN,
    VELOCITY_MAX,
    CHANNEL_MIN,
    CHANNEL_MAX,
)


class NoteKind(Enum):
    """Kind of a note event."""
    ON = "on"
    OFF = "off"


@dataclass(frozen=True)
class NoteEvent:
    """Represents a single note-on or note-off event."""

    kind: NoteKind
    pitch: int  # MIDI pitch (0-127)
    velocity: int = 64  # MIDI velocity (0-127)
    channel: int = 0  # MIDI channel (0-15)

    @property
    def is_on(self) -> bool:
        return self.kind is NoteKind.ON

    @property
    def pitch_name(self) -> str:
        """Get note name (e.g., 'C4', 'A#3')."""
        return midi_to_note_name(self.pitch)

    @property
    def pitch_class(self) -> int:
        """Get pitch class (0-11, where 0=C)."""
        return self.pitch % 12

    @property
    def is_valid(self) -> bool:
        """Check that pitch, velocity and channel are within MIDI ranges."""
        return (
            is_midi_int(self.pitch, MIDI_MIN, MIDI_MAX)
            and is_midi_int(self.velocity, VELOCITY_MIN, VELOCITY_MAX)
            and is_midi_int(self.channel, CHANNEL_MIN, CHANNEL_MAX)
        )

    def normalized(self) -> "NoteEvent":
        """Return the event with note-on velocity 0 rewritten as note-off."""
        if self.kind is NoteKind.ON and self.velocity == 0:
            return replace(self, kind=NoteKind.OFF)
        return self

    @classmethod
    def on(cls, pitch: int, velocity: int = 64, channel: int = 0) -> "NoteEvent":
        return cls(NoteKind.ON, pitch, velocity, channel).normalized()

    @classmethod
    def off(cls, pitch: int, velocity: int = 0, channel: int = 0) -> "NoteEvent":
        return cls(NoteKind.OFF, pitch, velocity, channel)


def is_midi_int(value, low: int = MIDI_MIN, high: int = MIDI_MAX) -> bool:
    """Check that value is an integer (not a bool) within [low, high]."""
    if isinstance(value, bool) or not isinstance(value, Integral):
        return False
    return low <= value <= high


def midi_to_note_name(midi_number: int) -> str:
    """
    Convert a MIDI note number to scientific pitch notation.

    Middle C (MIDI 60) is C4 and MIDI 0 is C-1.

    Args:
        midi_number: MIDI note number (0-127)

    Returns:
        Note name such as "C4", or "Invalid" when out of range
    """
    if not is_midi_int(midi_number):
        return "Invalid"
    octave = (midi_number // 12) - 1
    return f"{PITCH_NAMES[midi_number % 12]}{octave}"


def pitch_class_index(name: str) -> Optional[int]:
    """Get the pitch class (0-11) for a root letter, accepting flat spellings."""
    if not isinstance(name, str):
        return None
    name = FLAT_ALIASES.get(name, name)
    if name in PITCH_NAMES:
        return PITCH_NAMES.index(name)
    return None
