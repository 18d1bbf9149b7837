"""Note state tracking - the live set of sounding pitches."""

import logging
from typing import Dict, List, Optional

from ..core import NoteEvent, NoteKind, NOTE_ON, NOTE_OFF
from .events import EventEmitter

logger = logging.getLogger(__name__)


class NoteStateTracker:
    """Maintain the set of currently held pitches.

    Pitches are unique by MIDI number (C4 and C5 are both kept) and ordered
    by activation; re-activating a held pitch moves it to the end. The
    tracker knows nothing about chords or keys, and nothing outside of an
    explicit note-off removes a pitch, so held notes survive device
    reconnects.
    """

    def __init__(self, emitter: Optional[EventEmitter] = None):
        """
        Initialize NoteStateTracker.

        Args:
            emitter: Optional shared EventEmitter for note notifications
        """
        self.events = emitter if emitter is not None else EventEmitter()
        # dict keeps insertion order, value is the activating velocity
        self._active: Dict[int, int] = {}

    def on(self, topic: str, listener):
        """Subscribe to "note-on" or "note-off" notifications."""
        return self.events.on(topic, listener)

    def off(self, topic: str, listener) -> bool:
        return self.events.off(topic, listener)

    def handle(self, event: NoteEvent) -> bool:
        """
        Apply a note event to the active set and notify subscribers.

        Args:
            event: Note event; note-on with velocity 0 is treated as note-off

        Returns:
            True if the event was applied, False if it was malformed
        """
        if not isinstance(event, NoteEvent) or not event.is_valid:
            logger.debug("Ignoring malformed note event: %r", event)
            return False

        event = event.normalized()

        if event.kind is NoteKind.ON:
            # Re-activation moves the pitch to the end
            self._active.pop(event.pitch, None)
            self._active[event.pitch] = event.velocity
            self.events.emit(NOTE_ON, event)
        else:
            self._active.pop(event.pitch, None)
            self.events.emit(NOTE_OFF, event)

        return True

    def note_on(self, pitch: int, velocity: int = 64, channel: int = 0) -> bool:
        return self.handle(NoteEvent(NoteKind.ON, pitch, velocity, channel))

    def note_off(self, pitch: int, velocity: int = 0, channel: int = 0) -> bool:
        return self.handle(NoteEvent(NoteKind.OFF, pitch, velocity, channel))

    def get_active_notes(self) -> List[int]:
        """Get held pitches in activation order."""
        return list(self._active)

    def is_active(self, pitch: int) -> bool:
        return pitch in self._active

    def __len__(self) -> int:
        return len(self._active)
