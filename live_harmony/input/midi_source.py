"""Live MIDI input - discover ports and feed decoded note events to a tracker."""

import logging
from typing import Iterable, List, Optional

import mido

from ..core import NoteEvent, NoteKind
from ..tracking import NoteStateTracker

logger = logging.getLogger(__name__)

# Errors raised by mido backends when ports are missing or unavailable
_BACKEND_ERRORS = (OSError, ImportError, RuntimeError)


class MidiSourceError(Exception):
    """Raised when MIDI ports cannot be listed or opened."""


class MidiSource:
    """Read note events from a live MIDI input port.

    The port is polled from the caller's loop, so every message is handled
    on the caller's thread. Opening, refreshing or closing ports never
    touches the tracker: notes held across a reconnect stay active.
    """

    def __init__(self, tracker: NoteStateTracker):
        """
        Initialize MidiSource.

        Args:
            tracker: Tracker that receives decoded note events
        """
        self.tracker = tracker
        self.port = None
        self.port_name: Optional[str] = None

    @staticmethod
    def list_inputs() -> List[str]:
        """
        List available MIDI input port names.

        Raises:
            MidiSourceError: If the MIDI backend is unavailable
        """
        try:
            return list(mido.get_input_names())
        except _BACKEND_ERRORS as e:
            raise MidiSourceError(f"Could not list MIDI ports: {e}") from e

    def open(self, name: Optional[str] = None) -> str:
        """
        Open an input port.

        Args:
            name: Port name; the first available port when None

        Returns:
            Name of the opened port

        Raises:
            MidiSourceError: If no port is available or it cannot be opened
        """
        available = self.list_inputs()
        if not available:
            raise MidiSourceError("No MIDI input ports found")

        if name is None:
            name = available[0]
            logger.info("No MIDI port specified, using first available: '%s'", name)
        elif name not in available:
            raise MidiSourceError(
                f"MIDI port '{name}' not found. Available: {', '.join(available)}"
            )

        self._close_port()
        try:
            self.port = mido.open_input(name)
        except _BACKEND_ERRORS as e:
            raise MidiSourceError(f"Failed to open MIDI port '{name}': {e}") from e

        self.port_name = name
        logger.info("Opened MIDI port: '%s'", name)
        return name

    def refresh(self) -> List[str]:
        """
        Re-enumerate ports and follow the selected one.

        An open port that is still listed is left alone so pending messages
        are not lost. A port that disappeared is closed, and reopened once it
        is listed again.

        Returns:
            Available port names
        """
        available = self.list_inputs()
        logger.debug("Found %d MIDI input(s)", len(available))

        if self.port_name is not None:
            if self.port_name not in available:
                if self.port is not None:
                    logger.warning("MIDI port '%s' disappeared", self.port_name)
                    self._close_port()
            elif self.port is None:
                logger.info("MIDI port '%s' is back, reopening", self.port_name)
                self.open(self.port_name)

        return available

    @property
    def is_open(self) -> bool:
        return self.port is not None

    @staticmethod
    def decode(message) -> Optional[NoteEvent]:
        """
        Decode a mido message into a normalized note event.

        Returns:
            NoteEvent for note_on/note_off messages, None for anything else
        """
        msg_type = getattr(message, "type", None)
        if msg_type == "note_on":
            kind = NoteKind.ON
        elif msg_type == "note_off":
            kind = NoteKind.OFF
        else:
            return None
        return NoteEvent(kind, message.note, message.velocity, message.channel).normalized()

    def dispatch(self, messages: Iterable) -> int:
        """
        Decode messages and feed note events to the tracker.

        Returns:
            Number of note events handled
        """
        handled = 0
        for message in messages:
            event = self.decode(message)
            if event is not None and self.tracker.handle(event):
                handled += 1
        return handled

    def poll(self) -> int:
        """Handle every message pending on the open port."""
        if self.port is None:
            return 0
        return self.dispatch(self.port.iter_pending())

    def close(self) -> None:
        """Close the port and forget the selection."""
        self._close_port()
        self.port_name = None

    def _close_port(self) -> None:
        if self.port is not None:
            try:
                self.port.close()
            except _BACKEND_ERRORS as e:
                logger.warning("Error closing MIDI port: %s", e)
            self.port = None

    def __enter__(self) -> "MidiSource":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
