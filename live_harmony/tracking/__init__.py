"""Tracking layer - live note state from a stream of note events."""

from .events import EventEmitter
from .tracker import NoteStateTracker

__all__ = [
    "EventEmitter",
    "NoteStateTracker",
]
