"""Global constants for Live Harmony."""

# Pitch names
PITCH_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

# Enharmonic spellings accepted when parsing names, normalized to PITCH_NAMES
FLAT_ALIASES = {
    "Db": "C#",
    "Eb": "D#",
    "Gb": "F#",
    "Ab": "G#",
    "Bb": "A#",
    "Cb": "B",
    "Fb": "E",
    "E#": "F",
    "B#": "C",
}

# MIDI ranges
MIDI_MIN = 0
MIDI_MAX = 127
VELOCITY_MIN = 0
VELOCITY_MAX = 127
CHANNEL_MIN = 0
CHANNEL_MAX = 15

# Chord classification
MIN_CHORD_PITCH_CLASSES = 3

# Analysis defaults
DEFAULT_HISTORY_SIZE = 16
DEFAULT_RECENCY_DECAY = 0.9
DEFAULT_KEY_SCALES = ("Major", "Minor")
DEFAULT_DEBUG_LOG_SIZE = 20

# Event topics
NOTE_ON = "note-on"
NOTE_OFF = "note-off"
