# windsong_tools/errors.py


class WindsongError(ValueError):
    """Base class for every input problem the converter reports."""


class UnsupportedTimingError(WindsongError):
    """The MIDI file uses SMPTE (non-metrical) timing."""


class MidiDecodeError(WindsongError):
    """The MIDI file (or its midicsv rows) could not be decoded."""


class ScriptFormatError(WindsongError):
    """A play script could not be parsed."""
