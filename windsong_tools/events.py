# windsong_tools/events.py
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class EventKind(Enum):
    NOTE_ON = "Note_on_c"
    NOTE_OFF = "Note_off_c"
    TEMPO = "Tempo"
    OTHER = "other"


@dataclass(frozen=True)
class TrackEvent:
    """One decoded event of a track, positioned at an absolute tick."""
    tick: int
    kind: EventKind
    channel: Optional[int] = None
    pitch: Optional[int] = None
    velocity: Optional[int] = None
    tempo: Optional[int] = None   # µs per quarter note, Tempo events only
    type_name: str = ""           # midicsv record type


@dataclass(frozen=True)
class MergedEvent:
    tick: int
    track: int
    event: TrackEvent

    @property
    def is_note_on(self) -> bool:
        return self.event.kind is EventKind.NOTE_ON
