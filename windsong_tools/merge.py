# windsong_tools/merge.py
import heapq
from typing import List, Sequence

from windsong_tools.errors import MidiDecodeError
from windsong_tools.events import MergedEvent, TrackEvent


def _tagged(track_index: int, events: Sequence[TrackEvent]):
    last_tick = 0
    for pos, ev in enumerate(events):
        if ev.tick < last_tick:
            raise MidiDecodeError(
                f"Track {track_index} is not in tick order "
                f"(event {pos} at tick {ev.tick} after tick {last_tick})."
            )
        last_tick = ev.tick
        yield (ev.tick, track_index, pos), MergedEvent(ev.tick, track_index, ev)


def merge_tracks(tracks: Sequence[Sequence[TrackEvent]]) -> List[MergedEvent]:
    """
    Merge per-track event lists into one list ordered by
    (tick, track index, position within the track).
    """
    streams = [_tagged(i, track) for i, track in enumerate(tracks)]
    return [merged for _, merged in heapq.merge(*streams, key=lambda item: item[0])]
