# windsong_tools/tempo.py
from bisect import bisect_right
from dataclasses import dataclass

from windsong_tools.errors import UnsupportedTimingError

DEFAULT_TEMPO = 500000   # µs per quarter note (120 bpm)


@dataclass(frozen=True)
class TempoEvent:
    tick: int
    tempo: int   # µs per quarter note


def check_division(division: int) -> int:
    """
    Validate a header division value and return it as ticks per quarter note.

    A set high bit means SMPTE frames/ticks-per-frame timing, which this
    converter does not support.
    """
    division = int(division)
    if division & 0x8000 or division <= 0:
        raise UnsupportedTimingError(
            f"Unsupported timing format (division={division}); "
            "only metrical ticks-per-quarter-note timing is supported."
        )
    return division


class TempoTimeline:
    """
    Piecewise-constant tempo map for one file.

    Ticks before the first tempo change use `default_tempo`. Tempo events
    must be added in non-decreasing tick order; several events on the same
    tick leave the last one in effect.
    """

    def __init__(self, division: int, default_tempo: int = DEFAULT_TEMPO):
        self.division = check_division(division)
        if default_tempo <= 0:
            raise ValueError("Tempo must be positive.")
        self.default_tempo = default_tempo
        self._ticks = [0]
        self._tempos = [default_tempo]
        # _offsets[i] is the elapsed time at _ticks[i], in µs * division
        self._offsets = [0]

    @classmethod
    def from_events(cls, division, events, default_tempo=DEFAULT_TEMPO) -> "TempoTimeline":
        timeline = cls(division, default_tempo)
        for ev in sorted(events, key=lambda e: e.tick):
            timeline.add(ev.tick, ev.tempo)
        return timeline

    def add(self, tick: int, tempo: int):
        if tick < 0:
            raise ValueError(f"Negative tick {tick}.")
        if tempo <= 0:
            raise ValueError(f"Tempo must be positive (got {tempo}).")
        last_tick = self._ticks[-1]
        if tick < last_tick:
            raise ValueError(f"Tempo event at tick {tick} comes after tick {last_tick}.")

        if tick == last_tick:
            self._tempos[-1] = tempo
            return

        offset = self._offsets[-1] + (tick - last_tick) * self._tempos[-1]
        self._ticks.append(tick)
        self._tempos.append(tempo)
        self._offsets.append(offset)

    def tempo_at(self, tick: int) -> int:
        return self._tempos[bisect_right(self._ticks, tick) - 1]

    def ticks_to_us(self, tick: int) -> int:
        """Absolute time of `tick` in whole microseconds (floored)."""
        if tick < 0:
            raise ValueError(f"Negative tick {tick}.")
        i = bisect_right(self._ticks, tick) - 1
        scaled = self._offsets[i] + (tick - self._ticks[i]) * self._tempos[i]
        return scaled // self.division
