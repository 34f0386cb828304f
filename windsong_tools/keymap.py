# windsong_tools/keymap.py

# The instrument has three diatonic rows: 48–59 (low), 60–71 (medium), 72–83 (high).

import json
from bisect import bisect_left
from typing import Dict, Iterator, Optional, Tuple

BASE_LOW  = 48              # low octave C
BASE_MED  = BASE_LOW + 12   # 60
BASE_HIGH = BASE_LOW + 24   # 72

PITCH_TO_KEY = {
    # ---------- Low octave (z–m row) ----------
    BASE_LOW + 0:   "z",    # do
    BASE_LOW + 2:   "x",    # re
    BASE_LOW + 4:   "c",    # mi
    BASE_LOW + 5:   "v",    # fa
    BASE_LOW + 7:   "b",    # so
    BASE_LOW + 9:   "n",    # la
    BASE_LOW + 11:  "m",    # ti

    # ---------- Medium octave (a–j row) ----------
    BASE_MED + 0:   "a",    # do
    BASE_MED + 2:   "s",    # re
    BASE_MED + 4:   "d",    # mi
    BASE_MED + 5:   "f",    # fa
    BASE_MED + 7:   "g",    # so
    BASE_MED + 9:   "h",    # la
    BASE_MED + 11:  "j",    # ti

    # ---------- High octave (q–u row) ----------
    BASE_HIGH + 0:  "q",    # do
    BASE_HIGH + 2:  "w",    # re
    BASE_HIGH + 4:  "e",    # mi
    BASE_HIGH + 5:  "r",    # fa
    BASE_HIGH + 7:  "t",    # so
    BASE_HIGH + 9:  "y",    # la
    BASE_HIGH + 11: "u",    # ti
}


class KeyRangeTable:
    """
    Fixed pitch → key-symbol table for the instrument.

    Entries are kept as a sorted tuple of pitches with a parallel tuple of
    symbols, so min/max are the first/last entries and lookups are a
    binary search.
    """

    def __init__(self, mapping: Dict[int, str]):
        if not mapping:
            raise ValueError("Key table must hold at least one key.")

        pitches = tuple(sorted(int(p) for p in mapping))
        symbols = tuple(mapping[p] for p in pitches)

        for p in pitches:
            if not 0 <= p <= 127:
                raise ValueError(f"Pitch {p} is outside the MIDI range 0–127.")
        for s in symbols:
            if not isinstance(s, str) or len(s) != 1 or s in (",", "0") or s.isspace():
                raise ValueError(f"Key symbol {s!r} must be a single printable character.")
        if len(set(symbols)) != len(symbols):
            raise ValueError("Key symbols must be unique.")

        self._pitches: Tuple[int, ...] = pitches
        self._symbols: Tuple[str, ...] = symbols
        self._by_symbol = {s: p for p, s in zip(pitches, symbols)}

    @classmethod
    def from_json(cls, path: str) -> "KeyRangeTable":
        """Load a {"<pitch>": "<symbol>"} object."""
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError("Key table file must contain a JSON object.")
        return cls({int(p): s for p, s in data.items()})

    def min(self) -> int:
        return self._pitches[0]

    def max(self) -> int:
        return self._pitches[-1]

    def in_range(self, pitch: int) -> bool:
        return self.min() <= pitch <= self.max()

    def is_white(self, pitch: int) -> bool:
        """True if the pitch is directly playable."""
        return self.key_for(pitch) is not None

    def key_for(self, pitch: int) -> Optional[str]:
        i = bisect_left(self._pitches, pitch)
        if i < len(self._pitches) and self._pitches[i] == pitch:
            return self._symbols[i]
        return None

    def pitch_for(self, symbol: str) -> Optional[int]:
        return self._by_symbol.get(symbol)

    def items(self) -> Iterator[Tuple[int, str]]:
        return iter(zip(self._pitches, self._symbols))

    def __len__(self):
        return len(self._pitches)

    def __contains__(self, pitch):
        return self.key_for(pitch) is not None

    def __repr__(self):
        return f"KeyRangeTable({self.min()}–{self.max()}, {len(self)} keys)"


DEFAULT_KEY_TABLE = KeyRangeTable(PITCH_TO_KEY)


def pitch_to_key(pitch: int) -> Optional[str]:
    """
    Map a MIDI pitch to the instrument key on the default table.

    Returns:
        key symbol like "q", or None if the pitch is not playable.
    """
    return DEFAULT_KEY_TABLE.key_for(pitch)
