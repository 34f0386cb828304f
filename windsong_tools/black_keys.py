# windsong_tools/black_keys.py

from typing import Optional

from windsong_tools.config import BlackKeyMode
from windsong_tools.keymap import DEFAULT_KEY_TABLE, KeyRangeTable

OCTAVE = 12


def is_black(pitch: int, table: KeyRangeTable = DEFAULT_KEY_TABLE) -> bool:
    """In the table's range but not one of its keys."""
    return table.in_range(pitch) and pitch not in table


def octave_index(pitch: int, table: KeyRangeTable = DEFAULT_KEY_TABLE) -> int:
    """0 for the table's lowest octave, 1 for the next, and so on."""
    return (pitch - table.min()) // OCTAVE


def resolve_black_key(pitch: int, mode, table: KeyRangeTable = DEFAULT_KEY_TABLE) -> Optional[int]:
    """
    Replace a black pitch with a playable one.

    Returns the substitute pitch, or None when the note should not be
    played. Pitches that are keys of `table`, or outside its range, come
    back unchanged, so every mode is a no-op on white keys.

    Modes:
      MUTE        -> None
      ROUND_DOWN  -> previous semitone
      ROUND_UP    -> next semitone
      CONTEXTUAL  -> None in the lowest octave, next semitone above it
      IDENTITY    -> unchanged (any unknown mode value lands here)
    """
    mode = BlackKeyMode.from_value(mode)

    if not is_black(pitch, table):
        return pitch

    if mode is BlackKeyMode.MUTE:
        return None
    if mode is BlackKeyMode.ROUND_DOWN:
        return pitch - 1
    if mode is BlackKeyMode.ROUND_UP:
        return pitch + 1
    if mode is BlackKeyMode.CONTEXTUAL:
        if octave_index(pitch, table) == 0:
            return None
        return pitch + 1
    return pitch
