# windsong_tools/mapping.py
import logging
from typing import Optional

from windsong_tools.black_keys import resolve_black_key
from windsong_tools.config import BlackKeyMode, ConvertConfig, RangeMode
from windsong_tools.keymap import DEFAULT_KEY_TABLE, KeyRangeTable

logger = logging.getLogger(__name__)

OCTAVE = 12


def fold_octave(val: int, bound: int) -> int:
    """
    Shift `val` by whole octaves toward `bound` until it reaches or
    crosses it.

    36 folds to 48 for bound 48, 37 folds to 49, 95 folds to 83 for
    bound 83. Works on signed ints; callers reject negative results.
    """
    dist = abs(val - bound)
    steps = -(-dist // OCTAVE)   # ceil
    if val > bound:
        return val - steps * OCTAVE
    return val + steps * OCTAVE


def adjust_pitch(pitch: int,
                 transpose: int = 0,
                 below_range_mode=RangeMode.FOLD,
                 above_range_mode=RangeMode.FOLD,
                 black_key_mode=BlackKeyMode.CONTEXTUAL,
                 table: KeyRangeTable = DEFAULT_KEY_TABLE) -> Optional[int]:
    """
    Move a MIDI pitch onto the instrument.

    Returns the resolved pitch, or None when the note is skipped. The
    returned pitch is not guaranteed to be in the table (IDENTITY keeps
    black keys as they are).
    """
    below = RangeMode.from_value(below_range_mode)
    above = RangeMode.from_value(above_range_mode)

    pitch = int(pitch) + int(transpose) * OCTAVE
    key_min = table.min()
    key_max = table.max()

    if pitch < key_min:
        if below is RangeMode.FOLD:
            pitch = fold_octave(pitch, key_min)
        elif below is RangeMode.CLAMP:
            pitch = key_min
        else:
            return None
    elif pitch > key_max:
        if above is RangeMode.FOLD:
            pitch = fold_octave(pitch, key_max)
        elif above is RangeMode.CLAMP:
            pitch = key_max
        else:
            return None
    elif pitch in table:
        return pitch

    if pitch < 0:
        return None

    return resolve_black_key(pitch, black_key_mode, table)


def map_pitch(pitch: int,
              transpose: int = 0,
              below_range_mode=RangeMode.FOLD,
              above_range_mode=RangeMode.FOLD,
              black_key_mode=BlackKeyMode.CONTEXTUAL,
              table: KeyRangeTable = DEFAULT_KEY_TABLE) -> Optional[str]:
    """
    Map a MIDI pitch to a key symbol, or None if the note should be skipped.
    """
    resolved = adjust_pitch(pitch, transpose, below_range_mode,
                            above_range_mode, black_key_mode, table)
    if resolved is None:
        return None
    return table.key_for(resolved)


class PitchMapper:
    """map_pitch bound to one ConvertConfig."""

    def __init__(self, config: ConvertConfig = ConvertConfig()):
        self.config = config

    def __call__(self, pitch: int) -> Optional[str]:
        cfg = self.config
        key = map_pitch(pitch, cfg.transpose, cfg.below_range_mode,
                        cfg.above_range_mode, cfg.black_key_mode, cfg.key_table)
        if key is None:
            logger.debug("pitch %d skipped", pitch)
        return key
