# windsong_tools/config.py
from dataclasses import dataclass, field
from enum import Enum

from windsong_tools.keymap import DEFAULT_KEY_TABLE, KeyRangeTable


class RangeMode(Enum):
    """What to do with a pitch that falls outside the instrument range."""
    FOLD = 0    # shift by whole octaves until playable
    CLAMP = 1   # play the lowest / highest key instead
    SKIP = -1   # drop the note

    @classmethod
    def from_value(cls, value) -> "RangeMode":
        if isinstance(value, cls):
            return value
        if value == 0:
            return cls.FOLD
        if value == 1:
            return cls.CLAMP
        return cls.SKIP


class BlackKeyMode(Enum):
    """How a black (sharp/flat) pitch is replaced on a diatonic instrument."""
    MUTE = 0
    ROUND_DOWN = 1
    ROUND_UP = 2
    CONTEXTUAL = 3
    IDENTITY = -1

    @classmethod
    def from_value(cls, value) -> "BlackKeyMode":
        if isinstance(value, cls):
            return value
        for mode in cls:
            if mode is not cls.IDENTITY and mode.value == value:
                return mode
        return cls.IDENTITY


@dataclass(frozen=True)
class ConvertConfig:
    transpose: int = 0   # whole octaves
    below_range_mode: RangeMode = RangeMode.FOLD
    above_range_mode: RangeMode = RangeMode.FOLD
    black_key_mode: BlackKeyMode = BlackKeyMode.CONTEXTUAL
    key_table: KeyRangeTable = field(default=DEFAULT_KEY_TABLE)

    @classmethod
    def from_values(cls, transpose=0, below=0, above=0, black=3, key_table=None) -> "ConvertConfig":
        """Build a config from the raw integer options the CLI/GUI expose."""
        return cls(
            transpose=int(transpose),
            below_range_mode=RangeMode.from_value(below),
            above_range_mode=RangeMode.from_value(above),
            black_key_mode=BlackKeyMode.from_value(black),
            key_table=key_table if key_table is not None else DEFAULT_KEY_TABLE,
        )
