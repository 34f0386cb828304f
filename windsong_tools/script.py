# windsong_tools/script.py
#
# Play script text format:
#
#     " <delta_us> <keys> <delta_us> <keys> ..."
#
# <keys> is a comma-separated chord of key symbols, or "0" for a record
# that only carries time.

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Tuple

from windsong_tools.errors import ScriptFormatError
from windsong_tools.events import MergedEvent
from windsong_tools.keymap import DEFAULT_KEY_TABLE, KeyRangeTable
from windsong_tools.tempo import TempoTimeline

logger = logging.getLogger(__name__)

EMPTY_CHORD = "0"


@dataclass(frozen=True)
class ScriptRecord:
    delta_us: int
    keys: Tuple[str, ...] = ()


class _OpenRecord:
    def __init__(self, delta_us):
        self.delta_us = delta_us
        self.keys = []

    def add(self, key):
        if key is not None and key not in self.keys:
            self.keys.append(key)

    def close(self):
        return ScriptRecord(self.delta_us, tuple(self.keys))


def emit_records(merged: Iterable[MergedEvent],
                 timeline: TempoTimeline,
                 mapper: Callable[[int], Optional[str]]) -> List[ScriptRecord]:
    """
    Group note-on events into timed chords.

    Every note-on advances the timing state, even when `mapper` drops its
    pitch, so a chord of dropped notes becomes an empty record rather than
    vanishing and shifting the deltas after it.
    """
    records = []
    current = None
    prev_us = 0

    for item in merged:
        if not item.is_note_on:
            continue

        now_us = timeline.ticks_to_us(item.tick)
        delta = now_us - prev_us
        key = mapper(item.event.pitch)

        if delta == 0 and current is not None:
            current.add(key)
            continue

        if current is not None:
            records.append(current.close())
        current = _OpenRecord(delta)
        current.add(key)
        prev_us = now_us

    if current is not None:
        records.append(current.close())
    return records


def format_script(records: Iterable[ScriptRecord]) -> str:
    parts = []
    for rec in records:
        keys = ",".join(rec.keys) if rec.keys else EMPTY_CHORD
        parts.append(f" {rec.delta_us} {keys}")
    return "".join(parts)


def parse_script(text: str, table: KeyRangeTable = DEFAULT_KEY_TABLE) -> List[ScriptRecord]:
    tokens = text.split()
    if len(tokens) % 2:
        raise ScriptFormatError(f"Script has an odd number of tokens ({len(tokens)}).")

    records = []
    for i in range(0, len(tokens), 2):
        delta_tok, keys_tok = tokens[i], tokens[i + 1]
        try:
            delta = int(delta_tok)
        except ValueError:
            raise ScriptFormatError(f"Bad delta {delta_tok!r} at token {i}.") from None
        if delta < 0:
            raise ScriptFormatError(f"Negative delta {delta} at token {i}.")

        keys = []
        for sym in keys_tok.split(","):
            if sym in ("", EMPTY_CHORD):
                continue
            if table.pitch_for(sym) is None:
                raise ScriptFormatError(f"Unknown key {sym!r} at token {i + 1}.")
            if sym not in keys:
                keys.append(sym)
        records.append(ScriptRecord(delta, tuple(keys)))
    return records


def write_script(records, script_path: str):
    records = list(records)
    text = format_script(records)
    with open(script_path, "w", encoding="utf-8") as f:
        f.write(text)
    logger.debug("wrote %d records to %s", len(records), script_path)


def read_script(script_path: str, table: KeyRangeTable = DEFAULT_KEY_TABLE) -> List[ScriptRecord]:
    with open(script_path, "r", encoding="utf-8") as f:
        return parse_script(f.read(), table)
