# windsong_tools/io_midicsv.py
import logging
import os
from dataclasses import dataclass, field
from typing import Dict, List

import chardet
import py_midicsv as pm

from windsong_tools.errors import MidiDecodeError
from windsong_tools.events import EventKind, TrackEvent
from windsong_tools.tempo import TempoEvent, check_division

logger = logging.getLogger(__name__)

_KINDS = {kind.value: kind for kind in EventKind}


def detect_encoding(path):
    with open(path, "rb") as f:
        encoding_type = chardet.detect(f.read())["encoding"]
    return encoding_type or "utf-8"


def parse_midicsv_lines(lines):
    events = []
    for line in lines:
        raw = line.rstrip("\r\n")
        striped = raw.strip()

        if striped == "" or striped.startswith("#") or striped.startswith(";"):
            events.append({"raw_line": raw, "is_data": False})
            continue

        parts = [p.strip() for p in raw.split(",")]
        if len(parts) < 3:
            events.append({"raw_line": raw, "is_data": False})
            continue

        try:
            track = int(parts[0])
            time = int(parts[1])
        except ValueError as e:
            raise MidiDecodeError(f"Bad midicsv record: {raw!r}") from e

        events.append({
            "raw_line": raw,
            "is_data": True,
            "track": track,
            "time": time,
            "type": parts[2],
            "args": parts[3:]
        })
    return events


def load_midicsv(path):
    with open(path, "r", newline="", encoding=detect_encoding(path)) as f:
        return parse_midicsv_lines(f)


def write_midicsv(events, outpath):
    with open(outpath, "w", encoding="utf-8", newline="\n") as f:
        for ev in events:
            if not ev.get("is_data"):
                f.write(ev["raw_line"] + "\n")
                continue

            line = f"{ev['track']}, {ev['time']}, {ev['type']}"
            for a in ev["args"]:
                line += f", {a}"
            f.write(line + "\n")


def midi_to_csv_lines(midi_path):
    """Run the midicsv codec over a .mid file."""
    try:
        return pm.midi_to_csv(midi_path)
    except OSError:
        raise
    except Exception as e:
        raise MidiDecodeError(f"Could not decode MIDI file {midi_path}: {e}") from e


def _to_track_event(ev) -> TrackEvent:
    kind = _KINDS.get(ev["type"], EventKind.OTHER)
    args = ev["args"]

    try:
        if kind in (EventKind.NOTE_ON, EventKind.NOTE_OFF):
            # Note_on_c / Note_off_c: channel, pitch, velocity
            channel, pitch, velocity = int(args[0]), int(args[1]), int(args[2])
            # Zero-velocity Note_on is a Note_off in running-status files
            if kind is EventKind.NOTE_ON and velocity <= 0:
                kind = EventKind.NOTE_OFF
            return TrackEvent(ev["time"], kind, channel=channel, pitch=pitch,
                              velocity=velocity, type_name=ev["type"])
        if kind is EventKind.TEMPO:
            return TrackEvent(ev["time"], kind, tempo=int(args[0]), type_name=ev["type"])
    except (IndexError, ValueError) as e:
        raise MidiDecodeError(f"Malformed {ev['type']} record: {ev['raw_line']!r}") from e

    return TrackEvent(ev["time"], EventKind.OTHER, type_name=ev["type"])


@dataclass
class DecodedMidi:
    division: int
    tracks: List[List[TrackEvent]] = field(default_factory=list)
    track_numbers: List[int] = field(default_factory=list)

    def tempo_events(self):
        return [TempoEvent(ev.tick, ev.tempo)
                for track in self.tracks
                for ev in track
                if ev.kind is EventKind.TEMPO]

    def note_on_count(self):
        return sum(1 for track in self.tracks for ev in track if ev.kind is EventKind.NOTE_ON)


def decode_events(events) -> DecodedMidi:
    """
    Split parsed midicsv records into per-track event lists.

    Tracks are ordered by their midicsv track number; the track index used
    downstream is the position in that order.
    """
    division = None
    by_track: Dict[int, List[TrackEvent]] = {}

    for ev in events:
        if not ev.get("is_data"):
            continue

        if ev["type"] == "Header":
            try:
                division = int(ev["args"][2])
            except (IndexError, ValueError) as e:
                raise MidiDecodeError(f"Bad Header record: {ev['raw_line']!r}") from e
            continue

        if ev["track"] == 0:
            continue   # End_of_file

        by_track.setdefault(ev["track"], []).append(_to_track_event(ev))

    if division is None:
        raise MidiDecodeError("No Header record with division found in file.")

    division = check_division(division)
    numbers = sorted(by_track)
    logger.debug("decoded %d tracks, division=%d", len(numbers), division)
    return DecodedMidi(division, [by_track[n] for n in numbers], numbers)


def load_tracks(path) -> DecodedMidi:
    """Decode a .mid file, or a .csv written by midicsv, into tracks."""
    if os.path.splitext(path)[1].lower() == ".csv":
        events = load_midicsv(path)
    else:
        events = parse_midicsv_lines(midi_to_csv_lines(path))
    return decode_events(events)


def dump_tracks(midi_path, out_dir):
    """Write each track of a MIDI file as its own midicsv file, for reading."""
    events = parse_midicsv_lines(midi_to_csv_lines(midi_path))
    os.makedirs(out_dir, exist_ok=True)

    by_track = {}
    for ev in events:
        if ev.get("is_data"):
            by_track.setdefault(ev["track"], []).append(ev)

    written = []
    for i, number in enumerate(sorted(n for n in by_track if n != 0)):
        outpath = os.path.join(out_dir, f"track{i}.csv")
        write_midicsv(by_track[number], outpath)
        written.append(outpath)
    return written
