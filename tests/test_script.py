"""Tests for chord grouping and the play script text format."""

import pytest

from windsong_tools.errors import ScriptFormatError
from windsong_tools.mapping import PitchMapper
from windsong_tools.merge import merge_tracks
from windsong_tools.script import (
    ScriptRecord, emit_records, format_script, parse_script, read_script, write_script,
)
from windsong_tools.tempo import TempoTimeline

from tests.helpers import note_off, note_on, tempo


def emit(tracks, division=480):
    timeline = TempoTimeline(division)
    for track in tracks:
        for ev in track:
            if ev.tempo is not None:
                timeline.add(ev.tick, ev.tempo)
    return emit_records(merge_tracks(tracks), timeline, PitchMapper())


class TestEmitRecords:

    def test_single_note(self):
        records = emit([[note_on(480, 64)]])
        assert records == [ScriptRecord(500000, ("d",))]

    def test_chord_across_tracks_in_track_order(self):
        records = emit([[note_on(480, 72)], [note_on(480, 60)]])
        assert records == [ScriptRecord(500000, ("q", "a"))]

    def test_deltas_are_relative(self):
        records = emit([[note_on(480, 60), note_on(960, 62), note_on(1920, 64)]])
        assert [r.delta_us for r in records] == [500000, 500000, 1000000]

    def test_first_note_at_zero(self):
        records = emit([[note_on(0, 60), note_on(0, 64), note_on(240, 67)]])
        assert records == [ScriptRecord(0, ("a", "d")), ScriptRecord(250000, ("g",))]

    def test_only_note_on_emits(self):
        records = emit([[tempo(0, 500000), note_on(0, 60), note_off(240, 60), note_on(480, 62)]])
        assert [r.keys for r in records] == [("a",), ("s",)]

    def test_skipped_notes_keep_timing(self):
        # 49 is muted by the contextual policy
        records = emit([[note_on(480, 49), note_on(960, 60)]])
        assert records == [ScriptRecord(500000, ()), ScriptRecord(500000, ("a",))]

    def test_skipped_note_inside_chord(self):
        records = emit([[note_on(480, 49)], [note_on(480, 60)]])
        assert records == [ScriptRecord(500000, ("a",))]

    def test_duplicate_keys_collapse(self):
        # 61 and 62 both land on "s"
        records = emit([[note_on(480, 61)], [note_on(480, 62)]])
        assert records == [ScriptRecord(500000, ("s",))]

    def test_tempo_change(self):
        records = emit([[tempo(480, 250000)], [note_on(480, 60), note_on(960, 62)]])
        assert [r.delta_us for r in records] == [500000, 250000]

    def test_no_notes(self):
        assert emit([[tempo(0, 400000)]]) == []


class TestScriptText:

    def test_format(self):
        records = [ScriptRecord(0, ("a", "d")), ScriptRecord(250000, ()), ScriptRecord(10, ("q",))]
        assert format_script(records) == " 0 a,d 250000 0 10 q"

    def test_parse(self):
        records = parse_script(" 500000 a,d 1000 0\n 20 u ")
        assert records == [
            ScriptRecord(500000, ("a", "d")),
            ScriptRecord(1000, ()),
            ScriptRecord(20, ("u",)),
        ]

    def test_parse_empty(self):
        assert parse_script("") == []

    @pytest.mark.parametrize("text", [
        " 100",
        " x a",
        " -5 a",
        " 100 a,p",
    ])
    def test_parse_rejects(self, text):
        with pytest.raises(ScriptFormatError):
            parse_script(text)

    def test_file_round_trip(self, tmp_path):
        records = [ScriptRecord(0, ("z",)), ScriptRecord(125000, ("m", "j", "u")), ScriptRecord(7, ())]
        path = tmp_path / "song_play.txt"
        write_script(records, str(path))
        assert path.read_text(encoding="utf-8") == " 0 z 125000 m,j,u 7 0"
        assert read_script(str(path)) == records
