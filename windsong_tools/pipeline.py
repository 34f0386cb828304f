# windsong_tools/pipeline.py
import logging

from windsong_tools.config import ConvertConfig
from windsong_tools.io_midicsv import DecodedMidi, load_tracks
from windsong_tools.mapping import PitchMapper
from windsong_tools.merge import merge_tracks
from windsong_tools.script import emit_records, write_script
from windsong_tools.tempo import TempoTimeline

logger = logging.getLogger(__name__)


def convert_tracks(decoded: DecodedMidi, config: ConvertConfig = ConvertConfig()):
    """
    Turn decoded tracks into play-script records:

      1) Merge all tracks into one tick-ordered stream.
      2) Build the tempo map from every Tempo event in the file.
      3) Map each note-on pitch onto the instrument.
      4) Group simultaneous note-ons into chords.
    """
    timeline = TempoTimeline.from_events(decoded.division, decoded.tempo_events())
    merged = merge_tracks(decoded.tracks)
    records = emit_records(merged, timeline, PitchMapper(config))

    logger.info("key count: %d (%d records)", decoded.note_on_count(), len(records))
    return records


def process_file(infile, outfile, config: ConvertConfig = ConvertConfig()):
    """
    Convert a MIDI (or midicsv) file into a play script on disk.

    Nothing is written unless the whole file converts.
    """
    decoded = load_tracks(infile)
    records = convert_tracks(decoded, config)
    write_script(records, outfile)
    return records
