# run_pipeline.py
import argparse
import logging
import os
import sys
import time

from windsong_tools.config import ConvertConfig
from windsong_tools.errors import WindsongError
from windsong_tools.io_midicsv import dump_tracks
from windsong_tools.keymap import DEFAULT_KEY_TABLE, KeyRangeTable
from windsong_tools.pipeline import process_file
from windsong_tools.player import play_script
from windsong_tools.script import read_script

logger = logging.getLogger("run_pipeline")

START_DELAY_SECONDS = 10


def _init_logging(verbose=False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def default_script_path(midi_input):
    folder = os.path.dirname(midi_input)
    base = os.path.splitext(os.path.basename(midi_input))[0]
    return os.path.join(folder, base + "_play.txt")


def load_key_table(path):
    return KeyRangeTable.from_json(path) if path else DEFAULT_KEY_TABLE


def run_convert(args):
    table = load_key_table(args.keymap)
    config = ConvertConfig.from_values(args.transpose, args.below, args.above, args.black, table)
    out = args.output or default_script_path(args.midi)

    print(f"Converting {args.midi} → {out}...")
    records = process_file(args.midi, out, config)
    print(f"  → {len(records)} records")
    return 0


def run_play(args):
    records = read_script(args.script, load_key_table(args.keymap))
    print(f"Loaded {len(records)} records. Switch to the game and open the instrument; "
          f"playing in {args.delay:g}s...")
    time.sleep(args.delay)

    start = time.time()
    play_script(records)
    print(f"Time of player: {time.time() - start:.2f}s")
    return 0


def run_dump(args):
    written = dump_tracks(args.midi, args.output)
    for path in written:
        print(f"  → {path}")
    return 0


def build_parser():
    ap = argparse.ArgumentParser(description="Convert MIDI files into key-press scripts for a 21-key instrument.")
    ap.add_argument("-v", "--verbose", action="store_true")
    sub = ap.add_subparsers(dest="command", required=True)

    conv = sub.add_parser("convert", help="MIDI → play script")
    conv.add_argument("midi")
    conv.add_argument("-o", "--output")
    conv.add_argument("--transpose", type=int, default=0, help="whole octaves")
    conv.add_argument("--below", type=int, default=0, help="0 fold, 1 clamp, other skip")
    conv.add_argument("--above", type=int, default=0, help="0 fold, 1 clamp, other skip")
    conv.add_argument("--black", type=int, default=3,
                      help="0 mute, 1 round down, 2 round up, 3 contextual, other keep")
    conv.add_argument("--keymap", help="JSON object of pitch → key symbol")
    conv.set_defaults(func=run_convert)

    play = sub.add_parser("play", help="play a script with simulated key presses")
    play.add_argument("script")
    play.add_argument("--delay", type=float, default=START_DELAY_SECONDS)
    play.add_argument("--keymap", help="JSON key table the script was converted with")
    play.set_defaults(func=run_play)

    dump = sub.add_parser("dump", help="write each track as midicsv for reading")
    dump.add_argument("midi")
    dump.add_argument("-o", "--output", default=".")
    dump.set_defaults(func=run_dump)
    return ap


def main(argv=None):
    args = build_parser().parse_args(argv)
    _init_logging(args.verbose)
    try:
        return args.func(args)
    except (WindsongError, ValueError) as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
