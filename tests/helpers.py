import struct

from windsong_tools.events import EventKind, TrackEvent


def note_on(tick, pitch, velocity=100, channel=0):
    return TrackEvent(tick, EventKind.NOTE_ON, channel=channel, pitch=pitch, velocity=velocity)


def note_off(tick, pitch, channel=0):
    return TrackEvent(tick, EventKind.NOTE_OFF, channel=channel, pitch=pitch, velocity=0)


def tempo(tick, us_per_quarter):
    return TrackEvent(tick, EventKind.TEMPO, tempo=us_per_quarter)


def write_smf(path, division=480):
    """Write a one-track file: tempo 500000, C4 at tick 0, E4 at tick 480."""
    track = bytes([
        0x00, 0xFF, 0x51, 0x03, 0x07, 0xA1, 0x20,
        0x00, 0x90, 0x3C, 0x64,
        0x83, 0x60, 0x80, 0x3C, 0x40,
        0x00, 0x90, 0x40, 0x64,
        0x83, 0x60, 0x80, 0x40, 0x40,
        0x00, 0xFF, 0x2F, 0x00,
    ])
    data = b"MThd" + struct.pack(">IHHH", 6, 0, 1, division)
    data += b"MTrk" + struct.pack(">I", len(track)) + track
    path.write_bytes(data)
