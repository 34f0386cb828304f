# windsong_tools/player.py
import logging
import threading
import time

import keyboard  # global key sender

logger = logging.getLogger(__name__)


def click(key: str):
    """Press and release one instrument key."""
    keyboard.send(key)


def play_script(records, click=click, stop_event: threading.Event = None,
                clock=time.time):
    """
    Play script records in real time.

    Each record waits until its cumulative start time (measured from the
    start of playback) and then clicks its keys in order. Returns the number
    of records played; stops early once `stop_event` is set.
    """
    if not records:
        logger.info("Script is empty.")
        return 0

    if stop_event is None:
        stop_event = threading.Event()

    start = clock()
    target = 0.0
    played = 0
    for rec in records:
        if stop_event.is_set():
            break

        target += rec.delta_us / 1_000_000
        delay = target - (clock() - start)
        if delay > 0:
            if stop_event.wait(delay):
                break

        for key in rec.keys:
            click(key)
        played += 1

    logger.info("played %d/%d records in %.2fs", played, len(records), clock() - start)
    return played
