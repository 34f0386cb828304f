"""Tests for the tempo map."""

import pytest

from windsong_tools.errors import UnsupportedTimingError
from windsong_tools.tempo import DEFAULT_TEMPO, TempoEvent, TempoTimeline, check_division


class TestTempoTimeline:

    def test_default_tempo(self):
        timeline = TempoTimeline(480)
        assert timeline.ticks_to_us(480) == 500000
        assert timeline.tempo_at(0) == DEFAULT_TEMPO

    def test_zero_tick(self):
        assert TempoTimeline(480).ticks_to_us(0) == 0

    def test_tempo_change(self):
        timeline = TempoTimeline.from_events(480, [TempoEvent(960, 250000)])
        assert timeline.ticks_to_us(960) == 1000000
        assert timeline.ticks_to_us(1440) == 1250000
        assert timeline.tempo_at(959) == 500000
        assert timeline.tempo_at(960) == 250000

    def test_tempo_at_zero_replaces_default(self):
        timeline = TempoTimeline.from_events(96, [TempoEvent(0, 1000000)])
        assert timeline.ticks_to_us(96) == 1000000

    def test_same_tick_last_wins(self):
        timeline = TempoTimeline(480)
        timeline.add(480, 1000000)
        timeline.add(480, 250000)
        assert timeline.ticks_to_us(960) == 500000 + 250000

    def test_floor_of_total_not_per_segment(self):
        # 1 tick at 1000 µs/quarter over 3 ticks/quarter = 333.33 µs
        timeline = TempoTimeline.from_events(3, [TempoEvent(0, 1000), TempoEvent(1, 1000)])
        assert timeline.ticks_to_us(1) == 333
        assert timeline.ticks_to_us(2) == 666
        assert timeline.ticks_to_us(3) == 1000

    def test_monotonic(self):
        timeline = TempoTimeline.from_events(
            7, [TempoEvent(3, 123457), TempoEvent(10, 999), TempoEvent(25, 700001)]
        )
        times = [timeline.ticks_to_us(t) for t in range(0, 60)]
        assert times == sorted(times)

    def test_out_of_order_tempo_rejected(self):
        timeline = TempoTimeline(480)
        timeline.add(960, 400000)
        with pytest.raises(ValueError):
            timeline.add(480, 400000)

    def test_bad_tempo_rejected(self):
        with pytest.raises(ValueError):
            TempoTimeline(480).add(0, 0)

    def test_negative_tick_rejected(self):
        with pytest.raises(ValueError):
            TempoTimeline(480).ticks_to_us(-1)


class TestDivision:

    def test_metrical(self):
        assert check_division(480) == 480

    @pytest.mark.parametrize("division", [0, -1, 0xE728, 0x8000])
    def test_smpte_and_invalid_rejected(self, division):
        with pytest.raises(UnsupportedTimingError):
            check_division(division)

    def test_timeline_rejects_smpte(self):
        with pytest.raises(UnsupportedTimingError):
            TempoTimeline(0xE250)
