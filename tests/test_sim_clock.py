from datetime import datetime, timedelta

import pytest

from posture_monitor.config import VideoConfig
from posture_monitor.sim_clock import (
    ClockAnchorError, SimulatedClock, format_video_time, parse_anchor, playback_progress,
)


def make_clock(start='08:00', date='2021-12-19', speed=1):
    return SimulatedClock(VideoConfig(start_time=start, date=date, speed_factor=speed))


def test_anchor_uses_local_calendar_fields():
    assert parse_anchor('08:00', '2021-12-19') == datetime(2021, 12, 19, 8, 0)


def test_one_video_second_is_speed_minutes():
    clock = make_clock(speed=60)
    assert clock.at(1) - clock.at(0) == timedelta(minutes=60)
    assert clock.timestamp(1) == '09:00'


def test_speed_one_maps_seconds_to_minutes():
    clock = make_clock()
    assert clock.timestamp(0) == '08:00'
    assert clock.timestamp(10) == '08:10'
    assert clock.timestamp(10.9) == '08:10'


def test_rolls_over_to_next_local_date():
    clock = make_clock(start='23:30', date='2021-12-31', speed=10)
    assert clock.timestamp(6) == '00:30'
    assert clock.date(6) == '2022-01-01'


def test_anchor_is_fixed_for_the_clock_lifetime():
    config = VideoConfig(start_time='08:00', date='2021-12-19')
    clock = SimulatedClock(config)
    config.start_time = '12:00'
    assert clock.timestamp(0) == '08:00'


def test_timestamps_are_monotonic():
    clock = make_clock(speed=7)
    stamps = [clock.at(t / 4) for t in range(400)]
    assert stamps == sorted(stamps)


@pytest.mark.parametrize('start,date', [
    ('8am', '2021-12-19'),
    ('08:00', '19/12/2021'),
    ('25:00', '2021-12-19'),
    ('08:00', '2021-02-30'),
    (None, '2021-12-19'),
])
def test_bad_anchor_is_fatal(start, date):
    with pytest.raises(ClockAnchorError):
        make_clock(start=start, date=date)


def test_anchor_error_is_a_value_error():
    assert issubclass(ClockAnchorError, ValueError)


def test_duration_text():
    clock = make_clock(speed=5)
    assert clock.duration_text(0) == '0.00 hours'
    assert clock.duration_text(30) == '2.30 hours'
    assert clock.duration_text(13) == '1.05 hours'


def test_status_payload():
    clock = make_clock(start='08:00', speed=60)
    assert clock.status(2) == {
        'startTime': '10:00',
        'date': '2021-12-19',
        'durationText': '2.00 hours',
    }


def test_format_video_time():
    assert format_video_time(0) == '00:00'
    assert format_video_time(65.7) == '01:05'
    assert format_video_time(3600) == '60:00'


def test_playback_progress():
    assert playback_progress(30, 60) == 50.0
    assert playback_progress(90, 60) == 100.0
    assert playback_progress(0.5, 0) == 50.0
