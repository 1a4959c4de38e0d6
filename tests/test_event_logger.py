import json

from posture_monitor.event_logger import EventLogger
from posture_monitor.events import SimulationEvent
from posture_monitor.posture_classifier import PostureLabel


def make_event(label, ts='08:00', critical=False):
    return SimulationEvent(
        id=f'{label.value}-{ts}', type=label, timestamp=ts, date='2021-12-19',
        description='x', snapshot_url='', is_critical=critical,
    )


def test_append_only_in_arrival_order():
    log = EventLogger()
    a = make_event(PostureLabel.SITTING)
    b = make_event(PostureLabel.SITTING)
    log.append(a)
    log(b)
    assert log.events == [a, b]
    assert len(log) == 2
    assert list(log) == [a, b]
    assert log.latest() is b


def test_events_returns_a_copy():
    log = EventLogger()
    log.append(make_event(PostureLabel.LAYING))
    log.events.clear()
    assert len(log) == 1


def test_critical_events():
    log = EventLogger()
    fall = make_event(PostureLabel.FALLING, critical=True)
    log.append(make_event(PostureLabel.STANDING))
    log.append(fall)
    assert log.critical_events() == [fall]


def test_in_memory_only_by_default():
    log = EventLogger()
    assert log.filepath is None
    assert log.latest() is None


def test_writes_json_lines(tmp_path):
    log = EventLogger(save_dir=tmp_path / 'events')
    log.append(make_event(PostureLabel.STANDING, '08:00'))
    log.append(make_event(PostureLabel.FALLING, '08:10', critical=True))

    lines = log.filepath.read_text(encoding='utf-8').splitlines()
    records = [json.loads(line) for line in lines]
    assert [r['type'] for r in records] == ['standing', 'falling']
    assert records[1]['isCritical'] is True
    assert records[1]['timestamp'] == '08:10'


def test_reset_starts_a_new_file(tmp_path):
    log = EventLogger(save_dir=tmp_path)
    log.append(make_event(PostureLabel.SITTING))
    old = log.filepath
    log.reset()
    assert len(log) == 0
    assert log.filepath != old
    assert old.exists()
