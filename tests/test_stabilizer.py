import pytest

from posture_monitor.posture_classifier import PostureLabel
from posture_monitor.stabilizer import PostureStabilizer

S, W, SIT, L, F = (PostureLabel.STANDING, PostureLabel.WALKING, PostureLabel.SITTING,
                   PostureLabel.LAYING, PostureLabel.FALLING)


def feed(stabilizer, labels):
    return [stabilizer.update(label) for label in labels]


def test_fall_fires_on_first_laying_frame_after_standing():
    stab = PostureStabilizer()
    out = feed(stab, [S, S, S, L])
    assert out == [None, None, None, F]
    assert stab.confirmed is F


def test_fall_after_confirmed_walking():
    stab = PostureStabilizer()
    out = feed(stab, [W, W, W, L])
    assert out == [None, None, W, F]


def test_laying_after_sitting_is_never_a_fall():
    stab = PostureStabilizer()
    out = feed(stab, [SIT, SIT, SIT, L])
    assert out == [None, None, SIT, None]
    assert F not in out

    out = feed(stab, [L, L])
    assert out == [None, L]
    assert stab.confirmed is L


def test_single_frame_jitter_is_ignored():
    stab = PostureStabilizer()
    feed(stab, [SIT, SIT, SIT])
    out = feed(stab, [W, SIT, SIT, W, SIT])
    assert out == [None] * 5
    assert stab.confirmed is SIT


def test_three_consecutive_frames_confirm_change():
    stab = PostureStabilizer()
    feed(stab, [SIT, SIT, SIT])
    out = feed(stab, [S, S, S])
    assert out == [None, None, S]


def test_no_event_when_label_matches_confirmed():
    stab = PostureStabilizer()
    assert feed(stab, [S] * 6) == [None] * 6


def test_fall_is_not_repeated_while_on_the_floor():
    stab = PostureStabilizer()
    out = feed(stab, [S, S, S, L, L, L, L])
    assert out == [None, None, None, F, None, None, L]
    assert stab.confirmed is L


def test_fall_survives_one_crouch_frame():
    stab = PostureStabilizer()
    out = feed(stab, [S, S, S, SIT, L])
    assert out == [None, None, None, None, F]


def test_first_frame_of_session_on_floor_is_laying():
    stab = PostureStabilizer()
    out = feed(stab, [L, L, L])
    assert out == [None, None, L]


def test_history_is_bounded():
    stab = PostureStabilizer(history_size=4)
    for _ in range(20):
        stab.update(SIT)
        assert len(stab.history) <= stab.capacity == 4


def test_reset_clears_history_and_state():
    stab = PostureStabilizer()
    feed(stab, [SIT, SIT, SIT])
    stab.reset()
    assert stab.history == []
    assert stab.confirmed is S


def test_accepts_plain_strings():
    stab = PostureStabilizer()
    out = feed(stab, ['sitting'] * 3)
    assert out[-1] is SIT


def test_rejects_window_larger_than_capacity():
    with pytest.raises(ValueError):
        PostureStabilizer(stable_frames=6, history_size=5)
