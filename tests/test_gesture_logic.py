import itertools

import pytest

from gesture_canvas.config import GestureConfig
from gesture_canvas.gesture_logic import (
    GESTURE_INFO, Gesture, GestureDetector, GestureResult, StabilityFilter
)
from gesture_canvas.landmarks import HandData, calculate_finger_states


@pytest.fixture
def detector():
    return GestureDetector()


def classify(detector, hand_data, hand_count=1):
    return detector.classify(calculate_finger_states(hand_data), hand_data, hand_count)


@pytest.mark.parametrize("thumb", [False, True])
def test_index_only_is_pointer_not_draw(detector, hand, thumb):
    hand_data = hand((thumb, True, False, False, False))
    assert classify(detector, hand_data) == Gesture.POINTER


def test_pinch_is_draw(detector, pinch_hand):
    assert classify(detector, pinch_hand) == Gesture.DRAW


def test_pinch_with_middle_up_is_not_draw(detector, hand):
    hand_data = hand((True, True, True, False, False), pinch=True)
    assert classify(detector, hand_data) == Gesture.IDLE


@pytest.mark.parametrize("states", list(itertools.product([False, True], repeat=5)))
def test_two_hands_always_zoom(detector, hand, states):
    assert classify(detector, hand(states), hand_count=2) == Gesture.ZOOM


def test_fist_is_pan(detector, fist):
    assert classify(detector, fist) == Gesture.PAN


def test_fist_with_thumb_out_is_pan(detector, hand):
    assert classify(detector, hand((True, False, False, False, False))) == Gesture.PAN


def test_open_hand_is_clear(detector, open_hand):
    assert classify(detector, open_hand) == Gesture.CLEAR


@pytest.mark.parametrize("states", [
    (False, True, True, True, True),
    (True, True, True, True, False),
    (True, False, True, True, True),
])
def test_four_fingers_is_erase(detector, hand, states):
    assert classify(detector, hand(states)) == Gesture.ERASE


@pytest.mark.parametrize("states", [
    (False, True, True, False, False),
    (False, False, False, False, True),
    (True, True, True, False, False),
])
def test_other_poses_are_idle(detector, hand, states):
    assert classify(detector, hand(states)) == Gesture.IDLE


def test_classify_frame_handles_missing_hands(detector, open_hand):
    assert detector.classify_frame(None) == Gesture.IDLE
    assert detector.classify_frame([]) == Gesture.IDLE
    assert detector.classify_frame([HandData()]) == Gesture.IDLE
    assert detector.classify_frame([open_hand]) == Gesture.CLEAR


def test_classify_frame_two_hands_is_zoom(detector, fist, open_hand):
    assert detector.classify_frame([fist, open_hand]) == Gesture.ZOOM
    # extra hands are ignored
    assert detector.classify_frame([fist, open_hand, fist]) == Gesture.ZOOM


def test_pinch_threshold_is_configurable(hand):
    hand_data = hand((True, True, False, False, False), pinch=True)
    strict = GestureDetector(GestureConfig(pinch_threshold=0.01))
    assert classify(strict, hand_data) == Gesture.POINTER


def test_stability_commits_on_three_of_four_and_ignores_outlier():
    stability = StabilityFilter(history_size=4, stability_count=3)
    outputs = [stability.update(g) for g in
               (Gesture.DRAW, Gesture.DRAW, Gesture.DRAW, Gesture.PAN)]
    assert outputs == [Gesture.IDLE, Gesture.IDLE, Gesture.DRAW, Gesture.DRAW]

    for _ in range(4):
        assert stability.update(Gesture.DRAW) == Gesture.DRAW


def test_stability_alternating_labels_never_commit():
    stability = StabilityFilter()
    for gesture in [Gesture.DRAW, Gesture.PAN] * 4:
        assert stability.update(gesture) == Gesture.IDLE


def test_stability_window_is_bounded():
    stability = StabilityFilter(history_size=4, stability_count=3)
    for gesture in (Gesture.PAN, Gesture.PAN, Gesture.DRAW, Gesture.DRAW, Gesture.DRAW):
        stability.update(gesture)
    assert len(stability.history) == 4
    assert stability.current == Gesture.DRAW


def test_stability_reset():
    stability = StabilityFilter()
    for _ in range(3):
        stability.update(Gesture.PAN)
    stability.reset()
    assert stability.current == Gesture.IDLE
    assert stability.history == ()


def test_detect_returns_committed_gesture_metadata(detector, fist):
    results = [detector.detect([fist]) for _ in range(3)]
    assert [r.gesture for r in results] == [Gesture.IDLE, Gesture.IDLE, Gesture.PAN]
    assert results[-1].info == GESTURE_INFO[Gesture.PAN]
    assert results[-1].tool == 'pan'


def test_hand_lost_is_idle_immediately(detector, fist):
    for _ in range(3):
        detector.detect([fist])
    history = detector.stability.history

    assert detector.detect(None).gesture == Gesture.IDLE
    assert detector.detect([]).gesture == Gesture.IDLE
    assert detector.stability.history == history

    # the hand comes back without having to re-earn its votes
    assert detector.detect([fist]).gesture == Gesture.PAN


def test_every_gesture_has_metadata():
    assert set(GESTURE_INFO) == set(Gesture)
    result = GestureResult.of(Gesture.ZOOM)
    assert result.info.name == 'Zoom'
