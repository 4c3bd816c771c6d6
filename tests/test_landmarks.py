import pytest

from gesture_canvas.landmarks import (
    HandData, HandLandmark, Point, calculate_finger_states, drawing_position,
    landmark_to_screen, palm_center, pinch_distance, two_hand_distance
)


def test_fist_has_no_extended_fingers(fist):
    assert calculate_finger_states(fist) == (False, False, False, False, False)


def test_open_hand_has_all_fingers_extended(open_hand):
    assert calculate_finger_states(open_hand) == (True, True, True, True, True)


@pytest.mark.parametrize("extended", [
    (False, True, False, False, False),
    (True, False, False, False, False),
    (False, True, True, True, True),
    (True, False, True, False, True),
])
def test_finger_states_follow_pose(hand, extended):
    assert calculate_finger_states(hand(extended)) == extended


def test_thumb_uses_tip_to_ip_distance():
    points = {
        HandLandmark.THUMB_IP: Point(0.5, 0.5),
        # Straight below the joint: a y comparison would call this retracted
        HandLandmark.THUMB_TIP: Point(0.5, 0.56),
    }
    states = calculate_finger_states(HandData(landmarks=points))
    assert states[0] is True

    points[HandLandmark.THUMB_TIP] = Point(0.5, 0.53)
    assert calculate_finger_states(HandData(landmarks=points))[0] is False


def test_thumb_threshold_is_configurable():
    points = {
        HandLandmark.THUMB_IP: Point(0.5, 0.5),
        HandLandmark.THUMB_TIP: Point(0.55, 0.5),
    }
    hand_data = HandData(landmarks=points)
    assert calculate_finger_states(hand_data)[0] is True
    assert calculate_finger_states(hand_data, thumb_threshold=0.06)[0] is False


def test_missing_landmarks_count_as_retracted():
    assert calculate_finger_states(HandData()) == (False,) * 5


def test_pinch_distance(pinch_hand, pointing_hand):
    assert pinch_distance(pinch_hand) < 0.04
    assert pinch_distance(pointing_hand) > 0.04
    assert pinch_distance(HandData()) == float('inf')


def test_two_hand_distance_requires_exactly_two_hands(hand):
    left = hand((False, True, False, False, False))
    right = hand((False, True, False, False, False), dx=0.1)

    assert two_hand_distance([left, right]) == pytest.approx(0.1)
    assert two_hand_distance([left]) is None
    assert two_hand_distance([left, right, left]) is None
    assert two_hand_distance([]) is None
    assert two_hand_distance([left, HandData()]) is None


def test_landmark_to_screen_scales_and_mirrors():
    point = Point(0.25, 0.5)
    assert landmark_to_screen(point, (800, 600)) == (200.0, 300.0)
    assert landmark_to_screen(point, (800, 600), mirror_x=True) == (600.0, 300.0)


def test_cursor_positions(pointing_hand):
    size = (1000, 1000)
    assert drawing_position(pointing_hand, size) == pytest.approx((400.0, 300.0))
    assert palm_center(pointing_hand, size) == pytest.approx((470.0, 600.0))
    assert drawing_position(None, size) is None
    assert palm_center(HandData(), size) is None


def test_from_points_builds_complete_hand(open_hand):
    assert open_hand.is_complete()
    assert len(open_hand.landmarks) == 21
    assert not HandData.from_points([(0.5, 0.5)] * 5).is_complete()
