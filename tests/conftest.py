import pytest

from gesture_canvas.landmarks import HandData

# x positions of the four long fingers (index, middle, ring, pinky)
_FINGER_X = (0.40, 0.47, 0.54, 0.61)


def build_hand(extended=(False, False, False, False, False), pinch=False, dx=0.0, dy=0.0):
    """
    Build a 21-landmark hand in normalized camera space.

    ``extended`` is (thumb, index, middle, ring, pinky). With ``pinch`` the
    thumb tip is placed right next to the index tip.
    """
    thumb, *fingers = extended
    points = [None] * 21
    points[0] = (0.50, 0.90)                      # wrist
    points[1] = (0.35, 0.80)                      # thumb CMC
    points[2] = (0.30, 0.72)                      # thumb MCP
    points[3] = (0.27, 0.65)                      # thumb IP
    points[4] = (0.22, 0.60) if thumb else (0.26, 0.63)

    for i, (x, up) in enumerate(zip(_FINGER_X, fingers)):
        base = 5 + 4 * i
        points[base] = (x, 0.60)                  # MCP
        points[base + 1] = (x, 0.50)              # PIP
        points[base + 2] = (x, 0.40) if up else (x, 0.58)
        points[base + 3] = (x, 0.30) if up else (x, 0.55)

    if pinch:
        tip_x, tip_y = points[8]
        points[4] = (tip_x + 0.01, tip_y + 0.01)

    return HandData.from_points([(x + dx, y + dy) for x, y in points])


@pytest.fixture
def hand():
    return build_hand


@pytest.fixture
def fist():
    return build_hand()


@pytest.fixture
def pointing_hand():
    return build_hand((False, True, False, False, False))


@pytest.fixture
def pinch_hand():
    return build_hand((True, True, False, False, False), pinch=True)


@pytest.fixture
def open_hand():
    return build_hand((True, True, True, True, True))
