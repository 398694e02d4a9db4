import pytest
from PySide6.QtCore import QPointF

from stallmap import ViewportTransform, MIN_SCALE, MAX_SCALE, SCALE_FACTOR


POINTS = [(0, 0), (100, 100), (333.5, 12.25), (-40, 800), (1024, 768)]


def close(a: QPointF, b: QPointF, tol=1e-6):
    return abs(a.x() - b.x()) < tol and abs(a.y() - b.y()) < tol


def test_initial_state():
    vp = ViewportTransform()
    st = vp.state()
    assert (st.scale, st.offset_x, st.offset_y) == (1.0, 0.0, 0.0)


@pytest.mark.parametrize("x,y", POINTS)
def test_round_trip(x, y):
    vp = ViewportTransform()
    vp.pan_by(37, -12)
    vp.zoom_at(QPointF(10, 10), 1.7)
    p = QPointF(x, y)
    assert close(vp.to_screen(vp.to_world(p)), p)


def test_to_world_formula():
    vp = ViewportTransform()
    vp.scale, vp.offset_x, vp.offset_y = 2.0, 10.0, 20.0
    w = vp.to_world(QPointF(110, 220))
    assert (w.x(), w.y()) == (50.0, 100.0)


@pytest.mark.parametrize("x,y", POINTS)
@pytest.mark.parametrize("delta", [-120, 120, -1, 3])
def test_point_under_pointer_does_not_drift(x, y, delta):
    vp = ViewportTransform()
    vp.pan_by(15, 25)
    p = QPointF(x, y)
    before = vp.to_world(p)
    for _ in range(7):
        vp.wheel(p, delta)
    after = vp.to_screen(before)
    assert abs(after.x() - p.x()) < 1.0 and abs(after.y() - p.y()) < 1.0


def test_wheel_down_zooms_out_and_up_zooms_in():
    vp = ViewportTransform()
    vp.wheel(QPointF(0, 0), 120)
    assert vp.scale == pytest.approx(1 / SCALE_FACTOR)
    vp.reset()
    vp.wheel(QPointF(0, 0), -120)
    assert vp.scale == pytest.approx(SCALE_FACTOR)


def test_wheel_zero_delta_is_noop():
    vp = ViewportTransform()
    assert vp.wheel(QPointF(5, 5), 0) is False
    assert vp.scale == 1.0


def test_scale_is_clamped():
    vp = ViewportTransform()
    for _ in range(200):
        vp.wheel(QPointF(300, 200), -1)
    assert vp.scale == MAX_SCALE
    assert vp.wheel(QPointF(300, 200), -1) is False
    for _ in range(400):
        vp.wheel(QPointF(300, 200), 1)
    assert vp.scale == MIN_SCALE


def test_clamped_zoom_leaves_offset_alone():
    vp = ViewportTransform(max_scale=1.0)
    vp.pan_by(4, 4)
    vp.zoom_at(QPointF(100, 100), 2.0)
    assert (vp.offset_x, vp.offset_y) == (4.0, 4.0)


def test_pan_is_unbounded():
    vp = ViewportTransform()
    vp.pan_by(-100000, 50000)
    assert (vp.offset_x, vp.offset_y) == (-100000.0, 50000.0)


def test_qtransform_matches_to_screen():
    vp = ViewportTransform()
    vp.pan_by(12, -3)
    vp.zoom_at(QPointF(50, 60), 2.5)
    w = QPointF(17, 41)
    assert close(vp.qtransform().map(w), vp.to_screen(w))


def test_reset():
    vp = ViewportTransform()
    vp.pan_by(3, 3)
    vp.wheel(QPointF(0, 0), -1)
    vp.reset()
    assert vp.state().scale == 1.0 and vp.state().offset_x == 0.0
