import pytest

from stallmap import HighlightAnimator


def test_no_target_no_loop(clock):
    anim = HighlightAnimator(clock)
    assert not anim.running
    assert anim.pulse() == (1.0, 0.45)


def test_pulse_yoyo(clock):
    anim = HighlightAnimator(clock, half_period=0.9)
    anim.set_target("s1")
    assert anim.running
    assert anim.pulse() == pytest.approx((1.0, 0.45))
    clock.advance(0.45)
    assert anim.pulse() == pytest.approx((1.15, 0.275))
    clock.advance(0.45)
    assert anim.pulse() == pytest.approx((1.3, 0.1))
    clock.advance(0.45)
    assert anim.pulse() == pytest.approx((1.15, 0.275))
    clock.advance(0.45)
    assert anim.pulse() == pytest.approx((1.0, 0.45))


def test_ticks_reach_callback(clock):
    ticks = []
    anim = HighlightAnimator(clock, on_tick=lambda: ticks.append(1))
    anim.set_target("s1")
    clock.advance(0.016)
    clock.advance(0.016)
    assert len(ticks) == 2


def test_clearing_target_destroys_loop(clock):
    ticks = []
    anim = HighlightAnimator(clock, on_tick=lambda: ticks.append(1))
    anim.set_target("s1")
    clock.advance(0.1)
    anim.set_target(None)
    assert not anim.running
    clock.advance(0.1)
    clock.advance(0.1)
    assert len(ticks) == 1


def test_teardown_stops_loop(clock):
    ticks = []
    anim = HighlightAnimator(clock, on_tick=lambda: ticks.append(1))
    anim.set_target("s1")
    anim.teardown()
    clock.advance(0.5)
    assert ticks == []
    assert anim.target is None and not anim.running


def test_changing_target_restarts_from_phase_zero(clock):
    anim = HighlightAnimator(clock)
    anim.set_target("s1")
    clock.advance(0.6)
    anim.set_target("s2")
    assert clock.starts == 2
    assert anim.pulse() == pytest.approx((1.0, 0.45))


def test_same_target_does_not_restart(clock):
    anim = HighlightAnimator(clock)
    anim.set_target("s1")
    anim.set_target("s1")
    assert clock.starts == 1
