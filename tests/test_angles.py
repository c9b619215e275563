import pytest

from quadkit.angles import angle_lerp, short_angle_dist, wrap_rotation


def test_short_angle_dist_same_angle_is_zero():
    assert short_angle_dist(123.0, 123.0) == 0.0


def test_short_angle_dist_small_forward():
    assert short_angle_dist(0.0, 90.0) == pytest.approx(90.0)


def test_short_angle_dist_goes_backwards_across_zero():
    assert short_angle_dist(0.0, 350.0) == pytest.approx(-10.0)


@pytest.mark.parametrize("a0", [0.0, 45.0, 170.0, 300.0, 359.0])
@pytest.mark.parametrize("a1", [0.0, 10.0, 179.0, 181.0, 350.0])
def test_short_angle_dist_never_longer_than_half_turn(a0, a1):
    assert abs(short_angle_dist(a0, a1)) <= 180.0 + 1e-9


def test_angle_lerp_endpoints():
    assert angle_lerp(10.0, 20.0, 0.0) == 10.0
    assert angle_lerp(10.0, 20.0, 1.0) == pytest.approx(20.0)


def test_angle_lerp_moves_towards_target():
    a = angle_lerp(0.0, 90.0, 0.1)
    assert 0.0 < a < 90.0


@pytest.mark.parametrize("angle", [-350.0, -10.0, 0.0, 45.0, 359.0, 360.0, 370.0, 710.0])
def test_wrap_rotation_in_range(angle):
    assert 0.0 <= wrap_rotation(angle) < 360.0


def test_wrap_rotation_keeps_in_range_values():
    assert wrap_rotation(45.0) == 45.0


def test_wrap_rotation_over_full_turn():
    assert wrap_rotation(370.0) == pytest.approx(10.0)