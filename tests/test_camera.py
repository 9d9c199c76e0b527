import math

import pytest

from wireframe_scene.camera import FlyCamera, OrbitCamera


def test_defaults():
    cam = OrbitCamera()
    assert cam.distance == 300.0
    assert cam.rotation_x == pytest.approx(math.radians(20))
    assert cam.rotation_y == pytest.approx(math.radians(20))


def test_center_lands_in_front_of_camera():
    cam = OrbitCamera()
    cam.target_center = [10.0, -5.0, 3.0]
    cam.snap()
    assert cam.view_matrix().apply(10.0, -5.0, 3.0) == pytest.approx((0, 0, 300.0))


def test_update_eases_toward_target():
    cam = OrbitCamera()
    cam.zoom(100)
    cam.update()
    assert cam.distance == pytest.approx(310.0)
    for _ in range(200):
        cam.update()
    assert cam.distance == pytest.approx(400.0)


def test_limits():
    cam = OrbitCamera()
    cam.zoom(-10_000)
    assert cam.target_distance == OrbitCamera.MIN_DISTANCE
    cam.orbit(0, 10)
    assert cam.target_rotation_x == OrbitCamera.PITCH_LIMIT
    cam.adjust_fov(500)
    assert cam.fov == 170


def test_pan_moves_along_screen_axes():
    cam = OrbitCamera()
    cam.pan(10, 0)
    assert math.dist(cam.target_center, (0, 0, 0)) == pytest.approx(10.0)
    cam.snap()
    assert cam.view_matrix().apply(*cam.center) == pytest.approx((0, 0, 300.0))


def test_reset():
    cam = OrbitCamera()
    cam.orbit(1, 0.5)
    cam.zoom(500)
    cam.reset()
    cam.snap()
    assert cam.distance == 300.0
    assert cam.rotation_y == pytest.approx(math.radians(20))


def test_fly_camera_starts_facing_the_origin():
    cam = FlyCamera()
    assert cam.view_matrix().apply(0.0, 0.0, 0.0) == pytest.approx((0, 0, 300.0))


def test_fly_thrust_accelerates_to_a_capped_speed_then_coasts_to_rest():
    cam = FlyCamera()
    cam.thrust(forward=1.0)
    cam.update()
    assert cam.velocity == pytest.approx([0.0, 0.0, FlyCamera.ACCELERATION])
    assert cam.position[2] == pytest.approx(-300.0 + FlyCamera.ACCELERATION)
    for _ in range(20):
        cam.thrust(forward=1.0)
        cam.update()
    assert math.hypot(*cam.velocity) == pytest.approx(FlyCamera.MAX_SPEED)
    for _ in range(100):
        cam.update()
    assert cam.velocity == [0.0, 0.0, 0.0]


def test_fly_look_turns_the_forward_axis():
    cam = FlyCamera()
    cam.look(math.pi / 2, 0.0)
    _, _, forward = cam.axes()
    assert forward == pytest.approx([-1.0, 0.0, 0.0])
    cam.look(0.0, 10.0)
    assert cam.pitch == FlyCamera.PITCH_LIMIT


def test_fly_reset():
    cam = FlyCamera()
    cam.thrust(right=1.0, up=1.0)
    cam.update()
    cam.reset()
    assert cam.position == [0.0, 0.0, -300.0]
    assert cam.velocity == [0.0, 0.0, 0.0]
