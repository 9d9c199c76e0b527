import pytest

from wireframe_scene.math_utils import Mat4, MatrixStack, Vec3


def approx(point):
    return pytest.approx(point, abs=1e-9)


def test_vec3_ops():
    a, b = Vec3(1, 0, 0), Vec3(0, 1, 0)
    assert a.cross(b) == Vec3(0, 0, 1)
    assert a.dot(b) == 0.0
    assert (a + b) * 2 == Vec3(2, 2, 0)
    assert Vec3(3, 4, 0).magnitude() == 5.0
    assert Vec3(0, 0, 0).normalize() == Vec3(0, 0, 0)


def test_mat4_compose_and_apply():
    m = Mat4.translation(1, 2, 3) @ Mat4.scale(2, 2, 2)
    assert m.apply(1, 1, 1) == approx((3, 4, 5))
    assert Mat4.identity().mul_vec3(Vec3(1, 2, 3)) == Vec3(1, 2, 3)


def test_last_transform_applies_first():
    stack = MatrixStack()
    stack.translate(10, 0, 0)
    stack.scale(2, 2, 2)
    assert stack.top.apply(1, 0, 0) == approx((12, 0, 0))


def test_rotate_degrees():
    stack = MatrixStack()
    stack.rotate_degrees(0, 0, 90)
    assert stack.top.apply(1, 0, 0) == approx((0, 1, 0))
    stack.reset()
    stack.rotate_degrees(90, 0, 0)
    assert stack.top.apply(0, 1, 0) == approx((0, 0, 1))


def test_push_pop_restores_top():
    stack = MatrixStack()
    stack.push()
    stack.translate(5, 5, 5)
    assert len(stack) == 1
    stack.pop()
    assert stack.top.apply(0, 0, 0) == approx((0, 0, 0))
    with pytest.raises(IndexError):
        stack.pop()
