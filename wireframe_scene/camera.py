#
# PROJECT: wireframe-scene-viewer
# MODULE: wireframe_scene/camera.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-19
#

import math
from typing import Union

from .math_utils import Mat4


class OrbitCamera:
    """
    Orbit camera around a movable center point.

    Input changes the target_* values; update() eases the live values toward
    them once per frame, so motion stays smooth at any key-repeat rate.
    Camera space looks down +Z with the scene center at z = distance; world
    Y points down, as in the p5 scenes the language was written for.
    """
    LERP = 0.1
    MIN_DISTANCE = 10.0
    MAX_DISTANCE = 2000.0
    PITCH_LIMIT = math.pi / 2 - 0.01

    def __init__(self, fov: float = 60.0, near: float = 1.0, far: float = 5000.0):
        self.fov = fov
        self.near = near
        self.far = far
        self.reset()
        self.snap()

    def reset(self):
        """Return the targets to the default view; the live values ease back."""
        self.target_rotation_x = math.radians(20)
        self.target_rotation_y = math.radians(20)
        self.target_distance = 300.0
        self.target_center = [0.0, 0.0, 0.0]

    def snap(self):
        """Jump straight to the targets."""
        self.rotation_x = self.target_rotation_x
        self.rotation_y = self.target_rotation_y
        self.distance = self.target_distance
        self.center = list(self.target_center)

    def orbit(self, dyaw: float, dpitch: float):
        self.target_rotation_y += dyaw
        self.target_rotation_x = max(-self.PITCH_LIMIT,
                                     min(self.PITCH_LIMIT, self.target_rotation_x + dpitch))

    def zoom(self, delta: float):
        self.target_distance = max(self.MIN_DISTANCE,
                                   min(self.MAX_DISTANCE, self.target_distance + delta))

    def pan(self, dx: float, dy: float):
        """Move the center along the camera's screen axes."""
        rot = self._rotation().m
        for axis in range(3):
            self.target_center[axis] += rot[0][axis] * dx + rot[1][axis] * dy

    def adjust_fov(self, delta: float):
        """Adjust field of view by delta degrees, clamped to [10, 170]."""
        self.fov = max(10, min(170, self.fov + delta))

    def update(self):
        k = self.LERP
        self.rotation_x += (self.target_rotation_x - self.rotation_x) * k
        self.rotation_y += (self.target_rotation_y - self.rotation_y) * k
        self.distance += (self.target_distance - self.distance) * k
        for axis in range(3):
            self.center[axis] += (self.target_center[axis] - self.center[axis]) * k

    def _rotation(self) -> Mat4:
        return Mat4.rotation_x(self.rotation_x) @ Mat4.rotation_y(self.rotation_y)

    def view_matrix(self) -> Mat4:
        cx, cy, cz = self.center
        return (Mat4.translation(0.0, 0.0, self.distance) @ self._rotation()
                @ Mat4.translation(-cx, -cy, -cz))


def _length(v) -> float:
    return math.sqrt(sum(c * c for c in v))


class FlyCamera:
    """
    Free-flying camera: a position plus yaw/pitch, moved by thrust.

    curses reports key presses but not releases, so every movement key adds
    one frame of thrust. update() turns it into velocity (capped at
    MAX_SPEED); with no thrust, friction slows the camera to a stop.
    """
    LOOK_STEP = 0.05
    ACCELERATION = 1.5
    MAX_SPEED = 10.0
    FRICTION = 0.85
    MIN_SPEED = 0.01
    PITCH_LIMIT = math.pi / 2 - 0.01

    def __init__(self, fov: float = 60.0, near: float = 1.0, far: float = 5000.0):
        self.fov = fov
        self.near = near
        self.far = far
        self.reset()

    def reset(self):
        self.position = [0.0, 0.0, -300.0]
        self.yaw = 0.0
        self.pitch = 0.0
        self.velocity = [0.0, 0.0, 0.0]
        self._thrust = [0.0, 0.0, 0.0]

    def look(self, dyaw: float, dpitch: float):
        self.yaw += dyaw
        self.pitch = max(-self.PITCH_LIMIT, min(self.PITCH_LIMIT, self.pitch + dpitch))

    def axes(self):
        """World-space (right, down, forward) unit vectors of the view."""
        rot = self._rotation().m
        return rot[0][:3], rot[1][:3], rot[2][:3]

    def thrust(self, forward: float = 0.0, right: float = 0.0, up: float = 0.0):
        """Queue movement along the view axes for the next update()."""
        r, d, f = self.axes()
        for axis in range(3):
            self._thrust[axis] += f[axis] * forward + r[axis] * right - d[axis] * up

    def adjust_fov(self, delta: float):
        self.fov = max(10, min(170, self.fov + delta))

    def update(self):
        mag = _length(self._thrust)
        if mag > 0:
            self.velocity = [v + c / mag * self.ACCELERATION
                             for v, c in zip(self.velocity, self._thrust)]
            speed = _length(self.velocity)
            if speed > self.MAX_SPEED:
                self.velocity = [v * self.MAX_SPEED / speed for v in self.velocity]
        else:
            self.velocity = [v * self.FRICTION for v in self.velocity]
            if _length(self.velocity) < self.MIN_SPEED:
                self.velocity = [0.0, 0.0, 0.0]
        self.position = [p + v for p, v in zip(self.position, self.velocity)]
        self._thrust = [0.0, 0.0, 0.0]

    def _rotation(self) -> Mat4:
        return Mat4.rotation_x(self.pitch) @ Mat4.rotation_y(self.yaw)

    def view_matrix(self) -> Mat4:
        px, py, pz = self.position
        return self._rotation() @ Mat4.translation(-px, -py, -pz)


Camera = Union[OrbitCamera, FlyCamera]
