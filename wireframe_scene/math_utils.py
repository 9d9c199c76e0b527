#
# PROJECT: wireframe-scene-viewer
# MODULE: wireframe_scene/math_utils.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-19
#

import math


class Vec3:
    """Immutable 3-component vector."""
    __slots__ = ('x', 'y', 'z')

    def __init__(self, x: float, y: float, z: float):
        self.x = float(x)
        self.y = float(y)
        self.z = float(z)

    def __repr__(self):
        return f"Vec3({self.x:.2f}, {self.y:.2f}, {self.z:.2f})"

    def __iter__(self):
        yield self.x
        yield self.y
        yield self.z

    def __eq__(self, other):
        if not isinstance(other, Vec3):
            return NotImplemented
        return self.x == other.x and self.y == other.y and self.z == other.z

    def __add__(self, other):
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other):
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar):
        return Vec3(self.x * scalar, self.y * scalar, self.z * scalar)

    def dot(self, other) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other) -> 'Vec3':
        return Vec3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x
        )

    def magnitude(self) -> float:
        return math.sqrt(self.dot(self))

    def normalize(self) -> 'Vec3':
        m = self.magnitude()
        if m == 0:
            return Vec3(0, 0, 0)
        return self * (1.0 / m)


class Mat4:
    """4x4 matrix, [row][col] storage, column vectors (M @ v)."""
    __slots__ = ('m',)

    def __init__(self, data=None):
        if data:
            self.m = [list(row) for row in data]
        else:
            self.m = [[0.0] * 4 for _ in range(4)]

    def __repr__(self):
        return f"Mat4({self.m!r})"

    def copy(self) -> 'Mat4':
        return Mat4(self.m)

    @classmethod
    def identity(cls) -> 'Mat4':
        res = cls()
        for i in range(4):
            res.m[i][i] = 1.0
        return res

    @classmethod
    def translation(cls, x, y, z) -> 'Mat4':
        mat = cls.identity()
        mat.m[0][3] = x
        mat.m[1][3] = y
        mat.m[2][3] = z
        return mat

    @classmethod
    def scale(cls, sx, sy, sz) -> 'Mat4':
        mat = cls.identity()
        mat.m[0][0] = sx
        mat.m[1][1] = sy
        mat.m[2][2] = sz
        return mat

    @classmethod
    def rotation_x(cls, rad: float) -> 'Mat4':
        mat = cls.identity()
        c, s = math.cos(rad), math.sin(rad)
        mat.m[1][1], mat.m[1][2] = c, -s
        mat.m[2][1], mat.m[2][2] = s, c
        return mat

    @classmethod
    def rotation_y(cls, rad: float) -> 'Mat4':
        mat = cls.identity()
        c, s = math.cos(rad), math.sin(rad)
        mat.m[0][0], mat.m[0][2] = c, s
        mat.m[2][0], mat.m[2][2] = -s, c
        return mat

    @classmethod
    def rotation_z(cls, rad: float) -> 'Mat4':
        mat = cls.identity()
        c, s = math.cos(rad), math.sin(rad)
        mat.m[0][0], mat.m[0][1] = c, -s
        mat.m[1][0], mat.m[1][1] = s, c
        return mat

    def __matmul__(self, other):
        if isinstance(other, Mat4):
            a, b = self.m, other.m
            return Mat4([[a[r][0] * b[0][c] + a[r][1] * b[1][c] +
                          a[r][2] * b[2][c] + a[r][3] * b[3][c]
                          for c in range(4)] for r in range(4)])
        return NotImplemented

    def apply(self, x, y, z):
        """Transform the point (x, y, z, 1) and return an (x, y, z) tuple."""
        m = self.m
        return (m[0][0] * x + m[0][1] * y + m[0][2] * z + m[0][3],
                m[1][0] * x + m[1][1] * y + m[1][2] * z + m[1][3],
                m[2][0] * x + m[2][1] * y + m[2][2] * z + m[2][3])

    def mul_vec3(self, v: Vec3) -> Vec3:
        return Vec3(*self.apply(v.x, v.y, v.z))


class MatrixStack:
    """
    Model matrix stack with p5-style post-multiplication: each call
    transforms the local coordinate system, so the last transform issued is
    the first one applied to a vertex.
    """

    def __init__(self):
        self.top = Mat4.identity()
        self._saved = []

    def __len__(self):
        return len(self._saved)

    def push(self):
        self._saved.append(self.top.copy())

    def pop(self):
        if not self._saved:
            raise IndexError("pop from empty matrix stack")
        self.top = self._saved.pop()

    def reset(self):
        self.top = Mat4.identity()
        self._saved.clear()

    def translate(self, x, y, z):
        self.top = self.top @ Mat4.translation(x, y, z)

    def scale(self, sx, sy, sz):
        self.top = self.top @ Mat4.scale(sx, sy, sz)

    def rotate_degrees(self, rx, ry, rz):
        """Rotate about X, then Y, then Z, in the order p5's rotateX/Y/Z calls compose."""
        self.top = (self.top @ Mat4.rotation_x(math.radians(rx))
                    @ Mat4.rotation_y(math.radians(ry))
                    @ Mat4.rotation_z(math.radians(rz)))
