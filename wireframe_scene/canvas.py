#
# PROJECT: wireframe-scene-viewer
# MODULE: wireframe_scene/canvas.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-19
#

import math

# Depth values are stored as int(z * 1000).
Z_SCALE = 1000
# Polygon offset so edges sit on top of their own depth fill.
DEPTH_BIAS = 50
_FAR = 1 << 40


class Canvas:
    """
    Sub-pixel canvas: each terminal cell holds a 2x4 block of pixels.

    Pixels carry depth for occlusion; each cell keeps the palette index of
    its nearest pixel for coloring.
    """
    __slots__ = ('w', 'h', 'grid', 'z_buffer', 'c_grid', 'cell_z', 'palette', '_index')

    # Braille dot mapping for 2x4 grid
    #  1 4
    #  2 5
    #  3 6
    #  7 8
    BRAILLE_REMAP = [0x01, 0x02, 0x04, 0x40, 0x08, 0x10, 0x20, 0x80]

    def __init__(self, w, h):
        self.w, self.h = w, h
        cols, rows = w // 2 + 1, h // 4 + 1
        self.grid = [[0] * cols for _ in range(rows)]
        self.z_buffer = [[_FAR] * w for _ in range(h)]
        self.c_grid = [[0] * cols for _ in range(rows)]
        self.cell_z = [[_FAR] * cols for _ in range(rows)]
        self.palette = []
        self._index = {}

    def color_index(self, rgb) -> int:
        """Register rgb in the canvas palette and return its index."""
        idx = self._index.get(rgb)
        if idx is None:
            idx = self._index[rgb] = len(self.palette)
            self.palette.append(rgb)
        return idx

    def set_pixel(self, x, y, z_int, color_idx):
        if x < 0 or x >= self.w or y < 0 or y >= self.h:
            return
        if z_int < self.z_buffer[y][x]:
            self.z_buffer[y][x] = z_int
            cx, cy = x >> 1, y >> 2
            # bit 0-3: left column rows 0-3, bit 4-7: right column
            self.grid[cy][cx] |= (1 << ((y & 3) + (x & 1) * 4))
            if z_int < self.cell_z[cy][cx]:
                self.cell_z[cy][cx] = z_int
                self.c_grid[cy][cx] = color_idx

    def draw_line(self, p1, p2, color_idx, thickness=1):
        """DDA line between (x, y, z) points with per-pixel depth test."""
        seg = clip_segment(p1, p2, self.w, self.h)
        if seg is None:
            return
        (x1, y1, z1), (x2, y2, z2) = seg
        z1 *= Z_SCALE
        z2 *= Z_SCALE
        dx, dy = x2 - x1, y2 - y1
        steps = int(max(abs(dx), abs(dy)))
        if steps == 0:
            self.set_pixel(int(x1), int(y1), int(z1), color_idx)
            return
        x_inc, y_inc, z_inc = dx / steps, dy / steps, (z2 - z1) / steps
        steep = abs(dy) > abs(dx)
        for off in range(thickness):
            # thicker strokes repeat the line shifted across its direction
            cx = x1 + (off if steep else 0)
            cy = y1 + (0 if steep else off)
            cz = z1
            for _ in range(steps + 1):
                self.set_pixel(int(cx), int(cy), int(cz), color_idx)
                cx += x_inc
                cy += y_inc
                cz += z_inc

    def fill_triangle_depth(self, p1, p2, p3):
        """Rasterize a triangle into the depth buffer only (occlusion pre-pass)."""
        pts = sorted((p1, p2, p3), key=lambda p: p[1])
        (x1, y1, z1), (x2, y2, z2), (x3, y3, z3) = [
            (p[0], p[1], p[2] * Z_SCALE + DEPTH_BIAS) for p in pts]
        if y3 - y1 < 1e-9:
            return
        w = self.w
        for y in range(max(0, math.ceil(y1)), min(self.h - 1, math.floor(y3)) + 1):
            t = (y - y1) / (y3 - y1)
            xa, za = x1 + (x3 - x1) * t, z1 + (z3 - z1) * t
            if y < y2:
                s = (y - y1) / (y2 - y1)
                xb, zb = x1 + (x2 - x1) * s, z1 + (z2 - z1) * s
            elif y3 - y2 > 1e-9:
                s = (y - y2) / (y3 - y2)
                xb, zb = x2 + (x3 - x2) * s, z2 + (z3 - z2) * s
            else:
                xb, zb = x2, z2
            if xa > xb:
                xa, xb, za, zb = xb, xa, zb, za
            sx, ex = max(0, math.ceil(xa)), min(w - 1, math.floor(xb))
            if sx > ex:
                continue
            slope = (zb - za) / (xb - xa) if xb > xa else 0.0
            z = za + slope * (sx - xa)
            row = self.z_buffer[y]
            for x in range(sx, ex + 1):
                if z < row[x]:
                    row[x] = int(z)
                z += slope

    def cells(self):
        """Yield (row, col, mask, color_idx) for every non-empty cell."""
        for cy, row in enumerate(self.grid):
            colors = self.c_grid[cy]
            for cx, mask in enumerate(row):
                if mask:
                    yield cy, cx, mask, colors[cx]

    def to_text(self, braille=True):
        render = render_cell_braille if braille else render_cell_ascii
        return [''.join(render(m) for m in row) for row in self.grid]


def clip_segment(p1, p2, w, h):
    """Liang-Barsky clip of a 2D segment (z interpolated) to [0, w) x [0, h)."""
    x1, y1, z1 = p1
    x2, y2, z2 = p2
    dx, dy = x2 - x1, y2 - y1
    t0, t1 = 0.0, 1.0
    for p, q in ((-dx, x1), (dx, w - 1 - x1), (-dy, y1), (dy, h - 1 - y1)):
        if p == 0:
            if q < 0:
                return None
            continue
        r = q / p
        if p < 0:
            if r > t1:
                return None
            t0 = max(t0, r)
        else:
            if r < t0:
                return None
            t1 = min(t1, r)
    dz = z2 - z1
    return ((x1 + t0 * dx, y1 + t0 * dy, z1 + t0 * dz),
            (x1 + t1 * dx, y1 + t1 * dy, z1 + t1 * dz))


def render_cell_ascii(mask: int) -> str:
    """Map a 2x4 cell mask to an ASCII character by pixel density."""
    if not mask:
        return ' '
    chars = " .:-=+*#%@"
    density = bin(mask).count('1')
    return chars[density] if density < len(chars) else '@'


def render_cell_braille(mask: int) -> str:
    """Renders a 2x4 cell mask as a Unicode Braille character."""
    if not mask:
        return ' '
    b = sum(Canvas.BRAILLE_REMAP[i] for i in range(8) if mask & (1 << i))
    return chr(0x2800 + b)
