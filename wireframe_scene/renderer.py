#
# PROJECT: wireframe-scene-viewer
# MODULE: wireframe_scene/renderer.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-19
#

import curses
import logging
import math
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Tuple

from .camera import Camera
from .canvas import Canvas, render_cell_ascii, render_cell_braille
from .color import ColorPairs, scale_rgb
from .config import ViewerConfig
from .expression import ExpressionEvaluator
from .math_utils import MatrixStack, Vec3
from .mesh import PRIMITIVES, Mesh
from .parser import SceneObject

logger = logging.getLogger(__name__)

AMBIENT = 0.25
# Direction the light travels, in camera space (+Z is into the screen).
LIGHT_DIR = Vec3(0.5, 0.5, 1.0).normalize()
MODEL_SCALE = 100.0

RGB = Tuple[int, int, int]


@dataclass
class Style:
    """Drawing state saved and restored by push/pop."""
    stroke: Optional[RGB]
    fill: bool = True
    shade: bool = False
    stroke_weight: float = 2.0


class Projection:
    """Perspective projection from camera space to canvas pixels."""

    def __init__(self, w: int, h: int, fov: float):
        self.f = 1.0 / math.tan(math.radians(fov) / 2.0)
        self.aspect = w / h
        self.half_w = w * 0.5
        self.half_h = h * 0.5

    def __call__(self, p):
        x, y, z = p
        return ((x * self.f / self.aspect / z) * self.half_w + self.half_w,
                (y * self.f / z) * self.half_h + self.half_h,
                z)


class SceneRenderer:
    """
    Interprets a display list onto a Canvas each frame.

    Per object, in order: background, stroke weight/stroke/fill/shade and
    anaglyph state, then the shape or model inside its own matrix scope.
    `command = push` / `pop` objects open and close a scope regardless of
    their other fields. An object that fails to evaluate is skipped and the
    rest of the list is still drawn.
    """

    def __init__(self, config: ViewerConfig, evaluator: Optional[ExpressionEvaluator] = None):
        self.config = config
        self.evaluator = evaluator or ExpressionEvaluator()
        self.background = config.background_color
        self.stereo = False
        self.failures = 0
        self._primitives: Dict[str, Mesh] = {}

    def primitive(self, name) -> Optional[Mesh]:
        mesh = self._primitives.get(name)
        if mesh is None and name in PRIMITIVES:
            mesh = self._primitives[name] = PRIMITIVES[name]()
        return mesh

    # ── Display list ────────────────────────────────────────────────────

    def draw(self, canvas: Canvas, objects: List[SceneObject], camera: Camera,
             t: float = 0.0, meshes: Optional[Dict[str, Mesh]] = None):
        cfg = self.config
        self.background = cfg.background_color
        stack = MatrixStack()
        styles: List[Style] = []
        style = Style(cfg.stroke_color, stroke_weight=cfg.stroke_weight)
        view = camera.view_matrix()
        project = Projection(canvas.w, canvas.h, camera.fov)
        meshes = meshes or {}

        failures = 0
        for obj in objects:
            try:
                style = self._draw_object(obj, canvas, stack, style, styles,
                                          view, project, meshes, t)
            except Exception as e:  # one bad object must not blank the frame
                failures += 1
                logger.debug(f"Skipped object from line {obj.start_line}: {e!r}")
        self.failures = failures

    def _draw_object(self, obj, canvas, stack, style, styles, view, project, meshes, t):
        if 'background' in obj:
            value = obj['background']
            if value != 'off':
                self.background = self._color(value, t)
            return style

        command = obj.command
        if command == 'pop':
            if not styles:
                raise IndexError(f"'pop' on line {obj.line_of('command')} without a matching push")
            stack.pop()
            style = styles.pop()
        elif command == 'push':
            stack.push()
            styles.append(style)
            style = replace(style)
            self._apply_transforms(stack, obj, t)

        if 'strokeWeight' in obj:
            style.stroke_weight = self.evaluator.number(obj['strokeWeight'], t=t)
        if 'stroke' in obj:
            value = obj['stroke']
            style.stroke = None if value == 'off' else self._color(value, t)
        if 'fill' in obj:
            value = obj['fill']
            if value != 'off':
                self._color(value, t)
            style.fill = value != 'off'
        if 'shade' in obj:
            style.shade = obj['shade'] != 'off'
        if 'anaglyph' in obj:
            self.stereo = obj['anaglyph'] == 'on'

        if command is None and (obj.shape or obj.model):
            stack.push()
            try:
                self._apply_transforms(stack, obj, t)
                mesh = self._mesh_for(obj, stack, meshes)
                if mesh is not None:
                    self._draw_mesh(canvas, mesh, view @ stack.top, style, project)
            finally:
                stack.pop()
        return style

    def _mesh_for(self, obj, stack, meshes) -> Optional[Mesh]:
        if obj.shape:
            return self.primitive(obj.shape) if isinstance(obj.shape, str) else None
        mesh = meshes.get(obj.model) if isinstance(obj.model, str) else None
        if mesh is not None:
            stack.scale(MODEL_SCALE, MODEL_SCALE, MODEL_SCALE)
        return mesh

    def _apply_transforms(self, stack, obj, t):
        for op in obj.transforms:
            x, y, z = (self.evaluator.number(v, t=t) for v in op.values)
            if op.kind == 'move':
                stack.translate(x, y, z)
            elif op.kind == 'rotate':
                stack.rotate_degrees(x, y, z)
            elif op.kind == 'scale':
                stack.scale(x, y, z)

    def _color(self, value, t) -> RGB:
        """A 3-item list is RGB in 0..1; anything else goes to the evaluator."""
        if isinstance(value, list):
            if len(value) != 3:
                raise ValueError(f"Expected 3 color components, got {len(value)}")
            return tuple(int(round(max(0.0, min(1.0, self.evaluator.number(v, t=t))) * 255))
                         for v in value)
        return self.evaluator.color(value, t=t)

    # ── Geometry ────────────────────────────────────────────────────────

    def _draw_mesh(self, canvas: Canvas, mesh: Mesh, model_view, style: Style,
                   project: Projection):
        cfg = self.config
        cam = [model_view.apply(*v) for v in mesh.vertices]
        pts = [project(p) if cfg.near_clip < p[2] < cfg.far_plane else None for p in cam]

        stroke_idx = canvas.color_index(style.stroke) if style.stroke else None
        thickness = max(1, min(4, int(style.stroke_weight) // 2))
        cull = cfg.use_culling and mesh.closed

        for face in mesh.faces:
            poly = [pts[i] for i in face]
            if any(p is None for p in poly):
                continue
            normal = None
            if cull or style.shade:
                a, b, c = (Vec3(*cam[i]) for i in face[:3])
                normal = (b - a).cross(c - a)
                if cull and normal.dot(a) >= 0:
                    continue

            if style.fill and cfg.use_zbuffer:
                for k in range(1, len(poly) - 1):
                    canvas.fill_triangle_depth(poly[0], poly[k], poly[k + 1])

            if stroke_idx is None:
                continue
            idx = stroke_idx
            if style.shade:
                lit = max(0.0, -normal.normalize().dot(LIGHT_DIR))
                level = round((AMBIENT + (1.0 - AMBIENT) * lit) * 8) / 8
                idx = canvas.color_index(scale_rgb(style.stroke, level))
            for k in range(len(poly)):
                canvas.draw_line(poly[k], poly[(k + 1) % len(poly)], idx, thickness)

        if stroke_idx is not None:
            for i, j in mesh.edges:
                if pts[i] is not None and pts[j] is not None:
                    canvas.draw_line(pts[i], pts[j], stroke_idx, thickness)

    # ── Terminal output ─────────────────────────────────────────────────

    def present(self, stdscr, canvas: Canvas, pairs: ColorPairs):
        """
        Copy the canvas to the curses screen below the HUD row.
        Does NOT call stdscr.refresh(); the caller draws overlays first.
        """
        th, tw = stdscr.getmaxyx()
        stdscr.erase()

        use_color = self.config.use_color and pairs.enabled
        if use_color:
            pairs.set_background(self.background)
            try:
                stdscr.bkgd(' ', pairs.background_attr())
            except curses.error:
                pass

        render = render_cell_braille if self.config.use_braille else render_cell_ascii
        palette = canvas.palette
        plain = curses.color_pair(0)
        for cy, cx, mask, idx in canvas.cells():
            if cy >= th - 2 or cx >= tw - 1:
                continue
            attr = pairs.pair_for(palette[idx]) if use_color and palette else plain
            try:
                stdscr.addstr(cy + 1, cx, render(mask), attr)
            except curses.error:
                pass

    def frame(self, stdscr, objects, camera, pairs: ColorPairs, t=0.0, meshes=None):
        """Draw one frame sized to the terminal."""
        th, tw = stdscr.getmaxyx()
        w = (tw - 1) * 2
        h = (th - 2) * 4
        if w <= 0 or h <= 0:
            return None
        canvas = Canvas(w, h)
        self.draw(canvas, objects, camera, t, meshes)
        self.present(stdscr, canvas, pairs)
        return canvas
