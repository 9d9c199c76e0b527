#
# PROJECT: wireframe-scene-viewer
# MODULE: wireframe_scene/mesh.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-19
#

import logging
import math
from typing import NamedTuple

logger = logging.getLogger(__name__)

# Faces are wound so that (v1 - v0) x (v2 - v0) points outwards.


class Mesh:
    """
    Polygon mesh plus optional loose line segments.

    closed meshes can be back-face culled; open ones (plane, grid) never are.
    """

    def __init__(self, vertices=None, faces=None, edges=None, closed=True):
        self.vertices = vertices or []
        self.faces = faces or []
        self.edges = edges or []
        self.closed = closed

    def __repr__(self):
        return (f"Mesh(V:{len(self.vertices)} F:{len(self.faces)} "
                f"E:{len(self.edges)})")

    # ── Primitives (p5 default sizes) ───────────────────────────────────

    @classmethod
    def box(cls, size=50.0):
        h = size / 2.0
        vertices = [
            [-h, -h, -h], [ h, -h, -h], [ h,  h, -h], [-h,  h, -h],
            [-h, -h,  h], [ h, -h,  h], [ h,  h,  h], [-h,  h,  h],
        ]
        faces = [
            [0, 3, 2, 1],  # -z
            [4, 5, 6, 7],  # +z
            [0, 4, 7, 3],  # -x
            [1, 2, 6, 5],  # +x
            [0, 1, 5, 4],  # -y
            [3, 7, 6, 2],  # +y
        ]
        return cls(vertices, faces)

    @classmethod
    def sphere(cls, radius=50.0, segments=12, rings=8):
        profile = [(radius * math.sin(math.pi * k / rings),
                    radius * math.cos(math.pi * k / rings)) for k in range(rings + 1)]
        return cls._revolve(profile, segments)

    @classmethod
    def torus(cls, radius=50.0, tube=20.0, segments=16, sides=8):
        profile = [(radius + tube * math.cos(2 * math.pi * k / sides),
                    -tube * math.sin(2 * math.pi * k / sides)) for k in range(sides)]
        return cls._revolve(profile, segments, wrap=True)

    @classmethod
    def cone(cls, radius=50.0, height=100.0, segments=16):
        h = height / 2.0
        return cls._revolve([(0.0, h), (radius, h), (0.0, -h)], segments)

    @classmethod
    def cylinder(cls, radius=50.0, height=100.0, segments=16):
        h = height / 2.0
        return cls._revolve([(0.0, h), (radius, h), (radius, -h), (0.0, -h)], segments)

    @classmethod
    def plane(cls, size=100.0):
        h = size / 2.0
        vertices = [[-h, -h, 0.0], [h, -h, 0.0], [h, h, 0.0], [-h, h, 0.0]]
        return cls(vertices, [[0, 1, 2, 3]], closed=False)

    @classmethod
    def grid(cls, extent=500, spacing=100):
        vertices = []
        edges = []
        for i in range(-extent, extent + 1, spacing):
            for a, b in (((i, 0, -extent), (i, 0, extent)),
                         ((-extent, 0, i), (extent, 0, i))):
                edges.append((len(vertices), len(vertices) + 1))
                vertices.extend([list(map(float, a)), list(map(float, b))])
        return cls(vertices, edges=edges, closed=False)

    @classmethod
    def _revolve(cls, profile, segments, wrap=False):
        """
        Sweep a (radius, y) profile around the Y axis. The profile runs so that
        the outside lies to its left; a zero radius collapses the ring to one
        vertex. wrap joins the last ring back to the first (torus).
        """
        vertices = []
        rings = []
        for r, y in profile:
            if r == 0:
                rings.append([len(vertices)] * segments)
                vertices.append([0.0, y, 0.0])
                continue
            ring = []
            for j in range(segments):
                phi = 2 * math.pi * j / segments
                ring.append(len(vertices))
                vertices.append([r * math.cos(phi), y, r * math.sin(phi)])
            rings.append(ring)

        pairs = list(zip(rings, rings[1:]))
        if wrap:
            pairs.append((rings[-1], rings[0]))

        faces = []
        for upper, lower in pairs:
            for j in range(segments):
                k = (j + 1) % segments
                quad = [upper[j], upper[k], lower[k], lower[j]]
                face = [v for n, v in enumerate(quad) if v != quad[n - 1]]
                if len(face) >= 3:
                    faces.append(face)
        return cls(vertices, faces)

    # ── OBJ files ───────────────────────────────────────────────────────

    @classmethod
    def from_obj(cls, filename):
        """Load `v`/`f` records from an OBJ file; falls back to a box on failure."""
        vertices, faces = [], []
        try:
            with open(filename, 'r') as f:
                for line in f:
                    if line.startswith('v '):
                        vertices.append([float(x) for x in line.split()[1:4]])
                    elif line.startswith('f '):
                        # v/vt/vn: keep the vertex index; negatives count from the end
                        face = []
                        for part in line.split()[1:]:
                            idx = int(part.split('/')[0])
                            face.append(idx - 1 if idx > 0 else len(vertices) + idx)
                        faces.append(face)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not load model '{filename}': {e}")
            return cls.box()

        if not vertices or not faces:
            logger.warning(f"Model '{filename}' has no geometry, using a box")
            return cls.box()
        logger.debug(f"Loaded model '{filename}': {len(vertices)} vertices, {len(faces)} faces")
        # Arbitrary OBJ winding: never cull.
        return cls(vertices, faces, closed=False)


PRIMITIVES = {
    'box': Mesh.box,
    'torus': Mesh.torus,
    'cone': Mesh.cone,
    'cylinder': Mesh.cylinder,
    'sphere': Mesh.sphere,
    'plane': Mesh.plane,
    'grid': Mesh.grid,
}


class ModelAssets(NamedTuple):
    kit: str
    model: str
    texture: str


def model_asset_paths(path: str) -> ModelAssets:
    """
    Split a `model` value into its kit directory and model name.

    'kenney/models/tree.obj' -> kit 'kenney/models', model 'tree',
    texture 'kenney/models/textures/tree.png'.
    """
    kit, _, filename = path.rpartition('/')
    model = filename.split('.', 1)[0]
    texture = f"{kit}/textures/{model}.png" if kit else f"textures/{model}.png"
    return ModelAssets(kit, model, texture)
