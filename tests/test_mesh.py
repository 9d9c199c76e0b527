import logging

import pytest

from wireframe_scene.math_utils import Vec3
from wireframe_scene.mesh import PRIMITIVES, Mesh, model_asset_paths


@pytest.mark.parametrize("name", ['box', 'sphere', 'cone', 'cylinder'])
def test_closed_primitives_face_outwards(name):
    mesh = PRIMITIVES[name]()
    assert mesh.closed
    for face in mesh.faces:
        a, b, c = (Vec3(*mesh.vertices[i]) for i in face[:3])
        normal = (b - a).cross(c - a)
        centroid = Vec3(*(sum(mesh.vertices[i][k] for i in face) / len(face) for k in range(3)))
        assert normal.dot(centroid) > 0


def test_default_sizes():
    box = Mesh.box()
    assert max(v[0] for v in box.vertices) == 25.0
    sphere = Mesh.sphere()
    assert max(v[1] for v in sphere.vertices) == pytest.approx(50.0)
    cylinder = Mesh.cylinder()
    assert {v[1] for v in cylinder.vertices} == {50.0, -50.0}


def test_degenerate_quads_become_triangles():
    cone = Mesh.cone(segments=8)
    assert all(len(face) in (3, 4) for face in cone.faces)
    assert sum(1 for face in cone.faces if len(face) == 3) == 16


def test_open_primitives():
    plane = Mesh.plane()
    assert not plane.closed and len(plane.faces) == 1
    grid = Mesh.grid()
    assert not grid.closed
    assert grid.faces == []
    assert len(grid.edges) == 22


def test_torus_wraps():
    torus = Mesh.torus(segments=16, sides=8)
    assert len(torus.vertices) == 128
    assert len(torus.faces) == 128


def test_from_obj(tmp_path):
    path = tmp_path / "tri.obj"
    path.write_text("# tri\nv 0 0 0\nv 1 0 0\nv 0 1 0\nvt 0 0\nf 1/1/1 2/1/1 -1/1/1\n")
    mesh = Mesh.from_obj(str(path))
    assert len(mesh.vertices) == 3
    assert mesh.faces == [[0, 1, 2]]
    assert not mesh.closed


def test_from_obj_falls_back_to_box(tmp_path, caplog):
    with caplog.at_level(logging.WARNING):
        mesh = Mesh.from_obj(str(tmp_path / "missing.obj"))
    assert len(mesh.vertices) == 8
    assert "missing.obj" in caplog.text


@pytest.mark.parametrize("path,expected", [
    ("kenney/models/tree.obj", ("kenney/models", "tree", "kenney/models/textures/tree.png")),
    ("kit/rock.large.obj", ("kit", "rock", "kit/textures/rock.png")),
    ("tree.obj", ("", "tree", "textures/tree.png")),
])
def test_model_asset_paths(path, expected):
    assert tuple(model_asset_paths(path)) == expected
