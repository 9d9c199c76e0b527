import pytest

from wireframe_scene.canvas import (
    Canvas, clip_segment, render_cell_ascii, render_cell_braille,
)


def test_horizontal_line_fills_top_dots():
    canvas = Canvas(20, 8)
    idx = canvas.color_index((255, 0, 0))
    canvas.draw_line((0, 0, 1), (19, 0, 1), idx)
    assert canvas.to_text(braille=False)[0].startswith(':' * 10)
    assert canvas.to_text()[0][0] == render_cell_braille(0x11)
    assert all(mask == 0x11 for _, _, mask, _ in canvas.cells())


def test_palette_indices_are_stable():
    canvas = Canvas(4, 4)
    assert canvas.color_index((1, 2, 3)) == 0
    assert canvas.color_index((4, 5, 6)) == 1
    assert canvas.color_index((1, 2, 3)) == 0
    assert canvas.palette == [(1, 2, 3), (4, 5, 6)]


def test_depth_fill_hides_lines_behind_it():
    canvas = Canvas(40, 40)
    canvas.fill_triangle_depth((0, 0, 1), (39, 0, 1), (0, 39, 1))
    canvas.draw_line((2, 5, 5), (10, 5, 5), 0)
    assert list(canvas.cells()) == []
    # an edge lying on the filled surface still shows
    canvas.draw_line((2, 5, 1), (10, 5, 1), 0)
    assert list(canvas.cells())


def test_nearest_pixel_owns_cell_color():
    canvas = Canvas(2, 4)
    canvas.set_pixel(0, 0, 500, 1)
    canvas.set_pixel(1, 0, 100, 2)
    canvas.set_pixel(0, 1, 900, 3)
    assert list(canvas.cells()) == [(0, 0, 0b10011, 2)]


def test_thick_lines():
    thin, thick = Canvas(20, 20), Canvas(20, 20)
    thin.draw_line((0, 10, 1), (19, 10, 1), 0)
    thick.draw_line((0, 10, 1), (19, 10, 1), 0, thickness=3)
    assert sum(bin(m).count('1') for _, _, m, _ in thick.cells()) == \
        3 * sum(bin(m).count('1') for _, _, m, _ in thin.cells())


def test_clip_segment():
    (a, b) = clip_segment((-10, 5, 1), (30, 5, 3), 20, 10)
    assert a[0] == 0 and b[0] == pytest.approx(19)
    assert a[2] == 1.5
    assert clip_segment((-5, -5, 1), (-1, -1, 1), 20, 10) is None


def test_cell_glyphs():
    assert render_cell_ascii(0) == ' '
    assert render_cell_ascii(0xFF) == '@'
    assert render_cell_braille(0) == ' '
    assert render_cell_braille(0xFF) == chr(0x28FF)
    assert render_cell_braille(0x01) == chr(0x2801)
