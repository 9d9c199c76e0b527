import pytest

from wireframe_scene.errors import ErrorKind, UnrollLimitError
from wireframe_scene.preprocessor import LoopFrame, expand, split_lines, substitute


def lines_of(text):
    return text.split('\n')


@pytest.mark.parametrize("start,stop,step", [
    (1, 5, 1), (0, 10, 3), (2, 2, 1), (-3, 3, 2), (5, 1, -1), (10, 0, -4),
])
def test_repetition_count(start, stop, step):
    src = f"loop i from {start} to {stop} step {step}\nv = i\nend"
    result = expand(src)
    assert len(result.lines) == (stop - start) // step + 1
    assert result.errors == []


def test_step_is_inferred_from_direction():
    assert expand("loop i from 3 to 1\nv = i\nend").lines == ['v = 3', 'v = 2', 'v = 1']
    assert expand("loop i from 1 to 3\nv = i\nend").lines == ['v = 1', 'v = 2', 'v = 3']


def test_step_away_from_bound_runs_zero_times():
    result = expand("loop i from 1 to 5 step -1\nv = i\nend")
    assert result.lines == []
    assert result.errors == []


def test_innermost_binding_wins():
    src = "loop i from 1 to 2\nloop i from 7 to 7\nv = i\nend\nend"
    assert expand(src).lines == ['v = 7', 'v = 7']


def test_outer_variable_visible_in_inner_body():
    src = "loop i from 1 to 2\nloop j from 1 to 2\np = i, j\nend\nend"
    assert expand(src).lines == ['p = 1, 1', 'p = 1, 2', 'p = 2, 1', 'p = 2, 2']


def test_inner_bound_can_reference_outer_variable():
    src = "loop i from 1 to 3\nloop j from 1 to i\np = i\nend\nend"
    assert expand(src).lines == ['p = 1', 'p = 2', 'p = 2', 'p = 3', 'p = 3', 'p = 3']


def test_substitution_is_whole_word():
    assert substitute("move = i, i2, xi, i_", {'i': 4}) == "move = 4, i2, xi, i_"


def test_line_map_points_at_body_lines():
    src = "a = 1\nloop i from 1 to 2\nmove = i, 0, 0\nshape = box\nend\nb = 2"
    result = expand(src)
    assert result.lines == ['a = 1', 'move = 1, 0, 0', 'shape = box',
                            'move = 2, 0, 0', 'shape = box', 'b = 2']
    assert result.line_map == [1, 3, 4, 3, 4, 6]


def test_plain_lines_round_trip():
    src = "shape = box\n\n  fill = red\n; comment\nmove = 1,2,3"
    result = expand(src)
    assert result.lines == lines_of(src)
    assert result.line_map == [1, 2, 3, 4, 5]
    assert result.errors == []


def test_base_line_offsets_numbers():
    result = expand(["x = 1", "y = 2"], base_line=10)
    assert result.line_map == [10, 11]


def test_step_zero_is_one_error_and_no_output():
    src = "loop i from 1 to 3 step 0\nv = i\nend\nafter = 1"
    result = expand(src)
    assert result.lines == ['after = 1']
    assert result.line_map == [4]
    assert len(result.errors) == 1
    assert result.errors[0].kind is ErrorKind.STRUCTURAL
    assert result.errors[0].line == 1
    assert "line 1" in result.errors[0].message


def test_unbound_loop_bound_is_structural():
    result = expand("loop i from 0 to n\nv = i\nend")
    assert result.lines == []
    assert [e.kind for e in result.errors] == [ErrorKind.STRUCTURAL]
    assert '"n"' in result.errors[0].message


def test_malformed_header():
    result = expand("loop i to 3\nend")
    assert result.lines == []
    assert len(result.errors) == 1
    assert "Invalid loop header on line 1" in result.errors[0].message


def test_missing_end_for_loop_skips_header_only():
    result = expand("loop i from 1 to 2\nv = i")
    assert result.lines == ['v = i']
    assert result.line_map == [2]
    assert [e.message for e in result.errors] == ["Missing 'end' for loop opened on line 1"]


def test_group_lowering_keeps_indentation():
    result = expand("group\n  shape = box\n  end")
    assert result.lines == ['command = push', '  shape = box', '  command = pop']
    assert result.errors == []


def test_group_inside_loop_is_balanced():
    src = "loop i from 1 to 2\ngroup\nmove = i\nend\nend"
    result = expand(src)
    assert result.lines == ['command = push', 'move = 1', 'command = pop',
                            'command = push', 'move = 2', 'command = pop']
    assert result.errors == []


def test_each_unclosed_group_is_one_error():
    result = expand("group\ngroup\nshape = box\nend")
    assert result.lines == ['command = push', 'command = push', 'shape = box', 'command = pop']
    assert [e.message for e in result.errors] == ["Missing 'end' for group opened on line 1"]


def test_stray_end_is_kept_and_reported():
    result = expand("shape = box\nend\nfill = red")
    assert result.lines == ['shape = box', 'end', 'fill = red']
    assert len(result.errors) == 1
    assert result.errors[0].kind is ErrorKind.STRUCTURAL
    assert result.errors[0].line == 2


def test_loop_frame_counts():
    frame = LoopFrame('i', 0, 9, 3, 1, [])
    assert frame.count() == 4
    assert list(frame.iterations()) == [0, 3, 6, 9]
    assert LoopFrame('i', 5, 1, 2, 1, []).count() == 0


def test_iteration_limit():
    with pytest.raises(UnrollLimitError) as excinfo:
        expand("loop i from 1 to 100\nv = i\nend", max_iterations=50)
    assert excinfo.value.line == 1


def test_line_limit_counts_nested_output():
    src = "loop i from 1 to 30\nloop j from 1 to 30\nv = i\nend\nend"
    with pytest.raises(UnrollLimitError):
        expand(src, max_lines=500)
    assert len(expand(src, max_lines=900).lines) == 900


def test_limits_are_per_call():
    src = "loop i from 1 to 10\nv = i\nend"
    for _ in range(3):
        assert len(expand(src, max_lines=10).lines) == 10


def test_split_lines_only_breaks_on_newlines():
    assert split_lines("a\r\nb\x0bc d\x85e\n") == ['a', 'b\x0bc d\x85e']
    assert split_lines("a\n\n") == ['a', '']
    assert split_lines("") == ['']


def test_form_feed_does_not_shift_line_numbers():
    result = expand("a = 1\x0c2\nb = 2")
    assert result.lines == ['a = 1\x0c2', 'b = 2']
    assert result.line_map == [1, 2]


def test_object_declaring_loop_iterations_are_marked():
    src = "x = 1\nloop i from 1 to 2\nmove = i\nshape = box\nend"
    assert expand(src).breaks == [1, 3]
    assert expand("loop i from 1 to 3\nrotate = i\nend").breaks == []


def test_nested_iteration_marks():
    src = "loop i from 1 to 2\nloop j from 1 to 2\nshape box\nend\nend"
    assert expand(src).breaks == [0, 1, 2, 3]
