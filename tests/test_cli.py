import logging

import pytest

from wireframe_scene.cli import build_parser, config_from_args, main


def test_check_prints_display_list(write_scene, capsys):
    path = write_scene("move = 1,2,3\nrotate = 90,0,0\nshape = box\n\nshape = sphere")
    assert main([str(path), "--check"]) == 0
    out = capsys.readouterr().out
    assert "[0] line 1: shape=box rotate(90, 0, 0) move(1, 2, 3)" in out
    assert "[1] line 5: shape=sphere" in out
    assert "2 objects, 0 errors" in out


def test_check_exit_code_reflects_errors(write_scene, capsys):
    path = write_scene("shape = pyramid")
    assert main([str(path), "--check"]) == 1
    out = capsys.readouterr().out
    assert 'semantic: Invalid shape on line 1: "pyramid"' in out


def test_expand_prints_source_numbers(write_scene, capsys):
    path = write_scene("loop i from 1 to 2\nmove = i, 0, 0\nend\ngroup\nend")
    assert main([str(path), "--expand"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines == [
        "    2 | move = 1, 0, 0",
        "    2 | move = 2, 0, 0",
        "    4 | command = push",
        "    5 | command = pop",
    ]


def test_expand_reports_limit(write_scene, capsys):
    path = write_scene("loop i from 1 to 10\nv = i\nend")
    assert main([str(path), "--expand", "--max-lines", "3"]) == 1
    assert capsys.readouterr().out.startswith("resource-limit:")


def test_missing_file_exit_code(tmp_path, capsys):
    assert main([str(tmp_path / "nope.ini"), "--check"]) == 2
    assert "cannot read" in capsys.readouterr().err


def test_bad_color_flag_is_rejected():
    with pytest.raises(SystemExit) as excinfo:
        build_parser().parse_args(["--stroke-color", "chartreuse!"])
    assert excinfo.value.code == 2


def test_flags_override_config():
    args = build_parser().parse_args(
        ["s.ini", "--ascii", "--no-color", "--no-cull", "--bg-color", "#000",
         "--max-iterations", "7"])
    config = config_from_args(args)
    assert not config.use_braille and not config.use_color
    assert not config.use_culling and config.use_zbuffer
    assert config.background_color == (0, 0, 0)
    assert config.stroke_color == (0xD0, 0xDD, 0x14)
    assert config.parse_limits == {'max_lines': 100_000, 'max_iterations': 7}


def test_log_file(write_scene, tmp_path):
    log_path = tmp_path / "run.log"
    path = write_scene("shape = box")
    main([str(path), "--check", "--log-level", "DEBUG", "--log-file", str(log_path)])
    logging.getLogger("wireframe_scene").handlers[-1].close()
    assert "Parsed 1 scene objects" in log_path.read_text()
