#
# PROJECT: wireframe-scene-viewer
# MODULE: wireframe_scene/cli.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-19
#

import argparse
import curses
import logging
import sys

from .color import parse_hex_color
from .config import ViewerConfig
from .errors import ErrorKind, UnrollLimitError
from .loader import SceneLoader
from .logging_config import setup_logging
from .preprocessor import DEFAULT_MAX_ITERATIONS, DEFAULT_MAX_LINES, expand
from .viewer import main as viewer_main

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_SCENE_ERRORS = 1
EXIT_IO_ERROR = 2


def hex_color(value):
    rgb = parse_hex_color(value)
    if rgb is None:
        raise argparse.ArgumentTypeError(f"invalid hex color: {value!r}")
    return rgb


def build_parser():
    epilog = """\
examples:
  %(prog)s                                   View ./scene.ini
  %(prog)s rings.ini --ascii --no-color      ASCII, monochrome
  %(prog)s rings.ini --check                 Print display list and errors
  %(prog)s rings.ini --expand                Print unrolled lines with source numbers
  %(prog)s rings.ini --log-file viewer.log --log-level DEBUG
"""
    parser = argparse.ArgumentParser(
        prog="wireframe-scene",
        description="Terminal wireframe viewer for scene.ini files",
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument("scene", nargs='?', default="scene.ini",
                        help="Path to the scene file (default: scene.ini)")

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--check", action="store_true",
                      help="Compile the scene, print objects and errors, exit 1 on errors")
    mode.add_argument("--expand", action="store_true",
                      help="Print the preprocessed lines with source line numbers")

    parser.add_argument("--max-lines", type=int, default=DEFAULT_MAX_LINES,
                        help=f"Cap on unrolled lines (default: {DEFAULT_MAX_LINES})")
    parser.add_argument("--max-iterations", type=int, default=DEFAULT_MAX_ITERATIONS,
                        help=f"Cap on iterations of one loop (default: {DEFAULT_MAX_ITERATIONS})")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging level (default: WARNING)")
    parser.add_argument("--log-file", help="Write log records to this file")

    parser.add_argument("--no-color", action="store_true",
                        help="Disable color output")
    parser.add_argument("--ascii", action="store_true",
                        help="Use ASCII characters instead of Braille")
    parser.add_argument("--no-zbuffer", action="store_true",
                        help="Disable the depth pre-pass")
    parser.add_argument("--no-cull", action="store_true",
                        help="Disable backface culling")
    parser.add_argument("--stroke-color", type=hex_color, default="#D0DD14",
                        help="Default stroke color in hex #RRGGBB (default: #D0DD14)")
    parser.add_argument("--bg-color", type=hex_color, default="#0E0E2C",
                        help="Default background in hex #RRGGBB (default: #0E0E2C)")
    return parser


def config_from_args(args) -> ViewerConfig:
    """Terminal guess first, then explicit flags win."""
    config = ViewerConfig.detect_terminal()
    if args.no_color:
        config.use_color = False
    if args.ascii:
        config.use_braille = False
    config.use_zbuffer = not args.no_zbuffer
    config.use_culling = not args.no_cull
    config.stroke_color = args.stroke_color
    config.background_color = args.bg_color
    config.max_unrolled_lines = args.max_lines
    config.max_loop_iterations = args.max_iterations
    return config


def _read(path: str) -> str:
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def _format_object(index: int, obj) -> str:
    parts = [f"{key}={', '.join(v) if isinstance(v, list) else v}"
             for key, v in obj.fields.items()]
    for op in obj.transforms:
        parts.append(f"{op.kind}({', '.join(op.values)})")
    return f"[{index}] line {obj.start_line}: " + ' '.join(parts)


def run_check(path: str, config: ViewerConfig, out=None) -> int:
    out = out or sys.stdout
    scene = SceneLoader(config).load(path)
    for i, obj in enumerate(scene.objects):
        print(_format_object(i, obj), file=out)
    for error in scene.errors:
        print(f"{error.kind.value}: {error.message}", file=out)
    print(f"{len(scene.objects)} objects, {len(scene.errors)} errors", file=out)
    return EXIT_SCENE_ERRORS if scene.errors else EXIT_OK


def run_expand(path: str, config: ViewerConfig, out=None) -> int:
    out = out or sys.stdout
    try:
        result = expand(_read(path), **config.parse_limits)
    except UnrollLimitError as e:
        print(f"{ErrorKind.RESOURCE_LIMIT.value}: {e}", file=out)
        return EXIT_SCENE_ERRORS
    for number, text in zip(result.line_map, result.lines):
        print(f"{number:5d} | {text}", file=out)
    for error in result.errors:
        print(f"{error.kind.value}: {error.message}", file=out)
    return EXIT_SCENE_ERRORS if result.errors else EXIT_OK


def run_viewer(path: str, config: ViewerConfig) -> int:
    try:
        curses.wrapper(lambda s: viewer_main(s, path, config))
    except KeyboardInterrupt:
        pass
    return EXIT_OK


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    interactive = not (args.check or args.expand)
    # The curses screen owns the terminal, so the viewer logs to file only.
    setup_logging(getattr(logging, args.log_level), args.log_file,
                  console=not interactive)

    config = config_from_args(args)

    try:
        if args.check:
            return run_check(args.scene, config)
        if args.expand:
            return run_expand(args.scene, config)
        _read(args.scene)
    except OSError as e:
        logger.debug(f"Cannot read scene '{args.scene}': {e}")
        print(f"Error: cannot read {args.scene}: {e.strerror or e}", file=sys.stderr)
        return EXIT_IO_ERROR

    return run_viewer(args.scene, config)
