#
# PROJECT: wireframe-scene-viewer
# MODULE: wireframe_scene/config.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-19
#

import os
from dataclasses import dataclass
from typing import Tuple

from .preprocessor import DEFAULT_MAX_ITERATIONS, DEFAULT_MAX_LINES

RGB = Tuple[int, int, int]


@dataclass
class ViewerConfig:
    """Settings for scene compilation and the terminal renderer."""
    use_color: bool = True
    use_braille: bool = True
    use_zbuffer: bool = True
    use_culling: bool = True
    near_clip: float = 1.0
    far_plane: float = 5000.0

    # Per-frame style defaults, restored before the display list runs
    stroke_color: RGB = (0xD0, 0xDD, 0x14)
    background_color: RGB = (0x0E, 0x0E, 0x2C)
    stroke_weight: float = 2.0

    # Loop unrolling limits
    max_unrolled_lines: int = DEFAULT_MAX_LINES
    max_loop_iterations: int = DEFAULT_MAX_ITERATIONS

    @property
    def parse_limits(self) -> dict:
        return {'max_lines': self.max_unrolled_lines,
                'max_iterations': self.max_loop_iterations}

    @classmethod
    def detect_terminal(cls) -> 'ViewerConfig':
        """
        Guess terminal capabilities from TERM and LANG.
        Accurate color detection needs curses, so this is a pre-init guess.
        """
        term = os.environ.get('TERM', '').lower()
        lang = os.environ.get('LANG', '').lower()

        is_dumb = term in ('dumb', 'unknown')
        is_linux_console = term == 'linux'
        supports_utf8 = 'utf-8' in lang or 'utf8' in lang

        return cls(
            use_color=not is_dumb,
            # Linux console font often lacks braille
            use_braille=supports_utf8 and not is_linux_console,
        )
